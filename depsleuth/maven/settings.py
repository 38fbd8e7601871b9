"""Reading the user's Maven settings: mirrors and the local repository."""

from __future__ import annotations

import os
import sys
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field

from depsleuth.common import use_logger
from depsleuth.maven.errors import MavenError
from depsleuth.maven.mvn_command import check_mvn_command
from depsleuth.utils import is_file

_DEFAULT_REPO = ".m2/repository"


@dataclass
class UserConfig:
    """Remote repositories to query and the local repository directory."""

    remotes: list[str] = field(default_factory=list)
    repo: str = ""

    def __str__(self) -> str:
        return f"[Repo={self.repo}, Mirrors={','.join(self.remotes)}]"


def _local(tag: object) -> str:
    return tag.rsplit("}", 1)[-1] if isinstance(tag, str) else ""


def _children(element: ET.Element | None, name: str) -> list[ET.Element]:
    if element is None:
        return []
    return [child for child in element if _local(child.tag) == name]


def _child(element: ET.Element | None, name: str) -> ET.Element | None:
    found = _children(element, name)
    return found[0] if found else None


def _inner_text(element: ET.Element) -> str:
    return "".join(element.itertext())


def _default_user_config(maven_central: str) -> UserConfig:
    return UserConfig(remotes=[maven_central] if maven_central else [], repo=_DEFAULT_REPO)


def parse_settings(data: bytes | str, maven_central: str = "") -> UserConfig:
    """Parse a ``settings.xml`` document; raises ``ValueError`` if it is not XML.

    ``maven_central``, when given, is appended to the mirrors.
    """
    try:
        root = ET.fromstring(data)
    except (ET.ParseError, LookupError) as e:
        raise ValueError(f"parse settings failed: {e}") from e
    config = UserConfig()
    if _local(root.tag) == "settings":
        for mirror in _children(_child(root, "mirrors"), "mirror"):
            url = _child(mirror, "url")
            if url is None:
                continue
            config.remotes.append(_inner_text(url))
        local_repo = _child(root, "localRepository")
        if local_repo is not None:
            config.repo = _inner_text(local_repo).replace(
                "${user.home}", os.path.expanduser("~")
            )
    if maven_central:
        config.remotes.append(maven_central)
    return config


def _locate_mvn_install_path() -> str:
    try:
        info = check_mvn_command()
    except MavenError:
        return ""
    try:
        real = os.path.realpath(info.path, strict=True)
    except OSError:
        return ""
    base = os.path.dirname(os.path.dirname(real))
    use_logger().debug("Maven install at: %s", base)
    return base


def maven_settings_paths() -> list[str]:
    """Return the candidate ``settings.xml`` paths, the user's first."""
    paths: list[str] = []
    home = os.environ.get("M2_HOME", "")
    if not home:
        user_home = os.path.expanduser("~")
        if user_home != "~":
            home = os.path.join(user_home, ".m2")
    if home:
        paths.append(os.path.join(home, "settings.xml"))

    base = _locate_mvn_install_path()
    candidates = [("conf", "settings.xml")]
    if sys.platform == "darwin":
        candidates.append(("libexec", "conf", "settings.xml"))
    paths.extend(os.path.join(base, *parts) for parts in candidates)
    return paths


def get_mvn_config(maven_central: str = "") -> UserConfig:
    """Return the configuration of the first readable settings file, or the default."""
    logger = use_logger()
    for path in maven_settings_paths():
        logger.debug("Reading maven settings: %s", path)
        if not is_file(path):
            logger.debug("not a file, skip")
            continue
        try:
            with open(path, "rb") as f:
                data = f.read()
        except OSError as e:
            logger.warning("Read failed: %s", e)
            continue
        try:
            return parse_settings(data, maven_central)
        except ValueError as e:
            logger.warning("Parse failed: %s", e)
            continue
    logger.info("No maven settings found, use default config")
    return _default_user_config(maven_central)