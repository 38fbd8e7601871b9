"""Discovery of the POM files of a local multi-module Maven project."""

from __future__ import annotations

import os
from collections import deque

from depsleuth.common import use_logger
from depsleuth.maven.errors import MavenError
from depsleuth.maven.pom import UnresolvedPom
from depsleuth.maven.project import read_pom_file


def read_local_project(directory: str | os.PathLike) -> list[UnresolvedPom]:
    """Read the POM of ``directory`` and of every module it lists, breadth first.

    CI friendly ``${revision}`` versions are replaced by the value the
    project defines, so that modules can refer to their parent.
    """
    logger = use_logger()
    revisions: dict[str, str] = {}
    queue: deque[str] = deque([os.path.normpath(os.fspath(directory))])
    visited: set[str] = set()
    poms: list[UnresolvedPom] = []
    while queue:
        current = queue.popleft()
        if current in visited:
            continue
        visited.add(current)
        pom_path = os.path.join(current, "pom.xml")
        try:
            project = read_pom_file(pom_path)
        except (OSError, MavenError) as e:
            logger.warning("Read pom failed: %s: %s", current, e)
            continue

        key = project.group_id + project.artifact_id
        revision = project.properties.get("revision", "")
        if revision and "${" not in revision:
            revisions[key] = revision
            if project.version == "${revision}":
                project.version = revision
        if project.version and "${" not in project.version:
            revisions[key] = project.version
        if project.parent.version == "${revision}":
            parent_version = revisions.get(project.parent.group_id + project.parent.artifact_id, "")
            if parent_version:
                project.parent.version = parent_version

        for module in project.modules:
            queue.append(os.path.normpath(os.path.join(current, module)))
        poms.append(UnresolvedPom(project, pom_path))
    return poms