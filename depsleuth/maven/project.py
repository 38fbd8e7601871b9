"""The parts of a Maven POM document that dependency analysis needs."""

from __future__ import annotations

import os
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field

from depsleuth.maven.errors import MvnErrorKind


@dataclass(frozen=True)
class Exclusion:
    """An excluded transitive dependency."""

    group_id: str = ""
    artifact_id: str = ""


@dataclass
class PomDependency:
    """A ``<dependency>`` element."""

    group_id: str = ""
    artifact_id: str = ""
    version: str = ""
    type: str = ""
    classifier: str = ""
    scope: str = ""
    system_path: str = ""
    exclusions: list[Exclusion] = field(default_factory=list)
    optional: str = ""


@dataclass
class Parent:
    """The ``<parent>`` element."""

    group_id: str = ""
    artifact_id: str = ""
    version: str = ""


@dataclass
class Project:
    """A parsed ``<project>`` element."""

    group_id: str = ""
    artifact_id: str = ""
    version: str = ""
    parent: Parent = field(default_factory=Parent)
    properties: dict[str, str] = field(default_factory=dict)
    dependencies: list[PomDependency] = field(default_factory=list)
    dependency_management: list[PomDependency] = field(default_factory=list)
    modules: list[str] = field(default_factory=list)
    profiles: list[str] = field(default_factory=list)


def _local(tag: object) -> str:
    return tag.rsplit("}", 1)[-1] if isinstance(tag, str) else ""


def _children(element: ET.Element | None, name: str) -> list[ET.Element]:
    if element is None:
        return []
    return [child for child in element if _local(child.tag) == name]


def _child(element: ET.Element | None, name: str) -> ET.Element | None:
    found = _children(element, name)
    return found[0] if found else None


def _text(element: ET.Element | None) -> str:
    if element is None:
        return ""
    return (element.text or "") + "".join(child.tail or "" for child in element)


def _child_text(element: ET.Element | None, name: str) -> str:
    return _text(_child(element, name))


def _parse_dependency(element: ET.Element) -> PomDependency:
    return PomDependency(
        group_id=_child_text(element, "groupId"),
        artifact_id=_child_text(element, "artifactId"),
        version=_child_text(element, "version"),
        type=_child_text(element, "type"),
        classifier=_child_text(element, "classifier"),
        scope=_child_text(element, "scope"),
        system_path=_child_text(element, "systemPath"),
        exclusions=[
            Exclusion(_child_text(e, "groupId"), _child_text(e, "artifactId"))
            for e in _children(_child(element, "exclusions"), "exclusion")
        ],
        optional=_child_text(element, "optional"),
    )


def _dependency_list(container: ET.Element | None) -> list[PomDependency]:
    return [_parse_dependency(e) for e in _children(container, "dependency")]


def parse_pom(data: bytes | str) -> Project:
    """Parse a POM document; raises ``MavenError`` of kind PARSE_POM_FAILED on bad input."""
    try:
        root = ET.fromstring(data)
    except (ET.ParseError, ValueError, LookupError) as e:
        raise MvnErrorKind.PARSE_POM_FAILED.wrap(e) from e
    if _local(root.tag) != "project":
        raise MvnErrorKind.PARSE_POM_FAILED.detailed(f"unexpected root element <{_local(root.tag)}>")
    parent = _child(root, "parent")
    return Project(
        group_id=_child_text(root, "groupId"),
        artifact_id=_child_text(root, "artifactId"),
        version=_child_text(root, "version"),
        parent=Parent(
            group_id=_child_text(parent, "groupId"),
            artifact_id=_child_text(parent, "artifactId"),
            version=_child_text(parent, "version"),
        ),
        properties={_local(p.tag): _text(p) for p in (_child(root, "properties") or [])},
        dependencies=_dependency_list(_child(root, "dependencies")),
        dependency_management=_dependency_list(
            _child(_child(root, "dependencyManagement"), "dependencies")
        ),
        modules=[_text(m) for m in _children(_child(root, "modules"), "module")],
        profiles=[_child_text(p, "id") for p in _children(_child(root, "profiles"), "profile")],
    )


def read_pom_file(path: str | os.PathLike) -> Project:
    """Read and parse a POM file; ``OSError`` if it cannot be read."""
    with open(path, "rb") as f:
        data = f.read()
    return parse_pom(data)