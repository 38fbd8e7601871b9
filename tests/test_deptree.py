from depsleuth.maven.coordinate import Coordinate
from depsleuth.maven.deptree import MavenDependency, build_dep_tree, version_reconciling
from depsleuth.maven.errors import MvnErrorKind
from depsleuth.maven.pom import UnresolvedPom
from depsleuth.maven.project import parse_pom
from depsleuth.maven.repo import PomRepo
from depsleuth.maven.resolver import PomResolver

SCOPES = {"", "compile", "runtime"}
G = "com.example"


def _dep_xml(artifact, version="", scope="", exclusions=()):
    parts = [f"<groupId>{G}</groupId><artifactId>{artifact}</artifactId>"]
    if version:
        parts.append(f"<version>{version}</version>")
    if scope:
        parts.append(f"<scope>{scope}</scope>")
    if exclusions:
        excl = "".join(
            f"<exclusion><groupId>{G}</groupId><artifactId>{e}</artifactId></exclusion>"
            for e in exclusions
        )
        parts.append(f"<exclusions>{excl}</exclusions>")
    return "<dependency>" + "".join(parts) + "</dependency>"


def _pom(artifact, version, deps=(), managed=()):
    xml = f"<project><groupId>{G}</groupId><artifactId>{artifact}</artifactId><version>{version}</version>"
    if managed:
        xml += "<dependencyManagement><dependencies>" + "".join(managed) + "</dependencies></dependencyManagement>"
    xml += "<dependencies>" + "".join(deps) + "</dependencies></project>"
    return (Coordinate(G, artifact, version), xml)


class _MemoryRepo(PomRepo):
    def __init__(self, poms):
        self.poms = {c: UnresolvedPom(parse_pom(xml)) for c, xml in poms}

    def fetch(self, coordinate):
        try:
            return self.poms[coordinate]
        except KeyError:
            raise MvnErrorKind.ARTIFACT_NOT_FOUND.detailed(str(coordinate)) from None


def _resolver(*poms):
    resolver = PomResolver()
    resolver.add_repo(_MemoryRepo(poms))
    return resolver


def test_first_chosen_version_wins():
    resolver = _resolver(
        _pom("app", "1.0", [_dep_xml("a", "1.0"), _dep_xml("b", "1.0")]),
        _pom("a", "1.0", [_dep_xml("c", "2.0")]),
        _pom("b", "1.0", [_dep_xml("c", "1.0")]),
        _pom("c", "2.0"),
        _pom("c", "1.0"),
    )
    tree = build_dep_tree(resolver, Coordinate(G, "app", "1.0"), SCOPES)
    assert [c.artifact_id for c in tree.children] == ["a", "b"]
    a, b = tree.children
    assert [c.coordinate for c in a.children] == [Coordinate(G, "c", "2.0")]
    assert [c.coordinate for c in b.children] == [Coordinate(G, "c", "2.0")]


def test_exclusions_drop_transitive_dependencies():
    resolver = _resolver(
        _pom("app", "1.0", [_dep_xml("a", "1.0", exclusions=["c"])]),
        _pom("a", "1.0", [_dep_xml("c", "2.0"), _dep_xml("d", "1.0")]),
        _pom("c", "2.0"),
        _pom("d", "1.0"),
    )
    tree = build_dep_tree(resolver, Coordinate(G, "app", "1.0"), SCOPES)
    assert [c.artifact_id for c in tree.children[0].children] == ["d"]


def test_dependency_management_of_ancestor_supplies_version():
    resolver = _resolver(
        _pom("app", "1.0", [_dep_xml("a", "1.0")], managed=[_dep_xml("c", "3.0")]),
        _pom("a", "1.0", [_dep_xml("c")]),
        _pom("c", "3.0"),
    )
    tree = build_dep_tree(resolver, Coordinate(G, "app", "1.0"), SCOPES)
    assert tree.children[0].children[0].coordinate == Coordinate(G, "c", "3.0")


def test_circular_dependency_terminates():
    resolver = _resolver(
        _pom("app", "1.0", [_dep_xml("a", "1.0")]),
        _pom("a", "1.0", [_dep_xml("app", "1.0")]),
    )
    tree = build_dep_tree(resolver, Coordinate(G, "app", "1.0"), SCOPES)
    back = tree.children[0].children[0]
    assert back.coordinate == tree.coordinate
    assert back.children == []


def test_unresolvable_child_is_a_leaf_and_scopes_filter():
    resolver = _resolver(
        _pom("app", "1.0", [_dep_xml("missing", "9.9"), _dep_xml("t", "1.0", scope="test")]),
    )
    tree = build_dep_tree(resolver, Coordinate(G, "app", "1.0"), SCOPES)
    assert [c.coordinate for c in tree.children] == [Coordinate(G, "missing", "9.9")]
    assert tree.children[0].children == []


def test_unresolvable_root_gives_bare_tree():
    tree = build_dep_tree(_resolver(), Coordinate(G, "app", "1.0"), SCOPES)
    assert tree.coordinate == Coordinate(G, "app", "1.0")
    assert tree.children == []


def test_version_reconciling_uses_first_version_in_preorder():
    root = MavenDependency(
        Coordinate(G, "app", "1.0"),
        [
            MavenDependency(Coordinate(G, "x", "1.1"), [MavenDependency(Coordinate(G, "y", ""))]),
            MavenDependency(Coordinate(G, "x", "2.0")),
            MavenDependency(Coordinate(G, "y", "5.0")),
        ],
    )
    version_reconciling(root)
    assert root.children[1].version == "1.1"
    assert root.children[0].children[0].version == "5.0"
    assert root.version == "1.0"