from depsleuth.maven.coordinate import Coordinate
from depsleuth.maven.depset import PomDependencySet
from depsleuth.maven.pom import Pom, UnresolvedPom
from depsleuth.maven.project import Exclusion, Parent, PomDependency, Project
from depsleuth.maven.properties import Properties


def test_unresolved_coordinate_uses_own_fields():
    project = Project(group_id="g", artifact_id="a", version="1", parent=Parent("pg", "pa", "2"))
    assert UnresolvedPom(project).coordinate() == Coordinate("g", "a", "1")


def test_unresolved_coordinate_falls_back_to_parent():
    project = Project(artifact_id="a", parent=Parent("pg", "pa", "2"))
    assert UnresolvedPom(project).coordinate() == Coordinate("pg", "a", "2")


def test_unresolved_parent_coordinate_complete_and_incomplete():
    full = UnresolvedPom(Project(parent=Parent("pg", "pa", "2")))
    assert full.parent_coordinate() == Coordinate("pg", "pa", "2")
    partial = UnresolvedPom(Project(parent=Parent("pg", "pa", "")))
    assert partial.parent_coordinate() is None
    bad = UnresolvedPom(Project(parent=Parent("pg", "pa", "${v}")))
    assert bad.parent_coordinate() is None


def test_unresolved_default_path_is_empty():
    assert UnresolvedPom(Project()).path == ""


def _pom(deps, depms=(), props=None):
    dep_set = PomDependencySet()
    dep_set.merge_all(deps, True, False)
    depm_set = PomDependencySet()
    depm_set.merge_all(depms, True, False)
    properties = Properties()
    properties.put_map(props or {})
    project = Project(group_id="g", artifact_id="a", version="1", parent=Parent("pg", "pa", "9"))
    return Pom(Coordinate("g", "a", "1"), project, dep_set, depm_set, properties)


def test_list_dependencies_resolves_and_filters():
    deps = [
        PomDependency("org.x", "lib", "${lib.version}", scope="compile"),
        PomDependency("org.x", "opt", "1.0", scope="compile", optional="true"),
        PomDependency("org.x", "testing", "1.0", scope="test"),
    ]
    pom = _pom(deps, props={"lib.version": "3.1"})
    result = pom.list_dependencies({"compile"})
    assert [(d.artifact_id, d.version) for d in result] == [("lib", "3.1")]


def test_list_dependencies_checks_unresolved_scope():
    deps = [PomDependency("org.x", "lib", "1.0", scope="${s}")]
    pom = _pom(deps, props={"s": "compile"})
    assert pom.list_dependencies({"compile"}) == []
    assert [d.scope for d in pom.list_dependencies({"${s}"})] == ["compile"]


def test_list_dependency_managements_keeps_all_scopes_but_not_optional():
    depms = [
        PomDependency("org.x", "bom", "${v}", scope="import", type="pom"),
        PomDependency("org.x", "opt", "1.0", optional="true"),
    ]
    pom = _pom([], depms, props={"v": "5"})
    result = pom.list_dependency_managements()
    assert [(d.artifact_id, d.version, d.scope) for d in result] == [("bom", "5", "import")]


def test_resolved_dependency_keeps_exclusions():
    excl = [Exclusion("org.y", "z")]
    pom = _pom([PomDependency("org.x", "lib", "1", scope="compile", exclusions=excl)])
    assert pom.list_dependencies({"compile"})[0].exclusions == excl


def test_pom_parent_coordinate():
    pom = _pom([])
    assert pom.parent_coordinate() == Coordinate("pg", "pa", "9")