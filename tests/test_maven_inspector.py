import os

import pytest

from depsleuth.maven import mvn_command
from depsleuth.maven.coordinate import Coordinate
from depsleuth.maven.deptree import MavenDependency
from depsleuth.maven.inspector import (
    DEFAULT_SCOPES,
    MavenInspector,
    convert_dependencies,
    scan_maven_project,
)

APP_POM = """<project>
  <groupId>com.example</groupId>
  <artifactId>app</artifactId>
  <version>1.0</version>
  <dependencies>
    <dependency>
      <groupId>com.example</groupId>
      <artifactId>lib</artifactId>
      <version>2.0</version>
    </dependency>
  </dependencies>
</project>
"""

LIB_POM = """<project>
  <groupId>com.example</groupId>
  <artifactId>lib</artifactId>
  <version>2.0</version>
</project>
"""


@pytest.fixture
def project(monkeypatch, tmp_path):
    monkeypatch.setenv("NO_MVN", "1")
    monkeypatch.delenv("MAVEN_CENTRAL", raising=False)
    mvn_command._probe.cache_clear()
    m2 = tmp_path / "m2"
    m2.mkdir()
    repo = tmp_path / "repo"
    (m2 / "settings.xml").write_text(
        f"<settings><localRepository>{repo}</localRepository></settings>", encoding="utf-8"
    )
    lib_dir = repo / "com" / "example" / "lib" / "2.0"
    lib_dir.mkdir(parents=True)
    (lib_dir / "lib-2.0.pom").write_text(LIB_POM, encoding="utf-8")
    project_dir = tmp_path / "project"
    project_dir.mkdir()
    monkeypatch.setenv("M2_HOME", str(m2))
    monkeypatch.chdir(tmp_path)
    yield project_dir
    mvn_command._probe.cache_clear()


def test_convert_dependencies_drops_incomplete():
    tree = [
        MavenDependency(
            Coordinate("g", "a", "1"),
            [MavenDependency(Coordinate("g", "b", ""))],
        ),
        MavenDependency(Coordinate("", "c", "1")),
    ]
    result = convert_dependencies(tree)
    assert len(result) == 1
    assert result[0].name == Coordinate("g", "a", "1").name()
    assert result[0].version == "1"
    assert result[0].dependencies == []


def test_check_dir(tmp_path):
    inspector = MavenInspector()
    assert not inspector.check_dir(tmp_path)
    (tmp_path / "pom.xml").write_text(APP_POM, encoding="utf-8")
    assert inspector.check_dir(tmp_path)
    assert str(inspector) == "MavenInspector"


def test_scan_falls_back_to_pom_resolution(project):
    (project / "pom.xml").write_text(APP_POM, encoding="utf-8")
    modules = scan_maven_project(project, DEFAULT_SCOPES)
    assert len(modules) == 1
    module = modules[0]
    assert module.name == Coordinate("com.example", "app", "1.0").name()
    assert module.version == "1.0"
    assert module.package_file == "pom.xml"
    assert module.file_path == os.path.join(str(project), "pom.xml")
    assert [(d.name, d.version) for d in module.dependencies] == [
        (Coordinate("com.example", "lib", "2.0").name(), "2.0")
    ]


def test_inspect_matches_scan(project):
    (project / "pom.xml").write_text(APP_POM, encoding="utf-8")
    modules = MavenInspector().inspect(project, project)
    assert [m.version for m in modules] == ["1.0"]


def test_scan_without_pom_gives_no_modules(project):
    assert scan_maven_project(project, DEFAULT_SCOPES) == []