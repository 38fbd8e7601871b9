# depsleuth

depsleuth finds the third-party components a project depends on. It reads
the manifests and lock files of common package managers and returns each
project module with its dependency tree, ready to be checked against a
vulnerability or licence database of your choice.

## Supported ecosystems

| Ecosystem | What is read |
|-----------|--------------|
| Maven | `pom.xml`. When `mvn` works, the depgraph Maven plugin is run and the `dependency-graph.json` files it writes are read. Otherwise the POMs are resolved directly against the local repository and the mirrors from `settings.xml`. |
| npm | `package.json` together with `package-lock.json` (lockfile versions 1 and 2) |
| Yarn | `yarn.lock`, falling back to the dependencies declared in `package.json` |
| NuGet | `packages.config` (development dependencies are left out) |
| Poetry | `pyproject.toml`, plus a lock file named `poetry.lock.py` next to it if present |
| pip | `requirements*` files, `import` lines in `.py` files, `[build-system]` requirements of `pyproject.toml`, and `pip list` output |

## Inspecting a directory

Every ecosystem has an inspector with the same two methods:

- `check_dir(directory)` says whether the directory looks like a project of
  that kind.
- `inspect(scan_dir, project_dir)` scans `scan_dir` and returns a list of the
  modules it found.

```python
from depsleuth.npm import NpmInspector
from depsleuth.yarn import YarnInspector
from depsleuth.nuget import NugetInspector
from depsleuth.poetry import PoetryInspector
from depsleuth.python.inspector import PythonInspector
from depsleuth.maven.inspector import MavenInspector

inspectors = [
    MavenInspector(),
    NpmInspector(),
    YarnInspector(),
    NugetInspector(),
    PoetryInspector(),
    PythonInspector(use_pip=True),
]

project = "/path/to/project"
for inspector in inspectors:
    if inspector.check_dir(project):
        for module in inspector.inspect(project, project):
            print(module.name, module.version, len(module.dependencies))
```

Each result is a `depsleuth.common.Module`. It carries its package manager
(`PackageManager`), its language (`Language`), the file it was read from and
a tree of `depsleuth.common.Dependency` values; `Dependency.to_dict()` gives
a JSON-ready mapping.

`MavenInspector(scopes=...)` takes the set of Maven scopes to keep; the
default is compile, runtime and unspecified. `PythonInspector(blacklist=...)`
takes package names to ignore among imports.

## Lower-level helpers

The parsers can be used on their own.

```python
from depsleuth.python.requirements import parse_requirements
from depsleuth.python.buildsys import toml_build_sys
from depsleuth.maven.properties import Properties

deps = parse_requirements("requests==2.31.0\nflask>=2.0\n")

build_deps = toml_build_sys(b'[build-system]\nrequires = ["wheel", "Cython>=0.29.13"]\n')

props = Properties()
props.put("poi.version", "4.1.2")
print(props.resolve("${poi.version}"))  # 4.1.2
```

Others include `depsleuth.yarn.parse_yarn_lock`,
`depsleuth.nuget.parse_packages_config`, `depsleuth.poetry.parse_poetry`,
`depsleuth.maven.project.parse_pom` and
`depsleuth.maven.graph.PluginGraphOutput`.

### Maven

- `depsleuth.maven.mvn_command.check_mvn_command()` finds the installed
  Maven and returns its path and version; the first result is kept.
- `depsleuth.maven.settings.get_mvn_config()` reads the user's
  `settings.xml` for mirrors and the local repository.
- `depsleuth.maven.backup.backup_resolve(project_dir, scopes)` builds
  dependency trees from the POM files alone, following parent POMs,
  property placeholders, imported `dependencyManagement` and exclusions.

Failures are raised as `depsleuth.maven.errors.MavenError`; `is_kind()`
tells the causes (`MvnErrorKind`) apart.

## Environment

| Variable | Effect |
|----------|--------|
| `NO_MVN` | when set, `mvn` is not used |
| `IDEA_INSTALL_PATH` | where to look for the Maven bundled with IntelliJ IDEA when `mvn` is not on `PATH` |
| `MVN_COMMAND_TIMEOUT` | seconds the graph plugin may run; 0 means no limit |
| `MAVEN_CENTRAL` | an extra remote repository for POM resolution |
| `M2_HOME` | directory holding the user's `settings.xml` (default `~/.m2`) |

Maven and pip are optional. Without Maven the POMs are resolved directly,
so results may be less complete; with pip, the installed versions it reports
fill in components whose version is otherwise unknown.

## Logging

Progress is logged through the logger set with
`depsleuth.common.with_logger(logger)`, used as a context manager; outside
one, nothing is logged.

## What it does not do

depsleuth is a library only: it has no command-line program. It collects
components and their versions; it does not look up vulnerabilities or
licences, upload results, or store anything.