import pytest

from depsleuth.python.buildsys import TomlParseError, toml_build_sys, toml_build_sys_file

SAMPLE = """
[build-system]
requires = [
    "wheel",
    "setuptools",
    "Cython>=0.29.13",
    "numpy==1.13.3; python_version=='3.5' and platform_system!='AIX'",
    "numpy==1.17.3; python_version>='3.8' and platform_system!='AIX'",
    "pybind11>=2.2.4",
]
"""


def _pairs(deps):
    return [{"name": d.name, "version": d.version} for d in deps]


def test_toml_build_sys():
    target = [
        {"name": "wheel", "version": ""},
        {"name": "setuptools", "version": ""},
        {"name": "Cython", "version": "0.29.13"},
        {"name": "numpy", "version": "1.13.3"},
        {"name": "pybind11", "version": "2.2.4"},
    ]
    assert _pairs(toml_build_sys(SAMPLE)) == target


def test_accepts_bytes():
    assert _pairs(toml_build_sys(SAMPLE.encode())) == _pairs(toml_build_sys(SAMPLE))


def test_valid_semver_upgrades():
    doc = '[build-system]\nrequires = ["pkg==v1.0.0", "pkg==v1.2.0"]\n'
    assert _pairs(toml_build_sys(doc)) == [{"name": "pkg", "version": "v1.2.0"}]


def test_valid_semver_never_downgrades():
    doc = '[build-system]\nrequires = ["pkg==v1.2.0", "pkg==v1.0.0"]\n'
    assert _pairs(toml_build_sys(doc)) == [{"name": "pkg", "version": "v1.2.0"}]


def test_unversioned_entry_is_replaced_in_place():
    doc = '[build-system]\nrequires = ["pkg", "other", "pkg==1.0"]\n'
    assert _pairs(toml_build_sys(doc)) == [
        {"name": "pkg", "version": "1.0"},
        {"name": "other", "version": ""},
    ]


def test_missing_build_system():
    assert toml_build_sys('[tool.x]\nname = "a"\n') == []


def test_invalid_toml():
    with pytest.raises(TomlParseError):
        toml_build_sys("[build-system\nrequires = ")


def test_file_round_trip(tmp_path):
    path = tmp_path / "pyproject.toml"
    path.write_text(SAMPLE)
    assert _pairs(toml_build_sys_file(path)) == _pairs(toml_build_sys(SAMPLE))