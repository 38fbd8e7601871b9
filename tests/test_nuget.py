import pytest

from depsleuth.common import Language, PackageManager
from depsleuth.nuget import NugetInspector, inspect_packages_config, parse_packages_config

CONFIG = b"""<?xml version="1.0" encoding="utf-8"?>
<packages>
  <package id="Newtonsoft.Json" version="12.0.3" targetFramework="net472" />
  <package id="xunit" version="2.4.1" developmentDependency="true" />
  <package id="Foo" version="1.*" />
</packages>
"""


def test_parse_skips_dev_and_wildcards():
    deps = parse_packages_config(CONFIG)
    assert [(d.name, d.version) for d in deps] == [("Newtonsoft.Json", "12.0.3"), ("Foo", "")]


def test_wrong_root_is_rejected():
    with pytest.raises(ValueError):
        parse_packages_config(b"<project><package id='a' version='1'/></project>")


def test_bad_bool_is_rejected():
    with pytest.raises(ValueError):
        parse_packages_config(b'<packages><package id="a" developmentDependency="maybe"/></packages>')


def test_malformed_xml_is_rejected():
    with pytest.raises(ValueError, match="Parse packages.config failed"):
        parse_packages_config(b"<packages><package>")


def test_inspect_file_and_inspector(tmp_path):
    (tmp_path / "packages.config").write_bytes(CONFIG)
    assert [d.name for d in inspect_packages_config(tmp_path / "packages.config")] == [
        "Newtonsoft.Json",
        "Foo",
    ]
    inspector = NugetInspector()
    assert inspector.check_dir(tmp_path) is True
    [module] = inspector.inspect(tmp_path, tmp_path)
    assert module.package_manager is PackageManager.NUGET
    assert module.language is Language.DOTNET
    assert module.name == "packages.config"
    assert module.file_path == str(tmp_path / "packages.config")
    assert len(module.dependencies) == 2


def test_check_dir_without_config(tmp_path):
    assert NugetInspector().check_dir(tmp_path) is False