import logging

from depsleuth.common import (
    Dependency,
    Language,
    Module,
    PackageManager,
    print_version_info,
    use_logger,
    user_agent,
    version,
    with_logger,
)


def test_pro_version():
    assert version(pro=True) == "v1.9.0"


def test_saas_version_has_suffix():
    assert version() == version(pro=True) + "-saas"


def test_user_agent_contains_version():
    ua = user_agent()
    assert f"/{version()} (" in ua
    assert ua.endswith(");")


def test_print_version_info(capsys):
    print_version_info()
    out = capsys.readouterr().out
    assert out.endswith(" " + version() + "\n")


def test_default_logger_is_disabled():
    assert use_logger().disabled is True


def test_with_logger_scopes_logger():
    logger = logging.getLogger("tests.common.scoped")
    with with_logger(logger) as bound:
        assert bound is logger
        assert use_logger() is logger
    assert use_logger() is not logger
    assert use_logger().disabled is True


def test_nested_with_logger_restores_outer():
    outer = logging.getLogger("tests.common.outer")
    inner = logging.getLogger("tests.common.inner")
    with with_logger(outer):
        with with_logger(inner):
            assert use_logger() is inner
        assert use_logger() is outer


def test_dependency_to_dict_omits_empty_children():
    dep = Dependency("numpy", "1.13.3")
    assert dep.to_dict() == {"name": "numpy", "version": "1.13.3"}


def test_dependency_to_dict_nested():
    dep = Dependency("a", "1", [Dependency("b", "2")])
    assert dep.to_dict() == {
        "name": "a",
        "version": "1",
        "dependencies": [{"name": "b", "version": "2"}],
    }


def test_modules_get_distinct_uuids():
    a = Module(PackageManager.MAVEN, Language.JAVA, name="x")
    b = Module(PackageManager.MAVEN, Language.JAVA, name="x")
    assert a.uuid != b.uuid
    assert a.dependencies == [] and a.runtime_info is None