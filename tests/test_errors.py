import pytest

from depsleuth.maven.errors import MavenError, MvnErrorKind


def test_plain_error_message():
    assert str(MavenError(MvnErrorKind.MVN_NOT_FOUND)) == "mvn command not found"


def test_detailed_message():
    err = MvnErrorKind.MVN_DISABLED.detailed("environment variable NO_MVN set")
    assert str(err) == f"{MvnErrorKind.MVN_DISABLED.value}: environment variable NO_MVN set"
    assert err.is_kind(MvnErrorKind.MVN_DISABLED)


def test_wrap_message_and_cause():
    cause = OSError("boom")
    err = MvnErrorKind.CHECK_MVN_VERSION.wrap(cause)
    assert str(err) == f"{MvnErrorKind.CHECK_MVN_VERSION.value}: boom"
    assert err.__cause__ is cause


def test_detailed_wrap_message():
    err = MvnErrorKind.BAD_DEPS_GRAPH.detailed_wrap("read graph file", ValueError("eof"))
    assert str(err) == f"{MvnErrorKind.BAD_DEPS_GRAPH.value}: eof: read graph file"


def test_is_kind_follows_wrapped_errors():
    inner = MavenError(MvnErrorKind.ARTIFACT_NOT_FOUND)
    outer = MvnErrorKind.PARSE_POM_FAILED.wrap(inner)
    assert outer.is_kind(MvnErrorKind.PARSE_POM_FAILED)
    assert outer.is_kind(MvnErrorKind.ARTIFACT_NOT_FOUND)
    assert not outer.is_kind(MvnErrorKind.INSPECTION)


def test_detailed_error_is_raisable():
    err = MvnErrorKind.INSPECTION.detailed("x")
    assert err.kind is MvnErrorKind.INSPECTION
    assert err.detail == "x"
    assert str(err) == f"{MvnErrorKind.INSPECTION.value}: x"
    with pytest.raises(MavenError, match="x$"):
        raise err