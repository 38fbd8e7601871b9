import pytest

from depsleuth.maven.coordinate import Coordinate


def test_normalize_strips_whitespace():
    c = Coordinate(" org.foo ", "bar\n", "1.0\t")
    assert c.normalize() == Coordinate("org.foo", "bar", "1.0")


def test_str_with_and_without_version():
    assert str(Coordinate("g", "a", "v")) == "g:a:v"
    assert str(Coordinate("g", "a")) == "g:a"


def test_name_ignores_version():
    assert Coordinate("g ", "a", "1").name() == "g:a"


def test_has_version():
    assert Coordinate("g", "a", "1").has_version()
    assert not Coordinate("g", "a", "  ").has_version()


@pytest.mark.parametrize(
    "coordinate",
    [
        Coordinate("${group}", "a", "1"),
        Coordinate("g", "${artifact}", "1"),
        Coordinate("g", "a", "${revision}"),
        Coordinate("g", "a", "[1.0,2.0)"),
        Coordinate("g", "a", "(,1.0]"),
    ],
)
def test_is_bad(coordinate):
    assert coordinate.is_bad()
    assert not coordinate.complete()


def test_complete():
    assert Coordinate("g", "a", "1").complete()
    assert not Coordinate("", "a", "1").complete()
    assert not Coordinate("g", "", "1").complete()
    assert not Coordinate("g", "a", "").complete()


def test_compare_orders_by_fields():
    a = Coordinate("g", "a", "1")
    b = Coordinate("g", "a", "2")
    c = Coordinate("h", "a", "0")
    assert a.compare(a) == 0
    assert a.compare(b) < 0 < b.compare(a)
    assert b.compare(c) < 0


def test_hashable_and_equal():
    d = {Coordinate("g", "a", "1"): "x"}
    assert d[Coordinate("g", "a", "1")] == "x"


def test_to_dict_round_trip():
    c = Coordinate("g", "a", "1")
    assert Coordinate(**c.to_dict()) == c