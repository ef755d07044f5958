import pytest

from dreamland import inject
from dreamland.inject import Injectable, Method


def test_method_names():
    op = inject.fixture("setBranch", ["main"])
    assert str(op.method) == "POST"
    assert [str(m) for m in Method] == ["GET", "POST", "DELETE"]


def test_method_order():
    op = inject.simple("client")
    assert op.method.value == 1
    assert [m.value for m in (Method.GET, Method.POST, Method.DELETE)] == [0, 1, 2]


def test_fixture_path_and_params():
    op = inject.fixture("setBranch", ["main"])
    assert op.path("blackhole") == "/fixture/blackhole/setBranch"
    assert op.params == ["main"]
    assert op.config is None
    assert op.method is Method.POST


def test_service_path_and_config():
    config = {"others": {"http": 4040}}
    op = inject.service("tns", config)
    assert op.path("u1") == "/service/u1/tns"
    assert op.config is config
    assert op.params is None


def test_simple_path():
    op = inject.simple("client", {"clients": {}})
    assert op.path("u2") == "/simple/u2/client"
    assert op.name == "client"


@pytest.mark.parametrize("factory", [inject.fixture, inject.service, inject.simple])
def test_path_contains_universe_and_name(factory):
    op = factory("thing")
    path = op.path("galaxy")
    assert path.split("/")[-2:] == ["galaxy", "thing"]
    assert isinstance(op, Injectable)