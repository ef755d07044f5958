import json
import re

import pytest
import requests
import responses

from dreamland.client import Client, DreamlandError, Universe
from dreamland.config import ServiceConfig, SimpleConfig, UniverseConfig
from dreamland.inject import Injectable, Method, fixture, service, simple

BASE = "http://localhost:1421"


@pytest.fixture
def mocked():
    with responses.RequestsMock(assert_all_requests_are_fired=False) as rsps:
        yield rsps


@pytest.fixture
def client():
    with Client(BASE, timeout=60) as c:
        yield c


def test_timeout_too_low():
    with pytest.raises(DreamlandError, match=r"timeout option too low"):
        Client(BASE, timeout=0.5)


@pytest.mark.parametrize("url", ["localhost:1421", "", "mailto:x"])
def test_invalid_url(url):
    with pytest.raises(DreamlandError, match="Parsing url failed"):
        Client(url)


@pytest.mark.parametrize(
    "provider, message", [("bitbucket", "not enabled"), ("gitlab", "unknown")]
)
def test_provider_rejected(provider, message):
    with pytest.raises(DreamlandError, match=message):
        Client(BASE, provider=provider)


def test_empty_token_rejected():
    with pytest.raises(DreamlandError, match="token option can not be empty"):
        Client(BASE, token="")


def test_universe_handle(client):
    universe = client.universe("dreamland-http")
    assert universe == Universe(name="dreamland-http", client=client)


def test_auth_header_sent(mocked):
    mocked.add(responses.GET, BASE + "/status", json={})
    with Client(BASE, provider="github", token="token") as c:
        assert c.status() == {}
    assert mocked.calls[0].request.headers["Authorization"] == "github token"


def test_no_auth_header_without_credentials(mocked, client):
    mocked.add(responses.GET, BASE + "/status", json={})
    assert client.status() == {}
    assert "Authorization" not in mocked.calls[0].request.headers


def test_status_lists_universe(mocked, client):
    mocked.add(
        responses.GET,
        BASE + "/status",
        json={"dreamland-http": {"node-count": 2, "Nodes": {"seer": ["a"]}}},
    )
    status = client.status()
    assert "dreamland-http" in status
    assert status["dreamland-http"].node_count == 2
    assert status["dreamland-http"].nodes == {"seer": ["a"]}


def test_status_not_an_object(mocked, client):
    mocked.add(responses.GET, BASE + "/status", json={"u": 5})
    with pytest.raises(DreamlandError, match="failed to parse json"):
        client.status()


def test_inject_simple_posts_config(mocked, client):
    mocked.add(responses.POST, BASE + "/simple/dreamland-http/test1", json={})
    client.universe("dreamland-http").inject(simple("test1", SimpleConfig()))
    request = mocked.calls[0].request
    assert request.headers["Content-Type"] == "application/json"
    assert json.loads(request.body) == {"params": [], "config": SimpleConfig().to_json()}


def test_inject_service_posts_config(mocked, client):
    mocked.add(responses.POST, BASE + "/service/u1/tns", json={})
    config = ServiceConfig(others={"http": 4040})
    client.universe("u1").inject(service("tns", config))
    assert json.loads(mocked.calls[0].request.body) == {
        "params": [],
        "config": config.to_json(),
    }


def test_kill_service_twice(mocked, client):
    url = BASE + "/service/dreamland-http/seer"
    mocked.add(responses.DELETE, url, json={})
    mocked.add(responses.DELETE, url, json={"error": "seer not running"}, status=400)
    universe = client.universe("dreamland-http")
    universe.kill_service("seer")
    with pytest.raises(DreamlandError, match="seer not running"):
        universe.kill_service("seer")
    assert len(mocked.calls) == 2


def test_fixture_not_existing_fails(mocked, client):
    mocked.add(
        responses.POST,
        re.compile(BASE + r"/fixture/dreamland-http/.*"),
        json={"error": "fixture `should fail` not found"},
        status=400,
    )
    with pytest.raises(DreamlandError, match="Injection `should fail` failed with error"):
        client.universe("dreamland-http").inject(fixture("should fail", "dne"))
    assert json.loads(mocked.calls[0].request.body) == {"params": "dne"}


def test_inject_stops_at_first_failure(mocked, client):
    mocked.add(responses.POST, BASE + "/fixture/u/a", json={"error": "bad"}, status=400)
    mocked.add(responses.POST, BASE + "/fixture/u/b", json={})
    with pytest.raises(DreamlandError, match="Injection `a`"):
        client.universe("u").inject(fixture("a"), fixture("b"))
    assert len(mocked.calls) == 1


def test_unexpected_status(mocked, client):
    mocked.add(responses.GET, BASE + "/status", status=500)
    with pytest.raises(DreamlandError, match="failed with status: 500"):
        client.status()


def test_invalid_json(mocked, client):
    mocked.add(responses.GET, BASE + "/status", body="not json")
    with pytest.raises(DreamlandError, match="Unmarshal error failed"):
        client.status()


def test_connection_error(mocked, client):
    mocked.add(responses.GET, BASE + "/status", body=requests.ConnectionError("refused"))
    with pytest.raises(DreamlandError, match="do failed with: refused"):
        client.status()


def test_universe_status_parses_chart(mocked, client):
    chart = {
        "nodes": [{"id": "Qm1", "name": "seer@blackhole", "category": 0, "value": {"http": 4040}}],
        "links": [],
        "categories": [{"name": "seer"}],
    }
    mocked.add(responses.GET, BASE + "/les/miserables/blackhole", json=chart)
    result = client.universe("blackhole").status()
    assert result.to_json() == chart


def test_universe_id(mocked, client):
    mocked.add(responses.GET, BASE + "/id/blackhole", json={"id": "abc"})
    assert client.universe("blackhole").id().id == "abc"


def test_kill_universe_and_simple(mocked, client):
    mocked.add(responses.DELETE, BASE + "/universe/blackhole", json={})
    mocked.add(responses.DELETE, BASE + "/simple/blackhole/client", json={})
    universe = client.universe("blackhole")
    assert universe.kill_simple("client") is None
    assert universe.kill() is None
    assert [call.request.url for call in mocked.calls] == [
        BASE + "/simple/blackhole/client",
        BASE + "/universe/blackhole",
    ]


def test_method_not_supported(client):
    op = Injectable(name="x", route="fixture", method=Method.GET)
    with pytest.raises(DreamlandError, match="Method not supported GET"):
        client.universe("u").inject(op)


def test_start_universe_with_config(mocked, client):
    mocked.add(responses.POST, BASE + "/universe/u2", json={})
    config = UniverseConfig(services={"tns": ServiceConfig(port=4042)})
    client.start_universe_with_config("u2", config)
    assert json.loads(mocked.calls[0].request.body) == {"config": config.to_json()}