import json

import pytest

from services.cache import CapabilityStatus

FORM = {"Content-Type": "application/x-www-form-urlencoded"}


def post(client, body: str):
    return client.post("/", content=body, headers=FORM)


def test_post_then_get_via_cache(client):
    resp = post(client, "key=abc&ipaddr=10.0.0.5&port=9987")
    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/plain")
    assert json.loads(resp.text) == {"key": "abc", "ipaddr": "10.0.0.5", "port": "9987"}

    resp = client.get("/abc")
    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/plain")
    assert json.loads(resp.text) == {"key": "abc", "ipaddr": "10.0.0.5", "port": "9987"}


def test_post_then_get_via_datastore(client, disable_cache):
    disable_cache()
    resp = post(client, "key=abc&ipaddr=10.0.0.5&port=9987")
    assert resp.text == "OK (Datastore)"

    resp = client.get("/abc")
    assert json.loads(resp.text) == {"key": "abc", "ipaddr": "10.0.0.5"}


def test_form_values_are_url_decoded(client):
    post(client, "key=a%20b&ipaddr=10.0.0.5")
    assert json.loads(client.get("/a%20b").text)["key"] == "a b"


def test_only_first_line_is_parsed(client):
    post(client, "key=abc&ipaddr=10.0.0.5\nkey=other")
    assert json.loads(client.get("/abc").text) == {"key": "abc", "ipaddr": "10.0.0.5"}


def test_get_uses_last_path_segment(client):
    post(client, "key=abc&ipaddr=10.0.0.5")
    assert json.loads(client.get("/rendezvous/abc").text)["ipaddr"] == "10.0.0.5"


def test_miss_is_empty_body(client, disable_cache):
    resp = client.get("/nonexistent")
    assert resp.status_code == 200
    assert resp.text == ""
    disable_cache()
    assert client.get("/nonexistent").text == ""


def test_no_key(client):
    resp = post(client, "ipaddr=10.0.0.5")
    assert resp.status_code == 200
    assert resp.text == "no key"


def test_no_ipaddress_on_fallback(client, disable_cache):
    disable_cache()
    resp = post(client, "key=abc&port=9987")
    assert resp.status_code == 200
    assert resp.text == "no ipaddress"
    assert client.get("/abc").text == ""


def test_empty_body(client):
    resp = post(client, "")
    assert resp.status_code == 200
    assert resp.text == "queryString is null"


def test_ready(client):
    assert client.get("/_ops/ready").json()["status"] == "ok"


def test_health_reports_live_tier(client, cache):
    body = client.get("/_ops/health").json()
    assert body["tier"] == "memcache"
    assert body["datastore"] == "connected"

    cache.set_capability_status(CapabilityStatus.DISABLED)
    assert client.get("/_ops/health").json()["tier"] == "datastore"


@pytest.mark.parametrize("key", ["health", "ready", "docs", "redoc", "openapi.json"])
def test_reserved_looking_keys_are_fetchable(client, key):
    post(client, f"key={key}&ipaddr=10.0.0.5")
    resp = client.get(f"/{key}")
    assert resp.headers["content-type"].startswith("text/plain")
    assert json.loads(resp.text) == {"key": key, "ipaddr": "10.0.0.5"}


def test_trailing_slash_is_an_empty_key(client):
    post(client, "key=abc&ipaddr=10.0.0.5")
    assert client.get("/abc/").text == ""


def test_get_body_is_compact_json(client):
    post(client, "key=abc&ipaddr=10.0.0.5")
    assert client.get("/abc").text == '{"key":"abc","ipaddr":"10.0.0.5"}'
