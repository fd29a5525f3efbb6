import json

import httpx
import pytest

from sitemap_helpers.errors import DiscoveryError
from sitemap_helpers.route_manifest import extract_routes, read_route_manifest


def test_extract_plain_list():
    assert extract_routes(["/", "/about"]) == ["/", "/about"]


def test_extract_static_routes():
    data = {"version": 3, "staticRoutes": [{"page": "/"}, {"page": "/blog"}], "dynamicRoutes": []}
    assert extract_routes(data) == ["/", "/blog"]


def test_extract_prerender_routes():
    data = {"version": 4, "routes": {"/": {}, "/about": {}}, "dynamicRoutes": {}}
    assert extract_routes(data) == ["/", "/about"]


def test_extract_export_path_map():
    assert extract_routes({"/": {"page": "/"}, "/contact": {"page": "/contact"}}) == ["/", "/contact"]


@pytest.mark.parametrize("bad", [42, "routes", [1, 2], {"staticRoutes": [{"nope": 1}]}])
def test_extract_rejects_malformed(bad):
    with pytest.raises(DiscoveryError):
        extract_routes(bad)


def test_read_local_manifest(tmp_path):
    manifest = tmp_path / "routes.json"
    manifest.write_text(json.dumps(["/", "/about", "/about"]), encoding="utf-8")
    assert read_route_manifest(manifest) == ["/", "/about", "/about"]


def test_read_missing_manifest(tmp_path):
    with pytest.raises(DiscoveryError):
        read_route_manifest(tmp_path / "missing.json")


def test_read_invalid_json(tmp_path):
    manifest = tmp_path / "routes.json"
    manifest.write_text("{not json", encoding="utf-8")
    with pytest.raises(DiscoveryError):
        read_route_manifest(manifest)


def test_read_remote_manifest():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/routes-manifest.json"
        return httpx.Response(200, json={"staticRoutes": [{"page": "/"}, {"page": "/pricing"}]})

    with httpx.Client(transport=httpx.MockTransport(handler)) as client:
        routes = read_route_manifest("https://build.example.com/routes-manifest.json", client=client)
    assert routes == ["/", "/pricing"]


def test_read_remote_manifest_http_error():
    transport = httpx.MockTransport(lambda request: httpx.Response(404))
    with httpx.Client(transport=transport) as client:
        with pytest.raises(DiscoveryError):
            read_route_manifest("https://build.example.com/missing.json", client=client)
