from fastapi import FastAPI
from fastapi.testclient import TestClient

from sitemap_routers.sitemap_routes import build_sitemap_router


def make_client(config, reader):
    app = FastAPI()
    app.include_router(build_sitemap_router(config, manifest_reader=reader))
    return TestClient(app)


def test_serves_generated_sitemap(make_config):
    config = make_config(nextConfigPath="routes.json")
    client = make_client(config, lambda location: ["/", "/about"])

    r = client.get("/sitemap.xml")
    assert r.status_code == 200
    assert r.headers["content-type"].startswith("application/xml")
    assert "<loc>https://x.com/about</loc>" in r.text
    assert config.sitemap_path.exists()


def test_refresh_regenerates(make_config):
    config = make_config(nextConfigPath="routes.json")
    routes = ["/"]
    client = make_client(config, lambda location: list(routes))

    assert "/pricing" not in client.get("/sitemap.xml").text
    routes.append("/pricing")
    assert "/pricing" not in client.get("/sitemap.xml").text
    assert "<loc>https://x.com/pricing</loc>" in client.get("/sitemap.xml?refresh=true").text


def test_generation_failure_is_500(make_config, tmp_path):
    config = make_config(pagesDirectory=str(tmp_path / "missing"))
    client = make_client(config, lambda location: [])
    r = client.get("/sitemap.xml")
    assert r.status_code == 500
    assert r.json() == {"detail": "Sitemap generation failed"}
