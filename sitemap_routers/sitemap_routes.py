# sitemap_routers/sitemap_routes.py
# ---------------------------------------------------------------
# Serves the generated sitemap.xml from a preview server.
# Generates it on first request (or ?refresh=true).
#   app.include_router(build_sitemap_router(config))
# ---------------------------------------------------------------

import logging

from fastapi import APIRouter, HTTPException, Query, Response

from sitemap_helpers.errors import SitemapError
from sitemap_helpers.generator import ManifestReader, generate_sitemap
from sitemap_helpers.route_manifest import read_route_manifest
from sitemap_helpers.sitemap_config import SitemapConfig

logger = logging.getLogger("sitemap.routes")


def build_sitemap_router(config: SitemapConfig, manifest_reader: ManifestReader = read_route_manifest) -> APIRouter:
    router = APIRouter()

    @router.get("/sitemap.xml", response_class=Response, include_in_schema=False)
    def sitemap(refresh: bool = Query(False)):
        """Return sitemap.xml, building it first when missing or when refresh is requested."""
        out_path = config.sitemap_path

        if refresh or not out_path.exists():
            try:
                generate_sitemap(config, manifest_reader)
            except SitemapError as e:
                logger.error("Failed to generate sitemap.xml: %s", e, exc_info=True)
                raise HTTPException(status_code=500, detail="Sitemap generation failed")

        xml = out_path.read_text(encoding="utf-8")
        return Response(content=xml, media_type="application/xml")

    return router
