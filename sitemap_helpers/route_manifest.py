# sitemap_helpers/route_manifest.py
# -----------------------------------------------------
# Route manifest reader: the alternative to walking the
# pages directory. Reads a JSON route list from disk or
# from an http(s) URL and returns it in manifest order.
# -----------------------------------------------------

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, List, Optional

import httpx

from sitemap_helpers.errors import DiscoveryError

logger = logging.getLogger("sitemap.manifest")

MANIFEST_TIMEOUT = 30


def _is_url(location: str) -> bool:
    return location.startswith(("http://", "https://"))


def _fetch_remote(url: str, client: Optional[httpx.Client] = None) -> Any:
    logger.info("⬇️ Fetching route manifest %s", url)
    try:
        if client is not None:
            r = client.get(url)
            r.raise_for_status()
            return r.json()
        with httpx.Client(timeout=MANIFEST_TIMEOUT, follow_redirects=True) as c:
            r = c.get(url)
            r.raise_for_status()
            return r.json()
    except httpx.HTTPError as e:
        raise DiscoveryError(f"Cannot fetch route manifest {url}: {e}") from e
    except ValueError as e:
        raise DiscoveryError(f"Route manifest {url} is not valid JSON: {e}") from e


def _read_local(path: Path) -> Any:
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except FileNotFoundError as e:
        raise DiscoveryError(f"Route manifest not found: {path}") from e
    except json.JSONDecodeError as e:
        raise DiscoveryError(f"Route manifest {path} is not valid JSON: {e}") from e
    except OSError as e:
        raise DiscoveryError(f"Cannot read route manifest {path}: {e}") from e


def extract_routes(data: Any) -> List[str]:
    """
    Pull the route list out of a decoded manifest. Supported shapes:
      - ["/", "/about"]
      - {"staticRoutes": [{"page": "/"}, ...]}   (routes-manifest.json)
      - {"routes": {"/": {...}, ...}}            (prerender-manifest.json)
      - {"/": {...}, "/about": {...}}            (exportPathMap output)
    """
    if isinstance(data, dict):
        if isinstance(data.get("staticRoutes"), list):
            routes = []
            for item in data["staticRoutes"]:
                page = item.get("page") if isinstance(item, dict) else item
                if not isinstance(page, str):
                    raise DiscoveryError(f"Malformed staticRoutes entry: {item!r}")
                routes.append(page)
            return routes
        if "routes" in data and isinstance(data["routes"], (dict, list)):
            data = data["routes"]
        if isinstance(data, dict):
            return list(data.keys())

    if isinstance(data, list):
        if not all(isinstance(r, str) for r in data):
            raise DiscoveryError("Route manifest list must contain only strings")
        return list(data)

    raise DiscoveryError(f"Unsupported route manifest format: {type(data).__name__}")


def read_route_manifest(location: str | Path, client: Optional[httpx.Client] = None) -> List[str]:
    """Return the ordered route paths listed by the manifest at ``location``."""
    location = str(location)
    data = _fetch_remote(location, client) if _is_url(location) else _read_local(Path(location))
    routes = extract_routes(data)
    logger.info("Route manifest %s lists %d routes", location, len(routes))
    return routes
