# sitemap_helpers/localized_urls.py
from __future__ import annotations

from urllib.parse import urlsplit, urlunsplit


def localized_subdomain_url(base_url: str, lang: str) -> str:
    """https://example.com + fr -> https://fr.example.com"""
    parts = urlsplit(base_url)
    userinfo, at, hostport = parts.netloc.rpartition("@")
    netloc = f"{userinfo}{at}{lang}.{hostport}"
    return urlunsplit((parts.scheme, netloc, parts.path, parts.query, parts.fragment))


def localized_url(base_url: str, lang: str, default_lang: str, is_subdomain: bool = False) -> str:
    """Base URL for ``lang``: unchanged for the default language, else sub-domained or prefixed."""
    if lang == default_lang:
        return base_url
    if is_subdomain:
        return localized_subdomain_url(base_url, lang)
    return f"{base_url.rstrip('/')}/{lang}"
