# sitemap_helpers/sitemap_entries.py
# -----------------------------------------------------
# Maps surviving page paths to SitemapEntry values
# (path + priority + changefreq + lastmod).
# -----------------------------------------------------

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from sitemap_helpers.path_rules import FolderRule, Rule, matches_any, normalize_path
from sitemap_helpers.sitemap_config import DEFAULT_CHANGEFREQ, DEFAULT_PRIORITY, PageMetadata

logger = logging.getLogger("sitemap.entries")

DEFAULT_METADATA = PageMetadata(priority=DEFAULT_PRIORITY, changefreq=DEFAULT_CHANGEFREQ)


@dataclass(frozen=True)
class SitemapEntry:
    page_path: str
    priority: str = DEFAULT_PRIORITY
    changefreq: str = DEFAULT_CHANGEFREQ
    lastmod: Optional[date] = None


def apply_trailing_slash(path: str, required: bool) -> str:
    """Add (or drop) exactly one trailing slash on non-root paths."""
    path = normalize_path(path)
    if path == "/":
        return path
    return path + "/" if required else path


def lookup_metadata(
    path: str,
    exact: Dict[str, PageMetadata],
    page_rules: Sequence[Tuple[Rule, PageMetadata]] = (),
) -> PageMetadata:
    """Exact key first, then the longest matching pattern, then defaults."""
    key = normalize_path(path)
    if key in exact:
        return exact[key]

    best: Optional[Tuple[Rule, PageMetadata]] = None
    for rule, meta in page_rules:
        # "/" only ever applies to the home page
        if isinstance(rule, FolderRule) and not rule.segments:
            continue
        if rule.matches(path) and (best is None or len(rule.pattern) > len(best[0].pattern)):
            best = (rule, meta)
    return best[1] if best else DEFAULT_METADATA


def build_entries(
    paths: Iterable[str],
    include: Sequence[Rule] = (),
    pages_config: Optional[Dict[str, PageMetadata]] = None,
    trailing_slash: bool = False,
    lastmod: Optional[date] = None,
    page_rules: Sequence[Tuple[Rule, PageMetadata]] = (),
) -> List[SitemapEntry]:
    exact = {normalize_path(k): v for k, v in (pages_config or {}).items()}
    seen = set()
    entries: List[SitemapEntry] = []

    for raw in paths:
        path = normalize_path(raw)
        if include and not matches_any(raw, include):
            continue
        if path in seen:
            logger.warning("Duplicate page path %s skipped", path)
            continue
        seen.add(path)

        meta = lookup_metadata(raw, exact, page_rules)
        entries.append(
            SitemapEntry(
                page_path=apply_trailing_slash(path, trailing_slash),
                priority=meta.priority,
                changefreq=meta.changefreq,
                lastmod=lastmod,
            )
        )

    logger.debug("Built %d sitemap entries", len(entries))
    return entries
