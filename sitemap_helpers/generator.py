# sitemap_helpers/generator.py
# -----------------------------------------------------
# The sitemap pipeline:
#   discover -> exclude -> build entries -> write XML
# One synchronous run per call. Two runs must not target
# the same directory at the same time.
# -----------------------------------------------------

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence

from sitemap_helpers.path_discovery import discover_paths
from sitemap_helpers.path_rules import is_excluded, split_folders_and_files
from sitemap_helpers.route_manifest import read_route_manifest
from sitemap_helpers.sitemap_config import SitemapConfig, build_config
from sitemap_helpers.sitemap_entries import SitemapEntry, build_entries
from sitemap_helpers.sitemap_writer import open_sitemap

logger = logging.getLogger("sitemap.generator")

ManifestReader = Callable[[str], Sequence[str]]


def collect_paths(config: SitemapConfig, manifest_reader: ManifestReader = read_route_manifest) -> List[str]:
    if config.next_config_path:
        return list(manifest_reader(config.next_config_path))
    return discover_paths(config.pages_directory, config.exclude_extensions, config.exclude_index)


def filter_paths(paths: Sequence[str], config: SitemapConfig) -> List[str]:
    folder_rules, file_rules = split_folders_and_files(config.exclude_rules)
    kept = [p for p in paths if not is_excluded(p, folder_rules, file_rules)]
    logger.debug("Exclusion rules removed %d of %d paths", len(paths) - len(kept), len(paths))
    return kept


def build_sitemap_entries(paths: Sequence[str], config: SitemapConfig) -> List[SitemapEntry]:
    return build_entries(
        paths,
        include=config.include_rules,
        pages_config=config.pages_config,
        trailing_slash=config.is_trailing_slash_required,
        lastmod=config.lastmod,
        page_rules=config.page_rules,
    )


def generate_sitemap(
    config: SitemapConfig,
    manifest_reader: ManifestReader = read_route_manifest,
    sink=None,
) -> Path:
    """Run the whole pipeline and return the path of the written sitemap.xml."""
    paths = collect_paths(config, manifest_reader)
    entries = build_sitemap_entries(filter_paths(paths, config), config)

    with open_sitemap(config.sitemap_path, config.sitemap_stylesheet, sink=sink) as writer:
        writer.write_entries(
            entries,
            base_url=config.base_url,
            langs=config.langs,
            default_lang=config.default_lang,
            is_subdomain=config.is_subdomain,
        )
        url_count = writer.url_count

    logger.info(
        "🗺️ Sitemap written to %s: %d pages, %d <url> blocks, %d languages",
        config.sitemap_path, len(entries), url_count, len(config.langs),
    )
    return config.sitemap_path


class SitemapGenerator:
    """Holds one validated config; ``generate_sitemap()`` may be called repeatedly."""

    def __init__(self, config: SitemapConfig, manifest_reader: ManifestReader = read_route_manifest):
        self.config = config
        self.manifest_reader = manifest_reader

    def generate_sitemap(self) -> Path:
        return generate_sitemap(self.config, self.manifest_reader)


def configure_sitemap(config: Optional[Dict[str, Any]], manifest_reader: Optional[ManifestReader] = None) -> SitemapGenerator:
    return SitemapGenerator(build_config(config), manifest_reader or read_route_manifest)
