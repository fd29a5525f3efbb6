# sitemap_helpers/path_discovery.py
# -----------------------------------------------------
# Walks the pages directory and turns every page file
# into a web-facing PagePath ("/blog/post").
# -----------------------------------------------------

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, List, Set

from sitemap_helpers.errors import DiscoveryError
from sitemap_helpers.path_rules import PagePath, normalize_path, strip_extension

logger = logging.getLogger("sitemap.discovery")

INDEX_NAME = "index"


def is_reserved_page(name: str) -> bool:
    """Framework-internal pages (_app, _document) and hidden files never become routes."""
    return name.startswith("_") or name.startswith(".")


def _extension(name: str) -> str:
    stem = strip_extension(name)
    return name[len(stem) + 1 :] if stem != name else ""


def to_page_path(relative: str, exclude_index: bool = True, index_name: str = INDEX_NAME) -> str:
    """'blog/index.html' -> '/blog', 'index.tsx' -> '/', 'about.md' -> '/about'."""
    route = strip_extension(relative.replace("\\", "/"))
    if exclude_index:
        head, _, leaf = route.rpartition("/")
        if leaf == index_name:
            route = head
    return normalize_path(route)


def _walk(folder: Path, exclude_extensions: frozenset, found: List[Path], visited: Set[Path]) -> None:
    try:
        visited.add(folder.resolve())
        children = sorted(folder.iterdir(), key=lambda p: p.name)
    except OSError as e:
        raise DiscoveryError(f"Cannot read pages directory {folder}: {e}") from e

    for child in children:
        if is_reserved_page(child.name):
            continue
        if child.is_dir():
            # a symlinked folder seen before would recurse forever or repeat pages
            if child.resolve() in visited:
                logger.warning("Skipping %s (already visited as %s)", child, child.resolve())
                continue
            _walk(child, exclude_extensions, found, visited)
        elif not child.exists():
            logger.warning("Skipping %s (broken link)", child)
        elif _extension(child.name) in exclude_extensions:
            logger.debug("Skipping %s (excluded extension)", child)
        else:
            found.append(child)


def discover_paths(
    root: Path | str,
    exclude_extensions: Iterable[str] = (),
    exclude_index: bool = True,
    index_name: str = INDEX_NAME,
) -> List[str]:
    """Recursively list page files under ``root`` and map them to PagePaths."""
    root = Path(root)
    if not root.exists():
        raise DiscoveryError(f"Pages directory not found: {root}")
    if not root.is_dir():
        raise DiscoveryError(f"Pages directory is not a directory: {root}")

    extensions = frozenset(ext.lstrip(".") for ext in exclude_extensions)
    files: List[Path] = []
    _walk(root, extensions, files, set())

    paths: List[str] = []
    for f in files:
        rel = f.relative_to(root).as_posix()
        paths.append(PagePath(to_page_path(rel, exclude_index, index_name), source=normalize_path(rel)))
    logger.info("Discovered %d pages under %s", len(paths), root)
    return paths
