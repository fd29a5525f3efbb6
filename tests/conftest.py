from datetime import date
from pathlib import Path

import pytest

from sitemap_helpers.sitemap_config import build_config

LASTMOD = date(2024, 5, 1)


@pytest.fixture
def pages_dir(tmp_path: Path) -> Path:
    root = tmp_path / "pages"
    for rel in (
        "index.tsx",
        "about.tsx",
        "_app.tsx",
        "_document.tsx",
        ".DS_Store",
        "admin/index.tsx",
        "admin/settings.tsx",
        "administrator-notes.md",
        "blog/index.tsx",
        "blog/first-post.mdx",
        "blog/drafts/wip.mdx",
        "styles/site.css",
    ):
        f = root / rel
        f.parent.mkdir(parents=True, exist_ok=True)
        f.write_text("x", encoding="utf-8")
    return root


@pytest.fixture
def make_config(tmp_path: Path):
    out = tmp_path / "out"
    out.mkdir()

    def _make(**overrides):
        data = {
            "baseUrl": "https://x.com",
            "pagesDirectory": str(tmp_path / "pages"),
            "targetDirectory": str(out),
            "lastmod": LASTMOD.isoformat(),
        }
        data.update(overrides)
        return build_config(data)

    return _make
