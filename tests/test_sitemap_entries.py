import logging
from datetime import date

from sitemap_helpers.path_rules import classify_rule, classify_rules
from sitemap_helpers.sitemap_config import PageMetadata
from sitemap_helpers.sitemap_entries import (
    DEFAULT_METADATA,
    SitemapEntry,
    apply_trailing_slash,
    build_entries,
    lookup_metadata,
)


def test_defaults_when_no_metadata():
    entries = build_entries(["/", "/about"])
    assert entries == [
        SitemapEntry("/", "0.5", "daily"),
        SitemapEntry("/about", "0.5", "daily"),
    ]


def test_order_is_preserved():
    paths = ["/z", "/a", "/m"]
    assert [e.page_path for e in build_entries(paths)] == paths


def test_include_allowlist():
    include = classify_rules(["/blog", "/about"])
    entries = build_entries(["/", "/about", "/blog", "/blog/post", "/contact"], include=include)
    assert [e.page_path for e in entries] == ["/about", "/blog", "/blog/post"]


def test_empty_include_keeps_everything():
    assert len(build_entries(["/", "/a", "/b"], include=())) == 3


def test_exact_metadata_wins_over_pattern():
    home = PageMetadata(priority="1.0", changefreq="hourly")
    blog = PageMetadata(priority="0.7", changefreq="weekly")
    post = PageMetadata(priority="0.9", changefreq="monthly")
    exact = {"/": home, "/blog": blog, "/blog/featured": post}
    rules = tuple((classify_rule(k), v) for k, v in exact.items())

    assert lookup_metadata("/blog/featured", exact, rules) is post
    assert lookup_metadata("/blog/other", exact, rules) is blog
    assert lookup_metadata("/", exact, rules) is home
    assert lookup_metadata("/contact", exact, rules) is DEFAULT_METADATA


def test_longest_pattern_wins():
    docs = PageMetadata(priority="0.6")
    api = PageMetadata(priority="0.2")
    rules = (
        (classify_rule("/docs"), docs),
        (classify_rule("/docs/api/*"), api),
    )
    assert lookup_metadata("/docs/api/users", {}, rules) is api
    assert lookup_metadata("/docs/guide", {}, rules) is docs
    assert lookup_metadata("/pricing", {}, rules) is DEFAULT_METADATA


def test_pages_config_applied_to_entries():
    meta = {"/about/": PageMetadata(priority="0.3", changefreq="yearly")}
    entries = build_entries(["/about", "/team"], pages_config=meta)
    assert entries[0] == SitemapEntry("/about", "0.3", "yearly")
    assert entries[1] == SitemapEntry("/team", "0.5", "daily")


def test_trailing_slash_is_idempotent():
    once = apply_trailing_slash("/about", True)
    assert once == "/about/"
    assert apply_trailing_slash(once, True) == once
    assert apply_trailing_slash("/", True) == "/"
    assert apply_trailing_slash("/about/", False) == "/about"


def test_trailing_slash_in_entries():
    entries = build_entries(["/", "/about", "/blog/"], trailing_slash=True)
    assert [e.page_path for e in entries] == ["/", "/about/", "/blog/"]


def test_lastmod_attached():
    day = date(2024, 1, 2)
    assert all(e.lastmod == day for e in build_entries(["/", "/a"], lastmod=day))


def test_duplicates_dropped_with_warning(caplog):
    with caplog.at_level(logging.WARNING, logger="sitemap.entries"):
        entries = build_entries(["/about", "/about/", "/team"])
    assert [e.page_path for e in entries] == ["/about", "/team"]
    assert "Duplicate page path /about" in caplog.text
