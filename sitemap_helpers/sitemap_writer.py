# sitemap_helpers/sitemap_writer.py
# -----------------------------------------------------
# sitemap.xml serialization.
# SitemapWriter is a strict state machine:
#   START -> HEADER_WRITTEN -> BODY_WRITING -> CLOSED
# Bytes go through a sink that writes a temp file and
# swaps it into place only when the document is closed.
# -----------------------------------------------------

from __future__ import annotations

import logging
import os
from contextlib import contextmanager
from enum import Enum
from pathlib import Path
from typing import Iterable, Iterator, List, Sequence, Tuple
from xml.sax.saxutils import escape, quoteattr

from sitemap_helpers.errors import SitemapStateError, WriteError
from sitemap_helpers.localized_urls import localized_url
from sitemap_helpers.sitemap_config import SitemapStylesheet
from sitemap_helpers.sitemap_entries import SitemapEntry

logger = logging.getLogger("sitemap.writer")

XML_HEADER = '<?xml version="1.0" encoding="UTF-8"?>\n'
XML_URLSET_OPEN = (
    '<urlset xsi:schemaLocation="http://www.sitemaps.org/schemas/sitemap/0.9 '
    'http://www.sitemaps.org/schemas/sitemap/0.9/sitemap.xsd"\n'
    '        xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance"\n'
    '        xmlns="http://www.sitemaps.org/schemas/sitemap/0.9"\n'
    '        xmlns:xhtml="http://www.w3.org/1999/xhtml">\n'
)
XML_URLSET_CLOSE = "</urlset>\n"


class FileSink:
    """
    Filesystem sink for one output file.
    write_truncate() starts a fresh temp file next to the target, append_bytes()
    extends it and commit() atomically replaces the target. abort() drops the
    temp file and leaves any previous target untouched.
    """

    def __init__(self, path: Path | str):
        self.path = Path(path)
        self.tmp_path = self.path.with_suffix(".tmp")
        self._fh = None

    def resolve_path(self) -> Path:
        return self.path.resolve()

    def write_truncate(self, data: bytes) -> None:
        self._close_handle()
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self._fh = open(self.tmp_path, "wb")
            self._fh.write(data)
        except OSError as e:
            raise WriteError(f"Cannot create {self.tmp_path}: {e}") from e

    def append_bytes(self, data: bytes) -> None:
        if self._fh is None:
            raise WriteError(f"append before truncate on {self.path}")
        try:
            self._fh.write(data)
        except OSError as e:
            raise WriteError(f"Cannot append to {self.tmp_path}: {e}") from e

    def commit(self) -> Path:
        if self._fh is None:
            raise WriteError(f"Nothing to commit for {self.path}")
        try:
            self._fh.flush()
            os.fsync(self._fh.fileno())
            self._close_handle()
            self.tmp_path.replace(self.path)
        except OSError as e:
            raise WriteError(f"Cannot finalize {self.path}: {e}") from e
        return self.path

    def abort(self) -> None:
        try:
            self._close_handle()
        except OSError:
            logger.warning("Failed closing %s during abort", self.tmp_path, exc_info=True)
        try:
            self.tmp_path.unlink(missing_ok=True)
        except OSError:
            logger.warning("Failed removing %s during abort", self.tmp_path, exc_info=True)

    def _close_handle(self) -> None:
        if self._fh is not None:
            fh, self._fh = self._fh, None
            fh.close()


class WriterState(Enum):
    START = "start"
    HEADER_WRITTEN = "header_written"
    BODY_WRITING = "body_writing"
    CLOSED = "closed"


def format_stylesheets(stylesheets: Iterable[SitemapStylesheet]) -> str:
    return "".join(
        f"<?xml-stylesheet href={quoteattr(s.style_file)} type={quoteattr(s.type)} ?>\n"
        for s in stylesheets
    )


def format_url(base_url: str, entry: SitemapEntry, alternates: Sequence[Tuple[str, str]] = ()) -> str:
    """One <url> block; ``alternates`` is a list of (hreflang, href)."""
    lines = ["  <url>", f"    <loc>{escape(base_url + entry.page_path)}</loc>"]
    if entry.lastmod:
        lines.append(f"    <lastmod>{entry.lastmod.isoformat()}</lastmod>")
    if entry.changefreq:
        lines.append(f"    <changefreq>{escape(entry.changefreq)}</changefreq>")
    if entry.priority:
        lines.append(f"    <priority>{escape(entry.priority)}</priority>")
    for lang, href in alternates:
        lines.append(f'    <xhtml:link rel="alternate" hreflang={quoteattr(lang)} href={quoteattr(href)} />')
    lines.append("  </url>")
    return "\n".join(lines) + "\n"


class SitemapWriter:
    def __init__(self, sink):
        self.sink = sink
        self.state = WriterState.START
        self.url_count = 0

    def _require(self, *allowed: WriterState) -> None:
        if self.state not in allowed:
            raise SitemapStateError(
                f"sitemap writer is {self.state.value}, expected {' or '.join(s.value for s in allowed)}"
            )

    def write_header(self, stylesheets: Iterable[SitemapStylesheet] = ()) -> None:
        self._require(WriterState.START)
        self.sink.write_truncate((XML_HEADER + format_stylesheets(stylesheets) + XML_URLSET_OPEN).encode("utf-8"))
        self.state = WriterState.HEADER_WRITTEN

    def write_url(self, base_url: str, entry: SitemapEntry, alternates: Sequence[Tuple[str, str]] = ()) -> None:
        self._require(WriterState.HEADER_WRITTEN, WriterState.BODY_WRITING)
        self.sink.append_bytes(format_url(base_url, entry, alternates).encode("utf-8"))
        self.state = WriterState.BODY_WRITING
        self.url_count += 1

    def write_entries(
        self,
        entries: Iterable[SitemapEntry],
        base_url: str,
        langs: Sequence[str] = (),
        default_lang: str = "",
        is_subdomain: bool = False,
    ) -> None:
        """Single-locale: one block per entry. Multi-locale: one block per entry per language."""
        if not langs:
            for entry in entries:
                self.write_url(base_url, entry)
            return

        lang_urls = [(lang, localized_url(base_url, lang, default_lang, is_subdomain)) for lang in langs]
        for entry in entries:
            alternates: List[Tuple[str, str]] = [(lang, url + entry.page_path) for lang, url in lang_urls]
            for _, url in lang_urls:
                self.write_url(url, entry, alternates)

    def close(self) -> Path:
        self._require(WriterState.HEADER_WRITTEN, WriterState.BODY_WRITING)
        self.sink.append_bytes(XML_URLSET_CLOSE.encode("utf-8"))
        self.state = WriterState.CLOSED
        return self.sink.commit()


@contextmanager
def open_sitemap(
    path: Path | str,
    stylesheets: Iterable[SitemapStylesheet] = (),
    sink=None,
) -> Iterator[SitemapWriter]:
    """Header on enter, footer + commit on clean exit, abort on error."""
    sink = sink if sink is not None else FileSink(path)
    writer = SitemapWriter(sink)
    try:
        writer.write_header(stylesheets)
        yield writer
        if writer.state is not WriterState.CLOSED:
            writer.close()
    except BaseException:
        sink.abort()
        raise
    logger.debug("Wrote %d <url> blocks to %s", writer.url_count, sink.resolve_path())
