# sitemap_helpers/path_rules.py
# -----------------------------------------------------
# Exclusion / inclusion rules for page paths.
# Each raw pattern is classified ONCE into a tagged rule
# (FolderRule | FileRule | GlobRule); matching is pure.
# -----------------------------------------------------

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterable, Optional, Tuple, Union

GLOB_CHARS = ("*", "?", "[")
_MULTI_SLASH_RE = re.compile(r"/{2,}")


def normalize_path(value: str) -> str:
    """Return a web-facing path: leading slash, no duplicate or trailing slash."""
    path = value.strip().replace("\\", "/")
    path = _MULTI_SLASH_RE.sub("/", "/" + path)
    if len(path) > 1:
        path = path.rstrip("/")
    return path or "/"


class PagePath(str):
    """A route string that remembers the page file it was discovered from."""

    def __new__(cls, value: str, source: Optional[str] = None):
        obj = super().__new__(cls, value)
        obj.source = source
        return obj


def path_segments(path: str) -> Tuple[str, ...]:
    return tuple(part for part in normalize_path(path).split("/") if part)


def strip_extension(name: str) -> str:
    head, sep, tail = name.rpartition("/")
    if "." in tail.lstrip("."):
        tail = tail[: tail.rindex(".")]
    return head + sep + tail


def _glob_to_regex(pattern: str) -> "re.Pattern[str]":
    out = []
    i = 0
    while i < len(pattern):
        c = pattern[i]
        if c == "*":
            if pattern.startswith("**/", i):
                out.append("(?:.*/)?")
                i += 3
                continue
            if pattern.startswith("**", i):
                out.append(".*")
                i += 2
                continue
            out.append("[^/]*")
        elif c == "?":
            out.append("[^/]")
        elif c == "[":
            end = pattern.find("]", i + 1)
            if end == -1:
                out.append(re.escape(c))
            else:
                body = pattern[i + 1 : end]
                if body.startswith("!"):
                    body = "^" + body[1:]
                out.append("[" + body.replace("\\", "\\\\") + "]")
                i = end + 1
                continue
        else:
            out.append(re.escape(c))
        i += 1
    return re.compile("".join(out))


@dataclass(frozen=True)
class FolderRule:
    """Matches the folder itself and everything below it, on segment boundaries."""

    pattern: str
    segments: Tuple[str, ...] = field(init=False, repr=False)

    def __post_init__(self):
        object.__setattr__(self, "segments", path_segments(self.pattern))

    def matches(self, path: str) -> bool:
        parts = path_segments(path)
        return parts[: len(self.segments)] == self.segments


@dataclass(frozen=True)
class FileRule:
    """
    Matches one leaf page. A rule with a directory part ("/blog/old.html")
    must equal the whole path; a bare name ("404.html") matches the final
    segment anywhere. The extension is optional on the page side.
    """

    pattern: str
    anchored: bool = True

    def matches(self, path: str) -> bool:
        path = normalize_path(path)
        if self.anchored:
            return path in (self.pattern, strip_extension(self.pattern))
        leaf = path.rsplit("/", 1)[-1]
        return leaf in (self.pattern, strip_extension(self.pattern))


@dataclass(frozen=True)
class GlobRule:
    """
    Glob over page paths: '*' and '?' stay within a segment, '**' crosses
    segments. A pattern without a directory part ("draft-*", "*.mdx") is
    matched against the final segment anywhere. A pattern with an extension
    is matched against the page's source file when it is known; otherwise
    the extension is optional on the page side, as for FileRule.
    """

    pattern: str
    anchored: bool = True
    regex: "re.Pattern[str]" = field(init=False, repr=False, compare=False)
    stem_regex: "Optional[re.Pattern[str]]" = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "regex", _glob_to_regex(self.pattern))
        stem = strip_extension(self.pattern)
        stem_regex = None
        # "*.mdx" minus its extension would match every page
        if stem != self.pattern and stem.rsplit("/", 1)[-1].strip("*?"):
            stem_regex = _glob_to_regex(stem)
        object.__setattr__(self, "stem_regex", stem_regex)

    @property
    def has_extension(self) -> bool:
        return strip_extension(self.pattern) != self.pattern

    def _subject(self, path: str) -> str:
        path = normalize_path(path)
        return path if self.anchored else path.rsplit("/", 1)[-1]

    def matches(self, path: str) -> bool:
        source = getattr(path, "source", None)
        if self.has_extension and source is not None:
            return self.regex.fullmatch(self._subject(source)) is not None

        subject = self._subject(path)
        if self.regex.fullmatch(subject):
            return True
        return self.stem_regex is not None and self.stem_regex.fullmatch(subject) is not None


Rule = Union[FolderRule, FileRule, GlobRule]


def classify_rule(raw: str) -> Rule:
    text = raw.strip()
    if not text:
        raise ValueError("empty path rule")
    if any(ch in text for ch in GLOB_CHARS):
        if "/" in text.replace("\\", "/"):
            return GlobRule(normalize_path(text))
        return GlobRule(text, anchored=False)
    leaf = text.rstrip("/").rsplit("/", 1)[-1]
    if "." in leaf.lstrip(".") and not text.endswith("/"):
        anchored = "/" in text.replace("\\", "/")
        return FileRule(normalize_path(text) if anchored else leaf, anchored=anchored)
    return FolderRule(normalize_path(text))


def classify_rules(rules: Iterable[str]) -> Tuple[Rule, ...]:
    return tuple(classify_rule(r) for r in rules)


def split_folders_and_files(rules: Iterable[Rule]) -> Tuple[Tuple[Rule, ...], Tuple[Rule, ...]]:
    """Split classified rules into (folder rules, file + glob rules)."""
    rules = tuple(rules)
    folders = tuple(r for r in rules if isinstance(r, FolderRule))
    files = tuple(r for r in rules if not isinstance(r, FolderRule))
    return folders, files


def matches_any(path: str, rules: Iterable[Rule]) -> bool:
    return any(rule.matches(path) for rule in rules)


def is_excluded(path: str, folder_rules: Iterable[Rule], file_rules: Iterable[Rule]) -> bool:
    return matches_any(path, folder_rules) or matches_any(path, file_rules)
