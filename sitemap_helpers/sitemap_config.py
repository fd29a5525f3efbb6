# sitemap_helpers/sitemap_config.py
# -----------------------------------------------------
# Immutable run configuration (pydantic).
# Built once per invocation; every component gets a
# read-only reference. Rules are classified here.
# -----------------------------------------------------

from __future__ import annotations

import json
import logging
from datetime import date
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any, Dict, List, Literal, Optional, Tuple
from urllib.parse import urlsplit

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, ValidationError, field_validator, model_validator

from sitemap_helpers.errors import ConfigurationError
from sitemap_helpers.path_rules import Rule, classify_rule, classify_rules

logger = logging.getLogger("sitemap.config")

DEFAULT_PRIORITY = "0.5"
DEFAULT_CHANGEFREQ = "daily"
SITEMAP_FILE_NAME = "sitemap.xml"

ChangeFreq = Literal["always", "hourly", "daily", "weekly", "monthly", "yearly", "never"]


class PageMetadata(BaseModel):
    model_config = ConfigDict(frozen=True)

    priority: str = DEFAULT_PRIORITY
    changefreq: ChangeFreq = DEFAULT_CHANGEFREQ

    @field_validator("priority", mode="before")
    @classmethod
    def _check_priority(cls, v: Any) -> str:
        text = str(v).strip()
        try:
            value = Decimal(text)
        except InvalidOperation:
            raise ValueError(f"priority must be a decimal number, got {v!r}")
        if not value.is_finite() or not Decimal("0") <= value <= Decimal("1"):
            raise ValueError(f"priority must be between 0.0 and 1.0, got {text}")
        return text


class SitemapStylesheet(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    type: str = "text/xsl"
    style_file: str = Field(alias="styleFile")


class SitemapConfig(BaseModel):
    """All parameters of one sitemap run. Accepts camelCase keys."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    base_url: str = Field(alias="baseUrl")
    pages_directory: Optional[Path] = Field(default=None, alias="pagesDirectory")
    next_config_path: Optional[str] = Field(default=None, alias="nextConfigPath")
    target_directory: Path = Field(alias="targetDirectory")
    exclude: Tuple[str, ...] = ()
    exclude_extensions: Tuple[str, ...] = Field(default=(), alias="excludeExtensions")
    exclude_index: bool = Field(default=True, alias="excludeIndex")
    include: Tuple[str, ...] = ()
    is_subdomain: bool = Field(default=False, alias="isSubdomain")
    is_trailing_slash_required: bool = Field(default=False, alias="isTrailingSlashRequired")
    default_lang: str = Field(default="", alias="defaultLang")
    langs: Tuple[str, ...] = ()
    pages_config: Dict[str, PageMetadata] = Field(default_factory=dict, alias="pagesConfig")
    sitemap_stylesheet: Tuple[SitemapStylesheet, ...] = Field(default=(), alias="sitemapStylesheet")
    lastmod: Optional[date] = Field(default_factory=date.today)

    _exclude_rules: Tuple[Rule, ...] = PrivateAttr(default=())
    _include_rules: Tuple[Rule, ...] = PrivateAttr(default=())
    _page_rules: Tuple[Tuple[Rule, PageMetadata], ...] = PrivateAttr(default=())

    @model_validator(mode="before")
    @classmethod
    def _fill_default_lang(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("defaultLang") is None and data.get("default_lang") is None:
            data = {k: v for k, v in data.items() if k not in ("defaultLang", "default_lang")}
            langs = data.get("langs") or []
            data["defaultLang"] = langs[0] if langs else ""
        return data

    @field_validator("base_url")
    @classmethod
    def _check_base_url(cls, v: str) -> str:
        parts = urlsplit(v.strip())
        if parts.scheme not in ("http", "https") or not parts.netloc:
            raise ValueError(f"baseUrl must be an absolute http(s) URL, got {v!r}")
        return v.strip().rstrip("/")

    @field_validator("next_config_path")
    @classmethod
    def _blank_manifest(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        return v.strip() or None

    @field_validator("exclude_extensions")
    @classmethod
    def _strip_dots(cls, v: Tuple[str, ...]) -> Tuple[str, ...]:
        return tuple(ext.strip().lstrip(".") for ext in v if ext.strip())

    @field_validator("exclude", "include")
    @classmethod
    def _check_rules(cls, v: Tuple[str, ...]) -> Tuple[str, ...]:
        if any(not rule.strip() for rule in v):
            raise ValueError("path rules must not be empty strings")
        return v

    @field_validator("pages_config")
    @classmethod
    def _check_page_keys(cls, v: Dict[str, PageMetadata]) -> Dict[str, PageMetadata]:
        if any(not key.strip() for key in v):
            raise ValueError("pagesConfig keys must not be empty strings")
        return v

    @model_validator(mode="after")
    def _check_sources(self) -> "SitemapConfig":
        if self.pages_directory is None and not self.next_config_path:
            raise ValueError("either pagesDirectory or nextConfigPath is required")
        if self.langs and self.default_lang not in self.langs:
            raise ValueError(f"defaultLang {self.default_lang!r} is not one of langs {list(self.langs)}")
        if len(set(self.langs)) != len(self.langs):
            raise ValueError(f"langs contains duplicates: {list(self.langs)}")
        return self

    def model_post_init(self, __context: Any) -> None:
        self._exclude_rules = classify_rules(self.exclude)
        self._include_rules = classify_rules(self.include)
        self._page_rules = tuple((classify_rule(key), meta) for key, meta in self.pages_config.items())

    # -- derived, read-only views -------------------------------------------
    @property
    def exclude_rules(self) -> Tuple[Rule, ...]:
        return self._exclude_rules

    @property
    def include_rules(self) -> Tuple[Rule, ...]:
        return self._include_rules

    @property
    def page_rules(self) -> Tuple[Tuple[Rule, PageMetadata], ...]:
        return self._page_rules

    @property
    def sitemap_path(self) -> Path:
        return Path(self.target_directory).resolve() / SITEMAP_FILE_NAME


def _format_validation_error(exc: ValidationError) -> str:
    problems: List[str] = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ())) or "config"
        problems.append(f"{loc}: {err.get('msg')}")
    return "; ".join(problems)


def build_config(data: Optional[Dict[str, Any]]) -> SitemapConfig:
    """Validate a raw mapping into a SitemapConfig, or raise ConfigurationError."""
    if not data:
        raise ConfigurationError("Config is mandatory")
    try:
        return SitemapConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid sitemap config: {_format_validation_error(e)}") from e


def load_config(path: Path | str, overrides: Optional[Dict[str, Any]] = None) -> SitemapConfig:
    """Read a JSON config file; ``overrides`` (camelCase keys) win over file values."""
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError as e:
        raise ConfigurationError(f"Config file not found: {path}") from e
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"Cannot read config file {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file {path} must contain a JSON object")

    data.update({k: v for k, v in (overrides or {}).items() if v is not None})
    config = build_config(data)
    logger.debug("Loaded sitemap config from %s", path)
    return config
