# === FILE: sitemap_scout/config.py ===
"""
Loading and validation of the SitemapScout configuration.
Pydantic describes the schema and checks the data.
"""
from __future__ import annotations

import errno
import json
import os
from pathlib import Path
from typing import Any, Tuple, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

__all__ = (
    "DEFAULT_COMMON_PATHS",
    "DEFAULT_USER_AGENT",
    "ExtractionSettings",
    "ParserConfig",
    "load_config",
)

DEFAULT_USER_AGENT = "Mozilla/5.0 (compatible; SitemapScout/1.0; +https://github.com/sitemap-scout)"

# Probed in this order when robots.txt names no sitemap.
DEFAULT_COMMON_PATHS: Tuple[str, ...] = (
    "/sitemap.xml",
    "/sitemap_index.xml",
    "/wp-sitemap.xml",
    "/sitemap.xml.gz",
    "/sitemap_index.xml.gz",
    "/sitemap.php",
    "/sitemap.txt",
    "/post-sitemap.xml",
    "/page-sitemap.xml",
    "/category-sitemap.xml",
    "/sitemap-index.xml",
    "/sitemap/index.xml",
    "/sitemap/sitemap.xml",
)


class ExtractionSettings(BaseModel):
    """Per-run toggles for page enrichment. Every flag is independent."""

    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    extract_title_h1: bool = False
    check_canonical: bool = False
    count_words: bool = False
    count_internal_and_external_links: bool = False
    estimate_competition: bool = False
    parse_multimedia_sitemaps: bool = False

    @property
    def needs_page_fetch(self) -> bool:
        """True when at least one flag requires downloading the page HTML."""
        return any(
            (
                self.extract_title_h1,
                self.check_canonical,
                self.count_words,
                self.count_internal_and_external_links,
                self.estimate_competition,
            )
        )

    @classmethod
    def all_enabled(cls) -> ExtractionSettings:
        return cls(**{name: True for name in cls.model_fields})


class ParserConfig(BaseModel):
    """Configuration of one sitemap parsing run."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    timeout: float = Field(15.0, gt=0, description="Timeout of a single request (seconds).")
    user_agent: str = Field(DEFAULT_USER_AGENT, min_length=1, description="User-Agent header.")
    retry_times: int = Field(3, ge=1, description="Total attempts per request.")
    retry_backoff: float = Field(
        1.0, gt=0, description="Delay unit between attempts; attempt N waits N units."
    )
    max_redirects: int = Field(5, ge=0, description="Redirects followed per request.")
    batch_size: int = Field(10, ge=1, description="Pages enriched concurrently per batch.")
    max_concurrency: int = Field(20, ge=1, description="Outstanding requests across the run.")
    dedupe_pages: bool = Field(False, description="Skip leaf URLs already seen in the run.")
    common_paths: Tuple[str, ...] = Field(DEFAULT_COMMON_PATHS, min_length=1)
    settings: ExtractionSettings = Field(default_factory=ExtractionSettings)

    @field_validator("common_paths", mode="after")
    @classmethod
    def _paths_are_absolute(cls, v: Tuple[str, ...]) -> Tuple[str, ...]:
        bad = [p for p in v if not p.startswith("/")]
        if bad:
            raise ValueError(f"common paths must start with '/': {bad}")
        return v


_DEFAULT_CFG = Path("configs/default.yaml")


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Top level of YAML must be a mapping, got {type(data).__name__}")
    return data


def _read_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8")) or {}
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Top level of JSON must be a mapping, got {type(data).__name__}")
    return data


def load_config(path: Union[str, Path, None]) -> ParserConfig:
    """
    Read YAML or JSON and return a validated ParserConfig.

    With ``path=None`` the ``configs/default.yaml`` of the working directory
    is used when present, built-in defaults otherwise. An explicit path that
    does not exist raises FileNotFoundError.
    """
    if path is None:
        if not _DEFAULT_CFG.is_file():
            return ParserConfig()
        path_obj = _DEFAULT_CFG
    else:
        path_obj = Path(path).expanduser().resolve()
        if not path_obj.is_file():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path_obj))

    suffix = path_obj.suffix.lower()
    if suffix in (".yaml", ".yml"):
        data = _read_yaml(path_obj)
    elif suffix == ".json":
        data = _read_json(path_obj)
    else:
        raise ValueError(f"Unsupported config format: {suffix}")

    return ParserConfig(**data)
