"""
Run configuration for the KFA crawler.
Environment variables (optionally from .env) provide defaults; CLI flags override them.
"""
from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from datetime import date
from typing import Mapping, Optional, Tuple

from dotenv import load_dotenv

from kfa_crawler.utils.grade_codes import DEFAULT_GRADES, GRADE_CODES

DEFAULT_BASE_URL = "https://www.joinkfa.com"


def _split_csv(value: Optional[str]) -> Tuple[str, ...]:
    if not value:
        return ()
    return tuple(part.strip() for part in value.split(",") if part.strip())


def _int_env(name: str, default: Optional[int]) -> Optional[int]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from exc


@dataclass(frozen=True)
class CrawlConfig:
    years: Tuple[str, ...] = field(default_factory=lambda: (str(date.today().year),))
    grades: Tuple[str, ...] = DEFAULT_GRADES
    output_dir: str = "output"
    delay_ms: int = 500
    max_concurrency: int = 4
    limit: Optional[int] = None
    base_url: str = DEFAULT_BASE_URL
    timeout: float = 30.0
    nexacro_user: Optional[str] = None
    nexacro_secret: Optional[str] = None
    jsessionid: Optional[str] = None
    log_level: str = "INFO"
    log_file: Optional[str] = None
    grade_codes: Mapping[str, Tuple[str, ...]] = field(default_factory=lambda: GRADE_CODES)

    def __post_init__(self) -> None:
        if not self.years:
            raise ValueError("at least one target year is required")
        if self.delay_ms < 0:
            raise ValueError("delay_ms must be >= 0")
        if self.max_concurrency < 1:
            raise ValueError("max_concurrency must be >= 1")
        if self.limit is not None and self.limit < 0:
            raise ValueError("limit must be >= 0")

    @property
    def delay_seconds(self) -> float:
        return self.delay_ms / 1000.0

    @property
    def has_detail_auth(self) -> bool:
        return bool(self.nexacro_user) and bool(self.nexacro_secret)

    @property
    def year_tag(self) -> str:
        return "_".join(self.years)

    def with_overrides(self, **overrides) -> "CrawlConfig":
        """Return a copy with every non-None override applied."""
        values = {key: value for key, value in overrides.items() if value is not None}
        return replace(self, **values)


def load_config(env_file: Optional[str] = None) -> CrawlConfig:
    """Build a CrawlConfig from KFA_* environment variables."""
    load_dotenv(env_file)

    defaults = CrawlConfig()
    return CrawlConfig(
        years=_split_csv(os.getenv("KFA_YEARS")) or defaults.years,
        grades=_split_csv(os.getenv("KFA_GRADES")) or defaults.grades,
        output_dir=os.getenv("KFA_OUTPUT_DIR") or defaults.output_dir,
        delay_ms=_int_env("KFA_REQUEST_DELAY_MS", defaults.delay_ms),
        max_concurrency=_int_env("KFA_MAX_CONCURRENCY", defaults.max_concurrency),
        limit=_int_env("KFA_LIMIT", None),
        base_url=os.getenv("KFA_BASE_URL") or defaults.base_url,
        timeout=float(os.getenv("KFA_REQUEST_TIMEOUT") or defaults.timeout),
        nexacro_user=os.getenv("KFA_NEXACRO_USER") or None,
        nexacro_secret=os.getenv("KFA_NEXACRO_SECRET") or None,
        jsessionid=os.getenv("KFA_JSESSIONID") or None,
        log_level=os.getenv("KFA_LOG_LEVEL") or defaults.log_level,
        log_file=os.getenv("KFA_LOG_FILE") or None,
    )
