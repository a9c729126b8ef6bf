"""
KFA 통합경기정보 crawler CLI.

Usage:
    python -m kfa_crawler.cli.crawl_kfa --year 2025,2026 --grade 고등
    python -m kfa_crawler.cli.crawl_kfa -y 2026 -u myid -s SECRET -j JSESSIONID   (with match detail)
    python -m kfa_crawler.cli.crawl_kfa --test <competition IDX>                   (single competition probe)

The session secret comes from the browser cookie `state=secret%3D...`.
"""
from __future__ import annotations

import argparse
import asyncio
import logging
import sys
import traceback
from typing import Optional, Sequence

from kfa_crawler.clients.kfa_api_client import KfaApiClient
from kfa_crawler.config import CrawlConfig, load_config
from kfa_crawler.crawlers.kfa_crawl_service import KfaCrawlService
from kfa_crawler.models.crawl import CrawlStats
from kfa_crawler.parsers.portal_parser import parse_match_result_list
from kfa_crawler.repositories.json_repository import JsonRepository
from kfa_crawler.utils.logging_config import configure_logging

logger = logging.getLogger("kfa_crawler.cli")

DEFAULT_PROBE_MONTH = "2026-02"


def _csv(value: Optional[str]) -> Optional[tuple]:
    if value is None:
        return None
    parts = tuple(part.strip() for part in value.split(",") if part.strip())
    return parts or None


def build_api_client(config: CrawlConfig) -> KfaApiClient:
    return KfaApiClient(
        base_url=config.base_url,
        timeout=config.timeout,
        nexacro_user=config.nexacro_user,
        nexacro_secret=config.nexacro_secret,
        jsessionid=config.jsessionid,
    )


async def crawl_kfa(config: CrawlConfig) -> CrawlStats:
    logger.info("KFA Crawler - 통합경기정보 시스템 크롤러")
    logger.info("  Years:    %s", ", ".join(config.years))
    logger.info("  Grades:   %s", ", ".join(config.grades))
    logger.info("  Output:   %s", config.output_dir)
    logger.info("  Delay:    %dms", config.delay_ms)
    logger.info("  Limit:    %s", f"{config.limit} competitions" if config.limit is not None else "none")
    logger.info("  Parallel: %d", config.max_concurrency)
    logger.info("  Detail:   %s", "enabled" if config.has_detail_auth else "disabled (use --user/--secret)")

    async with build_api_client(config) as api:
        service = KfaCrawlService(
            api,
            delay=config.delay_seconds,
            max_concurrency=config.max_concurrency,
            grade_table=config.grade_codes,
        )
        stats = await service.run(
            config.years,
            config.grades,
            JsonRepository(config.output_dir),
            limit=config.limit,
            year_tag=config.year_tag,
        )

    logger.info("========================================")
    logger.info("Crawling Complete!")
    logger.info("  Competitions: %d", stats.competition_count)
    logger.info("  GameResults:  %d", stats.result_count)
    logger.info("  GameDetails:  %d", stats.detail_count)
    logger.info("  Teams:        %d", stats.team_count)
    logger.info("  Players:      %d", stats.player_count)
    logger.info("  Elapsed:      %s", stats.format_elapsed())
    logger.info("  Output:       %s", config.output_dir)
    return stats


async def probe_competition(config: CrawlConfig, match_idx: str, year_month: str = DEFAULT_PROBE_MONTH) -> Optional[str]:
    """
    Fetch one competition's results for a month and, with session auth, dump the
    raw detail tables of its first finished game. Returns the dump path, if any.
    """
    logger.info("[TEST MODE] matchIdx=%s", match_idx)
    logger.info("  Auth: %s", "enabled" if config.has_detail_auth else "disabled")

    async with build_api_client(config) as api:
        logger.info("--- getMatchInfo ---")
        info = await api.get_match_info(match_idx)
        if info is None:
            logger.info("  Result: null")
        elif isinstance(info, dict):
            logger.info("  Keys: %s", ", ".join(info))
        else:
            logger.info("  Result: %s", type(info).__name__)

        logger.info("--- getMatchSingleList (v_YEAR_MONTH=%s) ---", year_month)
        payload = await api.get_match_single_list(match_idx, year_month)
        if payload is None:
            logger.info("  Result: null")
            return None

        results = parse_match_result_list(payload, match_idx, "")
        logger.info("  Result: %d games", len(results))
        finished = next((r for r in results if r.is_finished), None)
        if finished is None:
            logger.info("  No finished games found in results.")
            return None
        if not api.has_nexacro_auth:
            logger.info("  Auth disabled, skipping match detail. Use --user/--secret.")
            return None

        logger.info("--- SEARCH00.do (matchDetail) ---")
        logger.info("  Target: %s vs %s (singleIdx=%s)", finished.home_team, finished.away_team, finished.single_idx)
        tables = await api.get_match_detail(match_idx, finished.single_idx)
        if not tables:
            logger.info("  Result: null or empty")
            return None

        logger.info("  Datasets: %s", ", ".join(tables))
        for name, rows in tables.items():
            logger.info("    %s: %d rows", name, len(rows))

        filename = f"debug_matchDetail_{finished.single_idx[:8]}.json"
        repository = JsonRepository(config.output_dir)
        repository.save_raw(filename, tables)
        return str(repository.output_dir / filename)


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="KFA match portal crawler (competitions, teams, players, results)")
    parser.add_argument("-y", "--year", type=str, default=None, help="Target years, comma separated (e.g. 2025,2026)")
    parser.add_argument("-g", "--grade", type=str, default=None, help="Grade filter, comma separated (초등,중등,고등)")
    parser.add_argument("-o", "--output", type=str, default=None, help="Output directory (default: ./output)")
    parser.add_argument("-d", "--delay", type=int, default=None, help="Delay before each request in ms (default: 500)")
    parser.add_argument("-l", "--limit", type=int, default=None, help="Limit competitions per year (debugging)")
    parser.add_argument("-u", "--user", type=str, default=None, help="Nexacro user id (enables match detail)")
    parser.add_argument("-s", "--secret", type=str, default=None, help="Nexacro secret from the `state` cookie")
    parser.add_argument("-j", "--jsessionid", type=str, default=None, help="JSESSIONID from the browser cookie")
    parser.add_argument("-p", "--parallel", type=int, default=None, help="Max concurrent requests (default: 4)")
    parser.add_argument("-t", "--test", type=str, default=None, metavar="MATCH_IDX", help="Probe a single competition")
    parser.add_argument("--month", type=str, default=DEFAULT_PROBE_MONTH, help="YYYY-MM bucket used by --test")
    parser.add_argument("--log-level", type=str, default=None, help="Logging level (default: INFO)")
    parser.add_argument("--env-file", type=str, default=None, help="Path to a .env file")
    return parser


def build_config(args: argparse.Namespace) -> CrawlConfig:
    base = load_config(args.env_file)
    return base.with_overrides(
        years=_csv(args.year),
        grades=_csv(args.grade),
        output_dir=args.output,
        delay_ms=args.delay,
        limit=args.limit,
        nexacro_user=args.user,
        nexacro_secret=args.secret,
        jsessionid=args.jsessionid,
        max_concurrency=args.parallel,
        log_level=args.log_level,
    )


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    try:
        config = build_config(args)
        configure_logging(config.log_level, config.log_file)
        if args.test:
            asyncio.run(probe_competition(config, args.test, args.month))
        else:
            asyncio.run(crawl_kfa(config))
        return 0
    except Exception as exc:
        sys.stderr.write(f"\n[FATAL] {exc}\n")
        traceback.print_exc(file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
