"""
KFA crawl pipeline: competitions -> results -> details -> teams -> players.

Stages run sequentially per year; each stage fans out over its inputs with
bounded concurrency. A failed portal call only costs the item it belongs to.
"""
from __future__ import annotations

import asyncio
import logging
import time
from typing import List, Mapping, Optional, Sequence, Tuple

from kfa_crawler.clients.kfa_api_client import KfaApiClient
from kfa_crawler.crawlers.pagination import DEFAULT_PAGE_SIZE, fetch_all_pages
from kfa_crawler.models.competition import Competition
from kfa_crawler.models.crawl import CrawlResult, CrawlStats
from kfa_crawler.models.game import MatchDetail, MatchResult
from kfa_crawler.models.team import Player, Team
from kfa_crawler.parsers.match_detail_parser import parse_match_detail
from kfa_crawler.parsers.portal_parser import (
    parse_match_list,
    parse_match_result_list,
    parse_player_list,
    parse_team_list,
)
from kfa_crawler.repositories.json_repository import JsonRepository
from kfa_crawler.utils.concurrency import map_bounded, map_bounded_single
from kfa_crawler.utils.date_ranges import month_range
from kfa_crawler.utils.dedupe import unique_by
from kfa_crawler.utils.grade_codes import GRADE_CODES, resolve_grade_codes

logger = logging.getLogger(__name__)


def competition_key(competition: Competition) -> str:
    return competition.idx


def result_key(result: MatchResult) -> str:
    return result.single_idx


def team_key(team: Team) -> str:
    return team.team_id


def player_key(player: Player) -> Tuple[str, str, str]:
    return player.natural_key


class KfaCrawlService:
    """Collects competitions, teams, players, results and details from the KFA portal."""

    def __init__(
        self,
        api: KfaApiClient,
        *,
        delay: float = 0.5,
        max_concurrency: int = 4,
        grade_table: Mapping[str, Tuple[str, ...]] = GRADE_CODES,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> None:
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be >= 1")
        self.api = api
        self.delay = delay
        self.max_concurrency = max_concurrency
        self.grade_table = grade_table
        self.page_size = page_size

    async def run(
        self,
        years: Sequence[str],
        grades: Sequence[str],
        repository: JsonRepository,
        limit: Optional[int] = None,
        year_tag: Optional[str] = None,
    ) -> CrawlStats:
        """Crawl every year and write one JSON file per entity kind."""
        started = time.perf_counter()
        result = await self.crawl(years, grades, limit=limit)
        repository.save_crawl_result(result, year_tag or "_".join(years))

        return CrawlStats(
            competition_count=len(result.competitions),
            result_count=len(result.results),
            detail_count=len(result.details),
            team_count=len(result.teams),
            player_count=len(result.players),
            elapsed_seconds=time.perf_counter() - started,
        )

    async def crawl(
        self,
        years: Sequence[str],
        grades: Sequence[str],
        limit: Optional[int] = None,
    ) -> CrawlResult:
        grade_codes = resolve_grade_codes(grades, self.grade_table)
        logger.info("Grades: %s", ", ".join(grades))
        logger.info("Grade codes: %s", ", ".join(grade_codes))

        has_auth = self.api.has_nexacro_auth
        total_steps = 5 if has_auth else 4

        all_competitions: List[Competition] = []
        all_results: List[MatchResult] = []
        all_details: List[MatchDetail] = []
        all_teams: List[Team] = []
        all_players: List[Player] = []

        for year in years:
            logger.info("========== Year: %s ==========", year)
            step = 0

            step += 1
            logger.info("[%d/%d] Fetching competitions for %s...", step, total_steps, year)
            competitions = await self.crawl_competitions(year, grade_codes)
            logger.info("  Found %d competitions for %s", len(competitions), year)
            if limit is not None and len(competitions) > limit:
                competitions = competitions[:limit]
                logger.info("  Limited to %d competitions (--limit %d)", len(competitions), limit)
            all_competitions.extend(competitions)

            step += 1
            logger.info("[%d/%d] Fetching match results for %d competitions...", step, total_steps, len(competitions))
            results = await map_bounded(
                competitions,
                self.crawl_match_results,
                concurrency=self.max_concurrency,
                delay=self.delay,
                describe=lambda c, n: f"[{c.grade}] {c.title}: {n} games",
            )
            all_results.extend(results)

            if has_auth:
                step += 1
                finished = [r for r in results if r.is_finished]
                logger.info("[%d/%d] Fetching match details for %d finished games...", step, total_steps, len(finished))
                details = await map_bounded_single(
                    finished,
                    self.crawl_match_detail,
                    concurrency=self.max_concurrency,
                    delay=self.delay,
                    describe=lambda r, d: (
                        f"[{r.grade}] {r.home_team} vs {r.away_team}: {len(d.events)} events, "
                        f"{len(d.home_starters) + len(d.away_starters)} starters"
                    ),
                )
                all_details.extend(details)

            step += 1
            logger.info("[%d/%d] Fetching teams for %d competitions...", step, total_steps, len(competitions))
            teams = await map_bounded(
                competitions,
                self.crawl_teams,
                concurrency=self.max_concurrency,
                delay=self.delay,
                describe=lambda c, n: f"[{c.grade}] {c.title}: {n} teams",
            )
            # the same club enters several competitions in a season
            unique_teams = unique_by(teams, team_key)
            logger.info("  Total unique teams for %s: %d", year, len(unique_teams))
            all_teams.extend(teams)

            step += 1
            teams_with_competition = [t for t in unique_teams if t.match_idx]
            logger.info("[%d/%d] Fetching players for %d teams...", step, total_steps, len(teams_with_competition))
            players = await map_bounded(
                teams_with_competition,
                self.crawl_players,
                concurrency=self.max_concurrency,
                delay=self.delay,
                describe=lambda t, n: f"[{t.grade}] {t.team_name}: {n} players",
            )
            all_players.extend(players)

        return CrawlResult(
            competitions=all_competitions,
            results=all_results,
            details=all_details,
            teams=unique_by(all_teams, team_key),
            players=unique_by(all_players, player_key),
        )

    # -- stage operations ---------------------------------------------------

    async def crawl_competitions(self, year: str, grade_codes: Sequence[str]) -> List[Competition]:
        competitions = await map_bounded(
            list(grade_codes),
            lambda code: self.crawl_competitions_for_code(year, code),
            concurrency=self.max_concurrency,
            delay=self.delay,
            describe=lambda code, n: f"Grade code [{code}]: {n} competitions",
        )
        return unique_by(competitions, competition_key)

    async def crawl_competitions_for_code(self, year: str, mgc_idx: str) -> List[Competition]:
        return await fetch_all_pages(
            lambda page, size: self.api.get_match_list(year, mgc_idx, page=page, page_size=size),
            parse_match_list,
            page_size=self.page_size,
            delay=self.delay,
        )

    async def crawl_match_results(self, competition: Competition) -> List[MatchResult]:
        """Results for one competition, one call per month it spans."""
        months = month_range(competition.start_date, competition.end_date)
        if not months:
            logger.warning(
                "Skipping results for %s: unparsable start date %r", competition.idx, competition.start_date
            )
            return []

        results: List[MatchResult] = []
        last = len(months) - 1
        for i, month in enumerate(months):
            payload = await self.api.get_match_single_list(competition.idx, month)
            if payload is None:
                continue
            results.extend(parse_match_result_list(payload, competition.idx, competition.grade))
            if i < last and self.delay > 0:
                await asyncio.sleep(self.delay)

        # month buckets overlap near boundaries
        return unique_by(results, result_key)

    async def crawl_match_detail(self, result: MatchResult) -> Optional[MatchDetail]:
        tables = await self.api.get_match_detail(result.match_idx, result.single_idx)
        if not tables:
            return None
        return parse_match_detail(tables, result.match_idx, result.single_idx, result.grade)

    async def crawl_teams(self, competition: Competition) -> List[Team]:
        payload = await self.api.get_apply_team_list(competition.idx)
        if payload is None:
            return []
        return parse_team_list(payload, competition.idx, competition.grade)

    async def crawl_players(self, team: Team) -> List[Player]:
        payload = await self.api.get_apply_player_list(team.match_idx, team.team_id)
        if payload is None:
            return []
        return parse_player_list(payload, team.team_id, team.grade, team_name=team.team_name)
