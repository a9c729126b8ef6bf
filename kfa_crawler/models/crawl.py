from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from .competition import Competition
from .game import MatchDetail, MatchResult
from .team import Player, Team


@dataclass(frozen=True)
class CrawlStats:
    competition_count: int = 0
    result_count: int = 0
    detail_count: int = 0
    team_count: int = 0
    player_count: int = 0
    elapsed_seconds: float = 0.0

    def format_elapsed(self) -> str:
        minutes, seconds = divmod(self.elapsed_seconds, 60)
        return f"{int(minutes):02d}:{seconds:06.3f}"


@dataclass
class CrawlResult:
    """Final collections of one run, handed to the JSON repository."""

    competitions: List[Competition] = field(default_factory=list)
    results: List[MatchResult] = field(default_factory=list)
    details: List[MatchDetail] = field(default_factory=list)
    teams: List[Team] = field(default_factory=list)
    players: List[Player] = field(default_factory=list)
