"""
Game-level records: list results (getMatchSingleList.do) and the Nexacro
match detail (SEARCH00.do) with its timeline and lineups.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple


@dataclass(frozen=True)
class MatchResult:
    single_idx: str
    match_idx: str
    match_number: str = ""
    match_group: str = ""
    time: str = ""
    match_area: str = ""
    match_date: str = ""
    home_team: str = ""
    away_team: str = ""
    home_score: str = ""
    away_score: str = ""
    home_pk_score: str = ""
    away_pk_score: str = ""
    score_text: str = ""
    grade: str = ""

    @property
    def is_finished(self) -> bool:
        """A game counts as finished once the portal fills in a final score."""
        return bool(self.single_idx) and bool(self.home_score)


@dataclass(frozen=True)
class MatchEvent:
    player_name: str = ""
    event_type: str = ""  # 득점, 경고, 교체IN, 교체OUT
    event_code: str = ""  # 11 goal, 31 yellow, 51 sub in, 52 sub out
    time: str = ""
    entry_no: str = ""
    side: str = ""  # H / A
    is_pk: str = ""


@dataclass(frozen=True)
class LineupPlayer:
    name: str = ""
    position: str = ""
    entry_no: str = ""
    play_time: str = ""
    status: str = ""  # S starter / R reserve
    is_captain: str = ""
    goal_time: str = ""
    yellow_time: str = ""
    red_time: str = ""
    assist_time: str = ""


@dataclass(frozen=True)
class MatchDetail:
    single_idx: str
    match_idx: str
    match_number: str = ""
    match_date: str = ""
    match_area: str = ""
    title: str = ""
    home_team: str = ""
    away_team: str = ""
    home_score_final: str = ""
    away_score_final: str = ""
    home_score_first_half: str = ""
    away_score_first_half: str = ""
    home_score_second_half: str = ""
    away_score_second_half: str = ""
    home_score_pk: str = ""
    away_score_pk: str = ""
    referee_main: str = ""
    weather: str = ""
    viewers: str = ""
    playing_time: str = ""
    total_time: str = ""
    coach_home: str = ""
    coach_away: str = ""
    home_yellow_count: str = ""
    away_yellow_count: str = ""
    home_red_count: str = ""
    away_red_count: str = ""
    grade: str = ""
    events: Tuple[MatchEvent, ...] = field(default_factory=tuple)
    home_starters: Tuple[LineupPlayer, ...] = field(default_factory=tuple)
    home_substitutes: Tuple[LineupPlayer, ...] = field(default_factory=tuple)
    away_starters: Tuple[LineupPlayer, ...] = field(default_factory=tuple)
    away_substitutes: Tuple[LineupPlayer, ...] = field(default_factory=tuple)
