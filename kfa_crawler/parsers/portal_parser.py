"""
Parsers for the JSON listing endpoints of the KFA match portal.

Each endpoint has a fixed array key (matchList, singleList, applyTeamList,
applyPlayerList). Rows are flat objects with upper-case column names.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from kfa_crawler.models.competition import Competition
from kfa_crawler.models.game import MatchResult
from kfa_crawler.models.team import Player, Team


def get_str(item: Dict[str, Any], key: str) -> str:
    """Column value as text; missing or null columns read as ""."""
    if not isinstance(item, dict):
        return ""
    value = item.get(key)
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def get_total_count(payload: Any) -> int:
    """`totalCount` as int (number or numeric string); 0 when not reported."""
    if not isinstance(payload, dict):
        return 0
    value = payload.get("totalCount")
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return 0
    return 0


def _array(payload: Any, key: str) -> List[Dict[str, Any]]:
    if isinstance(payload, dict):
        value = payload.get(key)
        if isinstance(value, list):
            return [row for row in value if isinstance(row, dict)]
    return []


def _single_list_array(payload: Any) -> List[Dict[str, Any]]:
    """
    singleList lookup with a compatibility shim: this endpoint has been seen
    returning a bare array and a one-level wrapper ({"data": {"singleList": [...]}}).
    """
    rows = _array(payload, "singleList")
    if rows:
        return rows
    if isinstance(payload, list):
        return [row for row in payload if isinstance(row, dict)]
    if isinstance(payload, dict):
        for value in payload.values():
            nested = _array(value, "singleList")
            if nested:
                return nested
    return []


def parse_match_list(payload: Any) -> List[Competition]:
    return [
        Competition(
            idx=get_str(item, "IDX"),
            title=get_str(item, "TITLE"),
            grade=get_str(item, "MGC_NM"),
            style=get_str(item, "STYLE_NM"),
            match_date=get_str(item, "MA_MCH_DATE"),
            start_date=get_str(item, "MA_MCH_STAT_YMD"),
            end_date=get_str(item, "MA_MCH_END_YMD"),
            playing_area=get_str(item, "PLAYING_AREA"),
            sect_cnt=get_str(item, "SECT_CNT"),
        )
        for item in _array(payload, "matchList")
    ]


def parse_match_result_list(payload: Any, match_idx: str, grade: str) -> List[MatchResult]:
    return [
        MatchResult(
            single_idx=get_str(item, "IDX"),
            match_idx=match_idx,
            match_number=get_str(item, "MATCH_NUMBER"),
            match_group=get_str(item, "MATCH_GROUP"),
            time=get_str(item, "TIME"),
            match_area=get_str(item, "MATCH_AREA"),
            match_date=get_str(item, "MATCH_CHECK_TIME2"),
            home_team=get_str(item, "TEAM_HOME"),
            away_team=get_str(item, "TEAM_AWAY"),
            home_score=get_str(item, "TH_SCORE_FINAL"),
            away_score=get_str(item, "TA_SCORE_FINAL"),
            home_pk_score=get_str(item, "TH_SCORE_PK"),
            away_pk_score=get_str(item, "TA_SCORE_PK"),
            score_text=get_str(item, "SCORE_TXT"),
            grade=grade,
        )
        for item in _single_list_array(payload)
    ]


def parse_team_list(payload: Any, match_idx: str, grade: str) -> List[Team]:
    return [
        Team(
            team_id=get_str(item, "TEAMID"),
            team_name=get_str(item, "TEAMNAME"),
            emblem=get_str(item, "EMBLEM"),
            virtual_team_yn=get_str(item, "VIRTUAL_TEAM_YN"),
            match_idx=match_idx,
            grade=grade,
        )
        for item in _array(payload, "applyTeamList")
    ]


def parse_player_list(payload: Any, team_id: str, grade: str, team_name: Optional[str] = None) -> List[Player]:
    players: List[Player] = []
    for item in _array(payload, "applyPlayerList"):
        players.append(
            Player(
                name=get_str(item, "HNAME"),
                team_id=team_id,
                team_name=get_str(item, "TEAMNAME") or (team_name or ""),
                position=get_str(item, "POSITION"),
                entry_no=get_str(item, "ENTRYNO"),
                photo_path=get_str(item, "PHOTO_FILE_PATH"),
                photo=get_str(item, "PHOTO"),
                birth=get_str(item, "BIRTH"),
                height=get_str(item, "HEIGHT"),
                weight=get_str(item, "WEIGHT"),
                is_ended=get_str(item, "END_YN") == "Y",
                grade=grade,
            )
        )
    return players
