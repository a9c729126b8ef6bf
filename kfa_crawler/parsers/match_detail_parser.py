"""
Nexacro SEARCH00.do datasets -> MatchDetail.

dsCommonInfo     game header (first row)
dsTimelineInfo   goals / cards / substitutions
dsHomePlayerInfo1, dsHomePlayerInfo2   home starters / substitutes
dsAwayPlayerInfo1, dsAwayPlayerInfo2   away starters / substitutes
"""
from __future__ import annotations

from typing import List, Optional, Tuple

from kfa_crawler.models.game import LineupPlayer, MatchDetail, MatchEvent
from kfa_crawler.protocol.nexacro import Row, Tables, first_row, get, rows


def parse_events(timeline: List[Row]) -> Tuple[MatchEvent, ...]:
    return tuple(
        MatchEvent(
            player_name=get(row, "HNAME"),
            event_type=get(row, "FLAG_NM"),
            event_code=get(row, "FLAG"),
            time=get(row, "TIME"),
            entry_no=get(row, "ENTRYNO"),
            side=get(row, "GUBUN"),
            is_pk=get(row, "PKYN"),
        )
        for row in timeline
    )


def parse_lineup(lineup: List[Row]) -> Tuple[LineupPlayer, ...]:
    return tuple(
        LineupPlayer(
            name=get(row, "HNAME"),
            position=get(row, "POSITION"),
            entry_no=get(row, "ENTRYNO"),
            play_time=get(row, "TIME"),
            status=get(row, "STATUS"),
            is_captain=get(row, "C_CHECK"),
            goal_time=get(row, "GOAL_TIME"),
            yellow_time=get(row, "YELLOW_TIME"),
            red_time=get(row, "RED_TIME"),
            assist_time=get(row, "HELP_TIME"),
        )
        for row in lineup
    )


def parse_match_detail(tables: Tables, match_idx: str, single_idx: str, grade: str) -> Optional[MatchDetail]:
    common = first_row(tables, "dsCommonInfo")
    if common is None:
        return None

    return MatchDetail(
        single_idx=single_idx,
        match_idx=match_idx,
        match_number=get(common, "MATCH_NUMBER"),
        match_date=get(common, "MATCH_CHECK_TIME"),
        match_area=get(common, "MATCH_AREA"),
        title=get(common, "TITLE"),
        home_team=get(common, "TEAM_HOME"),
        away_team=get(common, "TEAM_AWAY"),
        home_score_final=get(common, "TH_SCORE_FINAL"),
        away_score_final=get(common, "TA_SCORE_FINAL"),
        home_score_first_half=get(common, "TH_SCORE_FH"),
        away_score_first_half=get(common, "TA_SCORE_FH"),
        home_score_second_half=get(common, "TH_SCORE_SH"),
        away_score_second_half=get(common, "TA_SCORE_SH"),
        home_score_pk=get(common, "TH_SCORE_PK"),
        away_score_pk=get(common, "TA_SCORE_PK"),
        referee_main=get(common, "REFEREE_MAIN"),
        weather=get(common, "WEATHER"),
        viewers=get(common, "VIEWERS"),
        playing_time=get(common, "PLAYING_TIME"),
        total_time=get(common, "TOTALTIME"),
        coach_home=get(common, "COACH_HOME"),
        coach_away=get(common, "COACH_AWAY"),
        home_yellow_count=get(common, "TH_YELLOW_CNT"),
        away_yellow_count=get(common, "TA_YELLOW_CNT"),
        home_red_count=get(common, "TH_RED_CNT"),
        away_red_count=get(common, "TA_RED_CNT"),
        grade=grade,
        events=parse_events(rows(tables, "dsTimelineInfo")),
        home_starters=parse_lineup(rows(tables, "dsHomePlayerInfo1")),
        home_substitutes=parse_lineup(rows(tables, "dsHomePlayerInfo2")),
        away_starters=parse_lineup(rows(tables, "dsAwayPlayerInfo1")),
        away_substitutes=parse_lineup(rows(tables, "dsAwayPlayerInfo2")),
    )
