from __future__ import annotations

from kfa_crawler.parsers.portal_parser import (
    get_str,
    get_total_count,
    parse_match_list,
    parse_match_result_list,
    parse_player_list,
    parse_team_list,
)

MATCH_LIST_PAYLOAD = {
    "totalCount": 2,
    "matchList": [
        {
            "IDX": "0A1B2C",
            "TITLE": "2026 전국 초중고 축구리그 (서울)",
            "MGC_NM": "고등",
            "STYLE_NM": "리그",
            "MA_MCH_DATE": "2026-02-10 ~ 2026-04-03",
            "MA_MCH_STAT_YMD": "2026-02-10",
            "MA_MCH_END_YMD": "2026-04-03",
            "PLAYING_AREA": "서울",
            "SECT_CNT": 12,
        },
        {"IDX": "0A1B2D", "TITLE": "춘계연맹전", "SECT_CNT": None},
    ],
}


def test_get_str_normalises_scalars():
    row = {"a": None, "b": 3, "c": "x", "d": True, "e": 1.5}
    assert get_str(row, "a") == ""
    assert get_str(row, "b") == "3"
    assert get_str(row, "c") == "x"
    assert get_str(row, "d") == "true"
    assert get_str(row, "e") == "1.5"
    assert get_str(row, "missing") == ""
    assert get_str(None, "a") == ""


def test_get_total_count_accepts_numbers_and_numeric_strings():
    assert get_total_count({"totalCount": 25}) == 25
    assert get_total_count({"totalCount": "25"}) == 25
    assert get_total_count({"totalCount": 25.0}) == 25
    assert get_total_count({"totalCount": "n/a"}) == 0
    assert get_total_count({}) == 0
    assert get_total_count([]) == 0


def test_parse_match_list_maps_columns():
    competitions = parse_match_list(MATCH_LIST_PAYLOAD)

    assert [c.idx for c in competitions] == ["0A1B2C", "0A1B2D"]
    first = competitions[0]
    assert first.title == "2026 전국 초중고 축구리그 (서울)"
    assert first.grade == "고등"
    assert first.style == "리그"
    assert first.start_date == "2026-02-10"
    assert first.end_date == "2026-04-03"
    assert first.sect_cnt == "12"
    assert competitions[1].sect_cnt == ""
    assert competitions[1].start_date == ""


def test_parse_match_list_missing_array_is_empty():
    assert parse_match_list({"totalCount": 0}) == []
    assert parse_match_list(None) == []
    assert parse_match_list({"matchList": "oops"}) == []


def test_parse_match_result_list_maps_scores():
    payload = {
        "singleList": [
            {
                "IDX": "S1",
                "MATCH_NUMBER": 3,
                "MATCH_GROUP": "A조",
                "TIME": "10:00",
                "MATCH_AREA": "효창운동장",
                "MATCH_CHECK_TIME2": "2026-02-14",
                "TEAM_HOME": "서울FC U18",
                "TEAM_AWAY": "수원FC U18",
                "TH_SCORE_FINAL": 2,
                "TA_SCORE_FINAL": 1,
                "TH_SCORE_PK": None,
                "TA_SCORE_PK": None,
                "SCORE_TXT": "2:1",
            },
            {"IDX": "S2", "TH_SCORE_FINAL": ""},
        ]
    }

    results = parse_match_result_list(payload, "M1", "고등")

    first = results[0]
    assert first.single_idx == "S1"
    assert first.match_idx == "M1"
    assert first.grade == "고등"
    assert first.match_number == "3"
    assert first.home_score == "2"
    assert first.away_score == "1"
    assert first.home_pk_score == ""
    assert first.is_finished
    assert not results[1].is_finished


def test_parse_match_result_list_accepts_bare_array_and_single_wrapper():
    rows = [{"IDX": "S1"}, {"IDX": "S2"}]

    assert [r.single_idx for r in parse_match_result_list(rows, "M1", "")] == ["S1", "S2"]
    wrapped = {"data": {"singleList": rows}}
    assert [r.single_idx for r in parse_match_result_list(wrapped, "M1", "")] == ["S1", "S2"]
    too_deep = {"data": {"inner": {"singleList": rows}}}
    assert parse_match_result_list(too_deep, "M1", "") == []


def test_parse_team_list_has_no_nesting_fallback():
    rows = [{"TEAMID": "T1", "TEAMNAME": "서울FC U18", "EMBLEM": "/img/t1.png", "VIRTUAL_TEAM_YN": "N"}]

    teams = parse_team_list({"applyTeamList": rows}, "M1", "고등")

    assert len(teams) == 1
    assert teams[0].team_id == "T1"
    assert teams[0].team_name == "서울FC U18"
    assert teams[0].virtual_team_yn == "N"
    assert teams[0].match_idx == "M1"
    assert parse_team_list({"data": {"applyTeamList": rows}}, "M1", "고등") == []
    assert parse_team_list(rows, "M1", "고등") == []


def test_parse_player_list_maps_end_flag_and_team_name():
    payload = {
        "applyPlayerList": [
            {"HNAME": "김민준", "POSITION": "FW", "ENTRYNO": 9, "BIRTH": "2008-03-01", "END_YN": "Y"},
            {"HNAME": "이서준", "TEAMNAME": "서울FC", "ENTRYNO": "1", "END_YN": "N"},
            {"HNAME": "박도윤"},
        ]
    }

    players = parse_player_list(payload, "T1", "고등", team_name="서울FC U18")

    assert [p.name for p in players] == ["김민준", "이서준", "박도윤"]
    assert players[0].entry_no == "9"
    assert players[0].is_ended is True
    assert players[1].is_ended is False
    assert players[2].is_ended is False
    assert players[0].team_name == "서울FC U18"
    assert players[1].team_name == "서울FC"
    assert all(p.team_id == "T1" for p in players)
    assert players[0].natural_key == ("T1", "김민준", "9")
