"""
Competition (league / tournament) records from the KFA match portal.
"""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Competition:
    """One league or tournament instance listed by getMatchList.do."""

    idx: str
    title: str = ""
    grade: str = ""  # MGC_NM, e.g. 초등 / 중등 / 고등
    style: str = ""  # 리그 / 대회
    match_date: str = ""  # "yyyy-MM-dd ~ yyyy-MM-dd"
    start_date: str = ""
    end_date: str = ""
    playing_area: str = ""
    sect_cnt: str = ""
