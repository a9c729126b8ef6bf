"""
Team and roster records.

The portal has no stable player id, so a Player is identified by
(team_id, name, entry_no).
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class Team:
    team_id: str
    team_name: str = ""
    emblem: str = ""
    virtual_team_yn: str = ""
    match_idx: str = ""  # owning competition
    grade: str = ""


@dataclass(frozen=True)
class Player:
    name: str
    team_id: str
    team_name: str = ""
    position: str = ""  # GK / DF / MF / FW
    entry_no: str = ""
    photo_path: str = ""
    photo: str = ""
    birth: str = ""
    height: str = ""
    weight: str = ""
    is_ended: bool = False
    grade: str = ""

    @property
    def natural_key(self) -> Tuple[str, str, str]:
        return (self.team_id, self.name, self.entry_no)
