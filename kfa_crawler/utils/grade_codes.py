"""
Grade label -> KFA portal MGC_IDX code mapping.

League codes: 1=초등, 2=중등, 3=고등, 91..93 = 저학년 leagues.
Tournament codes: 51=초등, 52=중등, 53=고등.
"""
from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Iterable, List, Mapping, Tuple

logger = logging.getLogger(__name__)

DEFAULT_GRADES: Tuple[str, ...] = ("초등", "중등", "고등")

GRADE_CODES: Mapping[str, Tuple[str, ...]] = MappingProxyType(
    {
        "초등": ("1", "51", "91"),
        "중등": ("2", "52", "92"),
        "고등": ("3", "53", "93"),
    }
)


def resolve_grade_codes(
    grades: Iterable[str],
    table: Mapping[str, Tuple[str, ...]] = GRADE_CODES,
) -> List[str]:
    """Expand grade labels to portal codes, keeping label order and skipping unknown labels."""
    codes: List[str] = []
    for grade in grades:
        label = grade.strip()
        if not label:
            continue
        if label not in table:
            logger.warning("Unknown grade label ignored: %s", label)
            continue
        for code in table[label]:
            if code not in codes:
                codes.append(code)
    return codes
