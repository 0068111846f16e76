from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class LottoType(str, Enum):
    THAI = "thai"

    @property
    def label(self) -> str:
        return _LABELS[self]


_LABELS = {
    LottoType.THAI: "Thai Lottery",
}


@dataclass(frozen=True)
class DrawRecord:
    """One scraped draw as published by the source."""

    draw_date: str
    first_prize: str
    last_two_digits: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "draw_date": self.draw_date,
            "first_prize": self.first_prize,
            "last_two_digits": self.last_two_digits,
        }
