from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class DanceClass:
    name: str
    day: str
    time: str = "TBD"
    age_range: str = "All ages"
    description: str = ""
    performance: str = ""
    instructor: str = "TBD"
    level: str = ""
