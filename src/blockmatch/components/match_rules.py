from dataclasses import dataclass
from typing import Union

Number = Union[int, float]


@dataclass(slots=True)
class MatchRules:
    min_match: int = 3
    score_per_match: Number = 10
