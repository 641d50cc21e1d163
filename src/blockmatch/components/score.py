from dataclasses import dataclass
from typing import Union


@dataclass(slots=True)
class Score:
    """Running score for the current playthrough."""
    value: Union[int, float] = 0
