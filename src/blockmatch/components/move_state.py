from dataclasses import dataclass, field
from enum import Enum, auto
from typing import List, Optional, Tuple, Union

Position = Tuple[int, int]


class MoveStatus(Enum):
    IDLE = auto()
    BUSY = auto()


@dataclass(slots=True)
class MoveState:
    """Gate allowing a single swap (plus its cascades) in flight at a time.

    Only ``begin`` and ``finish`` change ``status``; the per-move fields are
    reset on both transitions.
    """

    status: MoveStatus = MoveStatus.IDLE
    src: Optional[Position] = None
    dst: Optional[Position] = None
    committed: bool = False
    score_delta: Union[int, float] = 0
    passes: List[int] = field(default_factory=list)

    @property
    def busy(self) -> bool:
        return self.status is MoveStatus.BUSY

    def begin(self, src: Position, dst: Position) -> bool:
        if self.busy:
            return False
        self.status = MoveStatus.BUSY
        self.src = src
        self.dst = dst
        self.committed = False
        self.score_delta = 0
        self.passes = []
        return True

    def finish(self) -> None:
        self.status = MoveStatus.IDLE
        self.src = None
        self.dst = None
        self.committed = False
        self.score_delta = 0
        self.passes = []
