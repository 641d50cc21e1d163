import random
from dataclasses import dataclass
from typing import Iterable, Iterator, Tuple


@dataclass(frozen=True, slots=True)
class Palette:
    """Ordered set of block names eligible for generation and refill.

    Lives on the board entity next to the Grid. Duplicates are dropped while
    keeping first-seen order; an empty palette is rejected.
    """
    blocks: Tuple[str, ...]

    def __post_init__(self) -> None:
        seen: set[str] = set()
        ordered: list[str] = []
        for name in self.blocks:
            if name not in seen:
                ordered.append(name)
                seen.add(name)
        if not ordered:
            raise ValueError("Palette requires at least one block type")
        object.__setattr__(self, "blocks", tuple(ordered))

    @classmethod
    def of(cls, names: Iterable[str]) -> "Palette":
        return cls(blocks=tuple(names))

    def __len__(self) -> int:
        return len(self.blocks)

    def __iter__(self) -> Iterator[str]:
        return iter(self.blocks)

    def __contains__(self, name: object) -> bool:
        return name in self.blocks

    def choice(self, rng: random.Random) -> str:
        return rng.choice(self.blocks)
