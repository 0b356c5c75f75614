"""
Move values and the history records used to invert them.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Dict


class TransferStyle(Enum):
    """How cards travel from the source pile to the destination pile."""

    # Cards keep their order and orientation
    PLAIN = auto()
    # Cards are dealt one by one and turned over, which reverses their order
    # (stock to waste deals and waste to stock recycles)
    TURNED = auto()
    # No cards travel; the source top card is turned face up
    REVEAL = auto()


@dataclass(frozen=True)
class Move:
    """
    A request to move cards between two piles.

    Attributes:
        source: Id of the pile the cards come from
        dest: Id of the pile the cards go to
        count: Number of cards taken from the top of the source
        sequence: Position in the game's history, assigned when applied
    """

    source: str
    dest: str
    count: int = 1
    sequence: int = 0

    @property
    def is_reveal(self) -> bool:
        """A reveal turns over the top card of a pile without moving it."""
        return self.source == self.dest and self.count == 0

    def __str__(self) -> str:
        if self.is_reveal:
            return f"reveal {self.source}"
        return f"{self.source} -> {self.dest} x{self.count}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "source": self.source,
            "dest": self.dest,
            "count": self.count,
            "sequence": self.sequence,
        }


@dataclass(frozen=True)
class MoveRecord:
    """
    Everything needed to undo or redo an applied move exactly.

    Attributes:
        move: The applied move, with its sequence number
        style: How the cards travelled
        auto_flipped: Whether the newly exposed source card was turned face up
        score_delta: Score change actually applied
        used_redeal: Whether the move consumed one of the stock redeals
    """

    move: Move
    style: TransferStyle = TransferStyle.PLAIN
    auto_flipped: bool = False
    score_delta: int = 0
    used_redeal: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "move": self.move.to_dict(),
            "style": self.style.name,
            "auto_flipped": self.auto_flipped,
            "score_delta": self.score_delta,
            "used_redeal": self.used_redeal,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MoveRecord":
        return cls(
            move=Move(**data["move"]),
            style=TransferStyle[data["style"]],
            auto_flipped=bool(data["auto_flipped"]),
            score_delta=int(data["score_delta"]),
            used_redeal=bool(data["used_redeal"]),
        )
