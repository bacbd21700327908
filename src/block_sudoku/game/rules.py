from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Difficulty(str, Enum):
    CASUAL = "casual"
    MASTER = "master"
    EXPERT = "expert"
    INSANE = "insane"

    @classmethod
    def from_value(cls, value: "Difficulty | str") -> "Difficulty":
        if isinstance(value, cls):
            return value
        return cls(str(value).lower())

    @property
    def rules(self) -> "DifficultyRules":
        return DIFFICULTY_RULES[self]


@dataclass(frozen=True)
class DifficultyRules:
    """What a difficulty allows the player (and the piece pool) to do."""
    allow_rotate: bool
    allow_mirror: bool
    pentominoes: bool
    mirrored_variants: bool

    @property
    def randomize_orientation(self) -> bool:
        # The player cannot turn pieces, so spawns are pre-rotated instead
        return not self.allow_rotate


DIFFICULTY_RULES = {
    Difficulty.CASUAL: DifficultyRules(allow_rotate=True, allow_mirror=False, pentominoes=False, mirrored_variants=False),
    Difficulty.MASTER: DifficultyRules(allow_rotate=False, allow_mirror=False, pentominoes=False, mirrored_variants=False),
    Difficulty.EXPERT: DifficultyRules(allow_rotate=True, allow_mirror=False, pentominoes=True, mirrored_variants=True),
    Difficulty.INSANE: DifficultyRules(allow_rotate=False, allow_mirror=True, pentominoes=True, mirrored_variants=False),
}


@dataclass(frozen=True)
class ScoringRules:
    row_points: int = 100
    col_points: int = 100
    block_points: int = 500

    def score_for_clears(self, rows: int, cols: int, blocks: int) -> int:
        base = rows * self.row_points + cols * self.col_points + blocks * self.block_points
        # One multiplier step per distinct kind of clear
        multiplier = sum(1 for count in (rows, cols, blocks) if count > 0)
        return base * multiplier


DEFAULT_SCORING = ScoringRules()


def calculate_score(rows_cleared: int, cols_cleared: int, blocks_cleared: int,
                    rules: ScoringRules = DEFAULT_SCORING) -> int:
    return rules.score_for_clears(rows_cleared, cols_cleared, blocks_cleared)
