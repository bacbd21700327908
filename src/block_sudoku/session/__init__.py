"""Session layer: the reducer-style state machine over the game engine.

`GameSession.dispatch` is the single entry point callers use; `reduce` is the
pure transition function behind it.
"""

from .actions import (
    ClearingDone,
    ContinueGame,
    DeselectPiece,
    EndDrag,
    FlipPiece,
    GameAction,
    Pause,
    PlacePiece,
    Restart,
    Resume,
    RotatePiece,
    SelectPiece,
    SetDifficulty,
    StartDrag,
)
from .engine import GameConfig, GameSession
from .reducer import reduce
from .snapshot import dump_snapshot, restore_snapshot
from .state import GameState, SessionStatus, elapsed_seconds, new_game
from .store import JsonFileSnapshotStore, MemorySnapshotStore, SnapshotStore

__all__ = [
    "ClearingDone",
    "ContinueGame",
    "DeselectPiece",
    "EndDrag",
    "FlipPiece",
    "GameAction",
    "Pause",
    "PlacePiece",
    "Restart",
    "Resume",
    "RotatePiece",
    "SelectPiece",
    "SetDifficulty",
    "StartDrag",
    "GameConfig",
    "GameSession",
    "reduce",
    "dump_snapshot",
    "restore_snapshot",
    "GameState",
    "SessionStatus",
    "elapsed_seconds",
    "new_game",
    "JsonFileSnapshotStore",
    "MemorySnapshotStore",
    "SnapshotStore",
]
