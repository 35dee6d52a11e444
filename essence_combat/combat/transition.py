from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .notifications import Notification

if TYPE_CHECKING:
    from .commands import Command
    from .encounter import GameState


@dataclass
class Transition:
    """The outcome of resolving one command."""

    # The state after the command, the input state when it was rejected.
    state: GameState
    notifications: list[Notification] = field(default_factory=list)
    # Commands to resolve next, in order, before any new external command.
    follow_ups: list[Command] = field(default_factory=list)
    rejected: bool = False
