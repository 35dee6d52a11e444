"""
Constants and enumerations for the combat engine.

Defines the enumerations shared by every component: which side is acting,
how an encounter ended, the kinds of combat log entries, notification
severities and skill categories.
"""

from enum import Enum


class NiceEnum(Enum):
    """An enumeration that provides a nicer string representation."""

    def __str__(self) -> str:
        return self.name

    @property
    def display_name(self) -> str:
        return self.name.lower().capitalize()


class ActorSide(NiceEnum):
    """Defines which side of the encounter acts next."""

    PLAYER = "player"
    ENEMY = "enemy"

    @property
    def emoji(self) -> str:
        """Returns the emoji associated with this side."""
        return {
            ActorSide.PLAYER: "👤",
            ActorSide.ENEMY: "👹",
        }.get(self, "❔")

    @property
    def color(self) -> str:
        """Returns the color string associated with this side."""
        return {
            ActorSide.PLAYER: "bold blue",
            ActorSide.ENEMY: "bold red",
        }.get(self, "dim white")

    @property
    def opponent(self) -> "ActorSide":
        """Returns the side that acts after this one."""
        return ActorSide.ENEMY if self == ActorSide.PLAYER else ActorSide.PLAYER

    def colorize(self, message: str) -> str:
        """Applies side color formatting to a message."""
        return f"[{self.color}]{message}[/]"


class EncounterResult(NiceEnum):
    """Defines how an encounter terminated."""

    NONE = "none"
    VICTORY = "victory"
    DEFEAT = "defeat"
    FLED = "fled"
    UNKNOWN = "unknown"


class LogKind(NiceEnum):
    """Defines the kind of a combat log entry."""

    START = "start"
    PLAYER_ATTACK = "player_attack"
    ENEMY_ATTACK = "enemy_attack"
    SKILL = "skill"
    END_TURN = "end_turn"
    FLEE = "flee"
    FLEE_ATTEMPT = "flee_attempt"
    VICTORY = "victory"
    DEFEAT = "defeat"
    END = "end"

    @property
    def color(self) -> str:
        """Returns the color string associated with this log kind."""
        return {
            LogKind.START: "bold yellow",
            LogKind.PLAYER_ATTACK: "bold blue",
            LogKind.ENEMY_ATTACK: "bold red",
            LogKind.SKILL: "bold magenta",
            LogKind.FLEE: "bold cyan",
            LogKind.FLEE_ATTEMPT: "cyan",
            LogKind.VICTORY: "bold green",
            LogKind.DEFEAT: "bold red",
        }.get(self, "dim white")

    def colorize(self, message: str) -> str:
        """Applies log kind color formatting to a message."""
        return f"[{self.color}]{message}[/]"


class Severity(NiceEnum):
    """Defines the severity of a notification."""

    SUCCESS = "success"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    DANGER = "danger"

    @property
    def emoji(self) -> str:
        """Returns the emoji associated with this severity."""
        return {
            Severity.SUCCESS: "✅",
            Severity.INFO: "ℹ️",
            Severity.WARNING: "⚠️",
            Severity.ERROR: "❌",
            Severity.DANGER: "💀",
        }.get(self, "❔")

    @property
    def color(self) -> str:
        """Returns the color string associated with this severity."""
        return {
            Severity.SUCCESS: "bold green",
            Severity.INFO: "bold cyan",
            Severity.WARNING: "bold yellow",
            Severity.ERROR: "bold red",
            Severity.DANGER: "bold magenta",
        }.get(self, "dim white")

    def colorize(self, message: str) -> str:
        """Applies severity color formatting to a message."""
        return f"[{self.color}]{message}[/]"


class SkillCategory(NiceEnum):
    """Defines the category of a combat skill."""

    AREA = "area"
    HEALING = "healing"
    BUFF = "buff"
    DEBUFF = "debuff"


# Notification durations, in milliseconds.
DEFAULT_NOTIFICATION_DURATION = 3000
LONG_NOTIFICATION_DURATION = 5000

# Location used when an encounter does not name one.
DEFAULT_LOCATION = "wilderness"
