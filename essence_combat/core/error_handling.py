"""
Error handling for combat transitions.

Rejected actions never crash the engine: resolvers raise a CombatError, and
the `rejects_as_notification` decorator absorbs it at the transition
boundary, logs it and hands back the unchanged state together with a single
notification for the player.
"""

import functools
from typing import TYPE_CHECKING, Any, Callable, TypeVar

from catchery import log_warning

from .constants import Severity

if TYPE_CHECKING:
    from .config import CombatConfig

F = TypeVar("F", bound=Callable[..., Any])


class CombatError(Exception):
    """Base class for every non-fatal combat rejection."""

    severity: Severity = Severity.ERROR

    def __init__(
        self,
        message: str,
        severity: Severity | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        if severity is not None:
            self.severity = severity
        self.context = context or {}


class ActionValidationError(CombatError):
    """Invalid target, wrong turn, missing skill, insufficient energy or inactive encounter."""


class PreconditionError(CombatError):
    """The encounter is not in a state that allows the operation."""

    severity = Severity.WARNING


def rejects_as_notification(operation: str) -> Callable[[F], F]:
    """
    Decorator for transition functions.

    The decorated function must have the resolver signature
    `(state, command, rng, config)` and return a Transition. A CombatError
    raised inside it is logged and turned into a Transition that carries the
    input state and one notification, displayed for
    `config.notification_duration` milliseconds.

    Args:
        operation (str): Human-readable name of the operation, for logging.

    Returns:
        Callable: The decorator function.

    """

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(state: Any, command: Any, rng: Any, config: "CombatConfig") -> Any:
            from essence_combat.combat.notifications import Notification
            from essence_combat.combat.transition import Transition

            try:
                return func(state, command, rng, config)
            except CombatError as e:
                log_warning(
                    f"{operation} rejected: {e.message}",
                    {**e.context, "operation": operation, "error": type(e).__name__},
                )
                return Transition(
                    state=state,
                    notifications=[
                        Notification(
                            message=e.message,
                            severity=e.severity,
                            duration=config.notification_duration,
                        )
                    ],
                    rejected=True,
                )

        return wrapper  # type: ignore[return-value]

    return decorator
