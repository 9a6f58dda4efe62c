# apps/domain/ports/tasks.py

"""
Task Runner Port - Interface for detached side effects

Work submitted here is fire-and-forget: at-most-once, best-effort.
The caller never observes the outcome; failures are only logged.
"""

from typing import Any, Callable, Protocol


class ITaskRunner(Protocol):
    """
    Interface for running detached units of work
    """

    def submit(self, func: Callable[..., Any], *args: Any, name: str = "") -> None:
        """
        Schedule func(*args) without waiting for it

        Args:
            func: Work to run
            *args: Positional arguments for func
            name: Label used when logging failures
        """
        ...

    def shutdown(self, wait: bool = True) -> None:
        """Release worker resources at process exit"""
        ...
