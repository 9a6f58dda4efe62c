# apps/adapters/tasks/inline.py
"""
Inline Task Runner for testing

Runs submitted work immediately on the caller's thread so tests can
assert on side effects without waiting.
"""
from typing import Any, Callable, List
import logging

logger = logging.getLogger(__name__)


class InlineTaskRunner:
    """
    Synchronous stand-in for the thread pool

    Failures are logged and swallowed, same as the threaded runner.
    """

    def __init__(self):
        self.submitted: List[str] = []
        self.failures: List[str] = []

    def submit(self, func: Callable[..., Any], *args: Any, name: str = "") -> None:
        label = name or getattr(func, "__name__", "task")
        self.submitted.append(label)
        try:
            func(*args)
        except Exception:
            self.failures.append(label)
            logger.exception(f"Background task {label} failed")

    def shutdown(self, wait: bool = True) -> None:
        pass
