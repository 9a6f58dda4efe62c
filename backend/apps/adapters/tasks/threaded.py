# apps/adapters/tasks/threaded.py
"""
Thread Pool Task Runner

Runs detached side effects (AI generation, email) on a bounded pool
inside the web process. Nothing is persisted: work queued at shutdown
is lost.
"""
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable
import logging

from django.db import close_old_connections

logger = logging.getLogger(__name__)


class ThreadPoolTaskRunner:
    """
    Fire-and-forget executor

    Failures are logged with traceback and never reach the submitter.
    """

    def __init__(self, max_workers: int = 4):
        self.max_workers = max_workers
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers,
            thread_name_prefix="consulting-task",
        )
        logger.info(f"Task runner started with {max_workers} workers")

    def submit(self, func: Callable[..., Any], *args: Any, name: str = "") -> None:
        label = name or getattr(func, "__name__", "task")
        self._executor.submit(self._run, func, args, label)

    def shutdown(self, wait: bool = True) -> None:
        logger.info("Shutting down task runner")
        self._executor.shutdown(wait=wait)

    @staticmethod
    def _run(func: Callable[..., Any], args: tuple, label: str):
        try:
            func(*args)
        except Exception:
            logger.exception(f"Background task {label} failed")
        finally:
            # Worker threads get their own DB connection per task
            close_old_connections()
