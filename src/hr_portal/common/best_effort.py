"""Best-effort side effects.

Side effects fired after a primary write (notifications, mostly) must never
fail that write. ``settle_all`` runs them concurrently, waits for every one to
finish, and reports failures instead of raising them.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable

from ..core.constants import DEFAULT_NOTIFICATION_WORKERS

logger = logging.getLogger(__name__)


@dataclass
class SettledResults:
    succeeded: list[Any] = field(default_factory=list)
    failures: list[tuple[int, BaseException]] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.succeeded) + len(self.failures)

    @property
    def ok(self) -> bool:
        return not self.failures


def settle_all(
    calls: Iterable[Callable[[], Any]],
    *,
    label: str = "side effect",
    max_workers: int = DEFAULT_NOTIFICATION_WORKERS,
) -> SettledResults:
    """Run every call, collecting results and failures (allSettled semantics)."""

    calls = list(calls)
    results = SettledResults()
    if not calls:
        return results

    with ThreadPoolExecutor(max_workers=max(1, min(int(max_workers), len(calls)))) as pool:
        futures = [pool.submit(call) for call in calls]
        for index, future in enumerate(futures):
            try:
                results.succeeded.append(future.result())
            except Exception as exc:
                logger.warning("%s #%d failed: %s", label, index, exc, exc_info=exc)
                results.failures.append((index, exc))

    logger.info("%s: %d/%d succeeded", label, len(results.succeeded), results.total)
    return results


def best_effort(call: Callable[[], Any], *, label: str = "side effect") -> Any:
    """Run a single side effect; log and return None on failure."""
    try:
        return call()
    except Exception as exc:
        logger.error("%s failed: %s", label, exc, exc_info=exc)
        return None