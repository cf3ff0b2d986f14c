"""Process-wide guard around the least-squares backend.

Public fitting operations hold a single non-reentrant lock for their whole
duration and pin BLAS to one thread, so concurrent calls are serialized
and give bitwise-identical results to serial calls. Internal helpers never
acquire the lock themselves.
"""

from __future__ import annotations

import itertools
import threading
from contextlib import contextmanager
from typing import TYPE_CHECKING

from threadpoolctl import threadpool_limits

if TYPE_CHECKING:
    from collections.abc import Iterator

_SOLVER_LOCK = threading.Lock()
_CALL_COUNTER = itertools.count(1)


def next_call_id() -> int:
    """Advance the diagnostic call counter; safe outside the lock."""
    return next(_CALL_COUNTER)


@contextmanager
def solver_session() -> Iterator[None]:
    """Hold the solver lock with single-threaded BLAS for the enclosed block."""
    with _SOLVER_LOCK, threadpool_limits(limits=1, user_api="blas"):
        yield


def solver_busy() -> bool:
    """True while some thread holds the solver lock."""
    return _SOLVER_LOCK.locked()


__all__ = ["next_call_id", "solver_busy", "solver_session"]
