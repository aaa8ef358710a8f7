"""Run optimizations off the caller's thread.

Each request carries an id that is echoed back in the response, so a
caller can drop responses for requests it no longer cares about.  Work in
flight is never interrupted; abandoning a request means ignoring its
response.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, NamedTuple

from vacationmax.optimizer import OptimizationResult, VacationOptimizer, generate_vacation_plan
from vacationmax.preferences import Preferences

logger = logging.getLogger(__name__)


class WorkerResponse(NamedTuple):
    id: str
    success: bool
    result: OptimizationResult | None = None
    error: str | None = None


class PlanWorker:
    """Thread-pool front end for :class:`VacationOptimizer`."""

    def __init__(self, optimizer: VacationOptimizer | None = None, *, max_workers: int = 1):
        self.optimizer = optimizer
        self._pool = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="vacationmax")

    def __enter__(self) -> PlanWorker:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _run(self, request_id: str, preferences: Preferences | Mapping[str, Any]) -> WorkerResponse:
        try:
            if self.optimizer is None:
                result = generate_vacation_plan(preferences)
            else:
                result = self.optimizer.plan(preferences)
        except Exception as exc:
            logger.exception("Plan request %s failed", request_id)
            return WorkerResponse(request_id, False, error=str(exc) or type(exc).__name__)
        return WorkerResponse(request_id, True, result=result)

    def submit(
        self, request_id: str, preferences: Preferences | Mapping[str, Any]
    ) -> Future[WorkerResponse]:
        return self._pool.submit(self._run, request_id, preferences)

    def close(self, wait: bool = True) -> None:
        self._pool.shutdown(wait=wait)
