from __future__ import annotations

from vacationmax.optimizer import VacationOptimizer
from vacationmax.worker import PlanWorker, WorkerResponse


def _failing_lookup(country: str, region: str, start_year: int, end_year: int) -> dict[str, str]:
    raise RuntimeError("holiday service unavailable")


class TestPlanWorker:
    def test_success_echoes_id(self) -> None:
        with PlanWorker(VacationOptimizer()) as worker:
            response = worker.submit("req-1", {"leave_days": 5, "country": "Canada"}).result()
        assert isinstance(response, WorkerResponse)
        assert response.id == "req-1"
        assert response.success is True
        assert response.error is None
        assert response.result is not None
        assert response.result.total_pto_used <= 5

    def test_failure_is_reported_not_raised(self) -> None:
        with PlanWorker(VacationOptimizer(_failing_lookup)) as worker:
            response = worker.submit("req-2", {"leave_days": 5, "country": "Canada"}).result()
        assert response.id == "req-2"
        assert response.success is False
        assert response.result is None
        assert response.error == "holiday service unavailable"

    def test_default_optimizer(self) -> None:
        with PlanWorker() as worker:
            response = worker.submit("req-3", {"leave_days": 0, "country": ""}).result()
        assert response.success is True
        assert response.result is not None
        assert response.result.plan_name == "No Opportunities Found"

    def test_responses_keep_their_ids(self) -> None:
        with PlanWorker(VacationOptimizer(), max_workers=2) as worker:
            futures = [
                worker.submit(f"req-{n}", {"leave_days": n, "country": "United States"})
                for n in range(4)
            ]
            ids = [f.result().id for f in futures]
        assert ids == ["req-0", "req-1", "req-2", "req-3"]
