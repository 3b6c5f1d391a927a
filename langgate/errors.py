"""
Error taxonomy for LangGate.

Routing and registry-lookup failures are raised synchronously. Failures
inside a single metric or a single benchmark test case are contained by
the evaluation engine and never surface as these exceptions.
"""

from typing import Any, List, Optional


class LangGateError(Exception):
    """Base class for all LangGate errors."""


class NoEligibleModelError(LangGateError):
    """Raised when routing leaves zero candidate models."""

    def __init__(self, task_type: Any, constraints: Any = None, reason: str = ""):
        self.task_type = task_type
        self.constraints = constraints
        task = getattr(task_type, "value", task_type)
        message = f"No models available for task type: {task}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class UnknownModelError(LangGateError):
    """Raised when a model id is not in the registry."""

    def __init__(self, model_id: str):
        self.model_id = model_id
        super().__init__(f"Unknown model: {model_id}")


class UnknownMetricError(LangGateError):
    """Raised when no requested evaluation metric can be resolved."""

    def __init__(self, metric_ids: Optional[List[str]] = None):
        self.metric_ids = list(metric_ids or [])
        if self.metric_ids:
            message = f"Unknown evaluation metric(s): {', '.join(self.metric_ids)}"
        elif metric_ids is not None:
            message = "No evaluation metrics requested (empty metric_ids)"
        else:
            message = "No evaluation metrics registered"
        super().__init__(message)


class UnknownTestCaseError(LangGateError):
    """Raised when no referenced test case can be resolved."""

    def __init__(self, test_case_ids: List[str]):
        self.test_case_ids = list(test_case_ids)
        super().__init__(
            f"No valid test cases found among: {', '.join(self.test_case_ids) or '<none>'}"
        )


class BackendInferenceError(LangGateError):
    """Raised when a model backend call fails or no backend is wired."""

    def __init__(
        self,
        model_id: str,
        message: str,
        status_code: Optional[int] = None
    ):
        self.model_id = model_id
        self.status_code = status_code
        super().__init__(f"Inference failed for {model_id}: {message}")


class InferenceTimeoutError(BackendInferenceError):
    """Raised when a backend call exceeds its timeout."""

    def __init__(self, model_id: str, timeout: float):
        self.timeout = timeout
        super().__init__(model_id, f"timed out after {timeout:.2f}s")


class InvalidScoreError(LangGateError):
    """Raised when a metric returns a score outside [0, 1]."""

    def __init__(self, metric_id: str, score: Any):
        self.metric_id = metric_id
        self.score = score
        super().__init__(
            f"Metric '{metric_id}' returned invalid score {score!r}; "
            f"scores must lie in [0, 1]"
        )


class BenchmarkCancelledError(LangGateError):
    """Raised when a benchmark run is cancelled before completion."""

    def __init__(self, benchmark_id: str, completed: List[Any]):
        self.benchmark_id = benchmark_id
        self.completed = list(completed)
        super().__init__(
            f"Benchmark {benchmark_id} cancelled after {len(self.completed)} test case(s)"
        )
