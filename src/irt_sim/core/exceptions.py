"""
Exception types raised by the estimators and the replication driver.

Each type defines __reduce__ so instances survive pickling between
worker processes.
"""

from collections.abc import Sequence


class EstimationError(Exception):
    """Base class for failures while fitting a model to response data."""

    pass


class DegenerateDataError(EstimationError):
    """Raised when items or subjects have no response variance."""

    def __init__(
        self,
        item_indices: Sequence[int] = (),
        subject_indices: Sequence[int] = (),
    ) -> None:
        self.item_indices = tuple(int(i) for i in item_indices)
        self.subject_indices = tuple(int(i) for i in subject_indices)
        parts = []
        if self.item_indices:
            parts.append(f"items {list(self.item_indices)}")
        if self.subject_indices:
            parts.append(f"subjects {list(self.subject_indices)}")
        super().__init__(
            "Responses have no variance for " + " and ".join(parts)
        )

    def __reduce__(self) -> tuple[type, tuple[tuple[int, ...], tuple[int, ...]]]:
        return (type(self), (self.item_indices, self.subject_indices))


class ConvergenceError(EstimationError):
    """Raised when an iterative fit stops without converging."""

    def __init__(self, method: str, message: str) -> None:
        self.method = method
        self.message = message
        super().__init__(f"{method} failed to converge: {message}")

    def __reduce__(self) -> tuple[type, tuple[str, str]]:
        return (type(self), (self.method, self.message))


class ReplicationFailedError(EstimationError):
    """Raised when a replication fails under the abort policy."""

    def __init__(self, run_index: int, message: str) -> None:
        self.run_index = run_index
        self.message = message
        super().__init__(f"Replication {run_index} failed: {message}")

    def __reduce__(self) -> tuple[type, tuple[int, str]]:
        return (type(self), (self.run_index, self.message))
