"""
Data models shared by the data generating model and the estimators.

This module defines:
- TrueParameters: ground-truth abilities and difficulties
- ResponseMatrix: binary subject x item responses
- ParameterEstimates: output of any estimator
"""

from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

MIN_SUBJECTS = 2
MIN_ITEMS = 2


def _as_vector(values: NDArray[np.float64], name: str) -> None:
    if values.ndim != 1:
        raise ValueError(f"{name} must be 1D, got shape {values.shape}")
    if not np.all(np.isfinite(values)):
        raise ValueError(f"{name} must be finite")


@dataclass(frozen=True)
class TrueParameters:
    """
    Ground-truth latent parameters of a simulation run.

    Attributes:
        abilities: Subject abilities, shape (n_subjects,).
        difficulties: Item difficulties, shape (n_items,).
    """

    abilities: NDArray[np.float64]
    difficulties: NDArray[np.float64]

    def __post_init__(self) -> None:
        _as_vector(self.abilities, "abilities")
        _as_vector(self.difficulties, "difficulties")

    @property
    def n_subjects(self) -> int:
        return len(self.abilities)

    @property
    def n_items(self) -> int:
        return len(self.difficulties)


@dataclass(frozen=True)
class ResponseMatrix:
    """
    Binary response data for a fully crossed design.

    Attributes:
        responses: Array of shape (n_subjects, n_items) with values in {0, 1}.
            Rows are subjects, columns are items. No missing entries.
    """

    responses: NDArray[np.int8]

    def __post_init__(self) -> None:
        """Validate response matrix."""
        if self.responses.ndim != 2:
            raise ValueError(
                f"responses must be 2D, got shape {self.responses.shape}"
            )
        n_subjects, n_items = self.responses.shape
        if n_subjects < MIN_SUBJECTS:
            raise ValueError(
                f"Must have at least {MIN_SUBJECTS} subjects, got {n_subjects}"
            )
        if n_items < MIN_ITEMS:
            raise ValueError(
                f"Must have at least {MIN_ITEMS} items, got {n_items}"
            )
        if not np.isin(self.responses, (0, 1)).all():
            raise ValueError("Response values must be 0 or 1")

    @property
    def n_subjects(self) -> int:
        """Number of subjects (rows)."""
        return self.responses.shape[0]

    @property
    def n_items(self) -> int:
        """Number of items (columns)."""
        return self.responses.shape[1]

    @property
    def item_scores(self) -> NDArray[np.int64]:
        """Number of endorsements per item, shape (n_items,)."""
        result: NDArray[np.int64] = self.responses.sum(axis=0, dtype=np.int64)
        return result

    @property
    def subject_scores(self) -> NDArray[np.int64]:
        """Number of endorsements per subject, shape (n_subjects,)."""
        result: NDArray[np.int64] = self.responses.sum(axis=1, dtype=np.int64)
        return result

    def constant_items(self) -> NDArray[np.int64]:
        """Indices of items endorsed by all or by no subjects."""
        scores = self.item_scores
        result: NDArray[np.int64] = np.flatnonzero(
            (scores == 0) | (scores == self.n_subjects)
        )
        return result

    def constant_subjects(self) -> NDArray[np.int64]:
        """Indices of subjects who endorsed all or none of the items."""
        scores = self.subject_scores
        result: NDArray[np.int64] = np.flatnonzero(
            (scores == 0) | (scores == self.n_items)
        )
        return result

    def patterns(self) -> list[tuple[bool, ...]]:
        """Response pattern of each subject as a tuple of booleans."""
        return [tuple(bool(x) for x in row) for row in self.responses]


@dataclass(frozen=True)
class ParameterEstimates:
    """
    Estimated abilities and difficulties produced by one estimator.

    Attributes:
        abilities: Estimated abilities, shape (n_subjects,).
        difficulties: Estimated difficulties, shape (n_items,).
        method: Name of the estimator that produced the estimates.
    """

    abilities: NDArray[np.float64]
    difficulties: NDArray[np.float64]
    method: str

    def __post_init__(self) -> None:
        if self.abilities.ndim != 1 or self.difficulties.ndim != 1:
            raise ValueError("abilities and difficulties must be 1D")

    @property
    def n_subjects(self) -> int:
        return len(self.abilities)

    @property
    def n_items(self) -> int:
        return len(self.difficulties)
