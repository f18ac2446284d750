"""
Data structures for simulated response data.
"""

from dataclasses import dataclass

import numpy as np

from irt_sim.core.data_models import ResponseMatrix, TrueParameters


@dataclass(frozen=True)
class GeneratedData:
    """
    Output of one draw from the data generating model.

    Attributes:
        true_parameters: Abilities and difficulties used to generate responses.
        responses: Simulated binary response matrix.
    """

    true_parameters: TrueParameters
    responses: ResponseMatrix

    def __post_init__(self) -> None:
        expected = (
            self.true_parameters.n_subjects,
            self.true_parameters.n_items,
        )
        if self.responses.responses.shape != expected:
            raise ValueError(
                f"responses shape {self.responses.responses.shape} does not "
                f"match parameters {expected}"
            )

    @property
    def endorsement_rate(self) -> float:
        """Overall proportion of endorsed responses."""
        return float(np.mean(self.responses.responses))
