import logging
from collections.abc import Callable

from irt_sim.core.data_models import ParameterEstimates, ResponseMatrix
from irt_sim.core.exceptions import DegenerateDataError

logger = logging.getLogger(__name__)

Estimator = Callable[[ResponseMatrix], ParameterEstimates]


def check_degenerate(
    data: ResponseMatrix,
    allow_constant_subjects: bool = True,
) -> None:
    """
    Reject response matrices whose parameters cannot be estimated.

    An item endorsed by everyone or by no one has an unbounded difficulty.
    A subject with a constant row has an unbounded ability under maximum
    likelihood, but posterior scoring keeps it finite, so such subjects
    are only logged unless allow_constant_subjects is False.

    Raises:
        DegenerateDataError: If any item (or, when disallowed, any subject)
            has no response variance.
    """
    items = data.constant_items()
    subjects = data.constant_subjects()

    if len(subjects) > 0 and allow_constant_subjects:
        logger.debug(
            "%d subjects with constant response rows", len(subjects)
        )
        subjects = subjects[:0]

    if len(items) > 0 or len(subjects) > 0:
        raise DegenerateDataError(
            item_indices=items.tolist(), subject_indices=subjects.tolist()
        )
