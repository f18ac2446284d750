"""
Data generating model for Rasch response simulations.

This module draws ground-truth abilities and difficulties and produces
binary responses under the one-parameter logistic model.
"""

from irt_sim.simulation.config import DistributionConfig, SimulationConfig
from irt_sim.simulation.data_models import GeneratedData
from irt_sim.simulation.generators import (
    draw_true_parameters,
    generate_dataset,
    generate_responses,
    response_probabilities,
)
from irt_sim.simulation.parameters import load_config
from irt_sim.simulation.presets import get_available_presets, get_preset

__all__ = [
    "DistributionConfig",
    "GeneratedData",
    "SimulationConfig",
    "draw_true_parameters",
    "generate_dataset",
    "generate_responses",
    "get_available_presets",
    "get_preset",
    "load_config",
    "response_probabilities",
]
