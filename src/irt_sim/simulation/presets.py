"""
Preset simulation profiles.

The reference preset is the baseline study design: 100 subjects,
20 items, 100 replications.
"""

from pathlib import Path

from irt_sim.simulation.config import SimulationConfig
from irt_sim.simulation.parameters import load_config

PARAMS_DIR = Path(__file__).parent / "params"


def get_available_presets() -> list[str]:
    return sorted(x.stem for x in PARAMS_DIR.glob("*.yaml"))


def get_preset(name: str) -> SimulationConfig:
    """Get a preset configuration by name."""
    config_path = PARAMS_DIR / f"{name}.yaml"
    if not config_path.exists():
        available_presets = get_available_presets()
        raise ValueError(
            f"Unknown preset: {name}. Available presets: {available_presets}"
        )
    return load_config(config_path)
