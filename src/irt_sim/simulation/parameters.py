"""
Simulation config loading from YAML files using OmegaConf.
"""

from pathlib import Path

from omegaconf import DictConfig, OmegaConf

from irt_sim.simulation.config import SimulationConfig

DISTRIBUTION_KEYS = ("ability", "difficulty")


def _replace_distribution_params(
    config: DictConfig, user_config: DictConfig
) -> None:
    """Replace, rather than merge, each distribution's params."""
    for key in DISTRIBUTION_KEYS:
        user_params = OmegaConf.select(user_config, f"{key}.params")
        if user_params is not None:
            config[key]["params"] = user_params


def load_config(yaml_path: Path | None) -> SimulationConfig:
    """Load and validate a simulation config from YAML.

    Args:
        yaml_path: Path to YAML config file

    Returns:
        Validated SimulationConfig

    Raises:
        FileNotFoundError: If yaml_path doesn't exist
        ValueError: If the merged config fails validation
    """
    # Create schema from dataclass
    schema = OmegaConf.structured(SimulationConfig)

    if yaml_path is not None:
        if not yaml_path.exists():
            raise FileNotFoundError(f"Config file not found: {yaml_path}")

        user_config = OmegaConf.load(yaml_path)
        assert isinstance(user_config, DictConfig)
        config = OmegaConf.merge(schema, user_config)
        _replace_distribution_params(config, user_config)
    else:
        config = schema

    # Convert to typed dataclass
    result = OmegaConf.to_object(config)
    assert isinstance(result, SimulationConfig)

    return result
