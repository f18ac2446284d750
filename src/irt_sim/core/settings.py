from pydantic_settings import BaseSettings

IRT_SIM_ENV_PREFIX = "IRT_SIM_"


class Settings(BaseSettings):
    model_config = {"env_prefix": IRT_SIM_ENV_PREFIX}

    log_level: str = "INFO"
    n_workers: int = 1
    default_preset: str = "reference"
