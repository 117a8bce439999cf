"""
config.py — Application settings read from environment variables.
Every variable carries the INFIX_ prefix (e.g. INFIX_LOG_LEVEL=DEBUG).
"""
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Logging
    log_level: str = "INFO"

    # Parser / evaluator
    max_expression_length: int = 4096
    float_precision: int = 12

    # App
    app_title: str = "infix"
    app_version: str = "0.1.0"

    model_config = SettingsConfigDict(env_prefix="INFIX_", env_file=".env", extra="ignore")
