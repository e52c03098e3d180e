"""Configuration settings for the task repeater."""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

# Set the project base directory and .env file
BASE_DIR: Path = (Path(__file__).resolve().parents[3]).resolve()


class Settings(BaseSettings):
    """Settings class to store all the configurations for the app."""

    # Initialize the settings configuration from the environment and the .env file
    model_config = SettingsConfigDict(env_prefix="REPEATER_", env_file=BASE_DIR / ".env", extra="ignore")

    # Shutdown settings
    abort_timeout_s: float = 10  # Max time to wait for running repeaters to finish on app shutdown

    # API settings
    api_prefix: str = "/repeaters"


# Create a settings instance that can be imported throughout the app
settings: Settings = Settings()
