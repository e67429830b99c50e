"""
Configuration settings for the Support MAS runtime and judge loop
"""
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings"""

    model_config = SettingsConfigDict(env_file=".env", extra="allow")

    # Application
    APP_NAME: str = "Support MAS"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"

    # Paths
    BASE_DIR: Path = Path(__file__).parent.parent
    REPORTS_DIR: Path = BASE_DIR / "reports"

    # LLM settings
    LLM_PROVIDER: str = "scripted"  # scripted | ollama
    OLLAMA_HOST: str = "http://localhost:11434"
    OLLAMA_TEXT_MODEL: str = "llama3.2"
    LLM_TEMPERATURE: float = 0.2
    MAX_TOOL_ROUNDS: int = 3

    # Runtime settings
    BRAND_NAME: str = "ci-test"
    FRUSTRATION_ESCALATION_THRESHOLD: int = 2

    # CI identity used by run-all
    CI_CUSTOMER_EMAIL: str = "ci@test.com"
    CI_CUSTOMER_ID: str = "ci_test"
    CI_FIRST_NAME: str = "CI"
    CI_LAST_NAME: str = "Test"

    # Judge settings
    SLOW_RUN_MS: int = 5000
    SHIP_MIN_PASS_RATE: float = 80
    SHIP_MIN_SCORE: float = 70


settings = Settings()
