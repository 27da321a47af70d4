"""Library configuration and settings."""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

_BASE_DIR = Path(__file__).resolve().parents[2]
_ENV_FILE = _BASE_DIR / ".env"


class Settings(BaseSettings):
    """Settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=_ENV_FILE, env_file_encoding="utf-8", extra="ignore"
    )

    # OpenWeatherMap (geocoding + 5 day forecast)
    openweather_api_key: str = Field(
        default="dummy-openweather-api-key-for-tests",
        description="OpenWeatherMap API key",
    )
    openweather_base_url: str = Field(
        default="https://api.openweathermap.org",
        description="OpenWeatherMap API base URL",
    )
    openweather_horizon_days: int = Field(
        default=5, description="Days ahead the OpenWeatherMap forecast covers"
    )

    # Open-Meteo (daily forecast, no key)
    open_meteo_base_url: str = Field(
        default="https://api.open-meteo.com",
        description="Open-Meteo API base URL",
    )
    open_meteo_horizon_days: int = Field(
        default=16, description="Days ahead the Open-Meteo forecast covers"
    )

    # Timeouts (seconds)
    geocode_timeout_s: float = Field(
        default=5.0, description="Timeout for a single geocoding request"
    )
    forecast_timeout_s: float = Field(
        default=10.0, description="Timeout for a single forecast request"
    )

    # Seasonal estimation
    openai_api_key: str = Field(
        default="dummy-openai-api-key-for-tests",
        description="OpenAI API key for seasonal weather estimates",
    )
    openai_model: str = Field(
        default="gpt-4.1-nano", description="OpenAI model for seasonal estimates"
    )
    seasonal_max_tokens: int = Field(
        default=400, description="Completion token cap for seasonal estimates"
    )
    seasonal_timeout_s: float = Field(
        default=20.0, description="Timeout for a seasonal estimate call"
    )

    # Response parsing
    sandbox_timeout_s: float = Field(
        default=1.0, description="Wall-clock bound on sandboxed literal evaluation"
    )
    sandbox_max_chars: int = Field(
        default=200_000, description="Inputs longer than this skip sandbox evaluation"
    )
    repaired_excerpt_chars: int = Field(
        default=500, description="Repaired text kept on the call log"
    )

    # Weather aggregation
    weather_max_workers: int = Field(
        default=5, description="Max concurrent per-destination weather lookups"
    )
    max_recommendations: int = Field(
        default=5, description="Recommendations kept per forecast summary"
    )

    # Token pricing (USD per 1K tokens)
    prompt_cost_per_1k_usd: float = Field(
        default=0.03, description="Prompt token price per 1K tokens"
    )
    completion_cost_per_1k_usd: float = Field(
        default=0.06, description="Completion token price per 1K tokens"
    )


_settings: Settings | None = None


def get_settings() -> Settings:
    """Get settings singleton."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


class MissingOpenAIKeyError(RuntimeError):
    """Raised when an OpenAI API key is not configured."""


def get_openai_api_key(settings: Settings | None = None) -> str:
    """Return a validated OpenAI API key or raise a helpful error."""
    settings = settings or get_settings()
    api_key = (settings.openai_api_key or "").strip()
    if not api_key or api_key.startswith("dummy-"):
        raise MissingOpenAIKeyError(
            "OpenAI API key is not configured. "
            "Set OPENAI_API_KEY in your environment (.env) before requesting "
            "seasonal weather estimates."
        )
    return api_key
