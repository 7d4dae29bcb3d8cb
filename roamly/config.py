"""Configuration settings using Pydantic"""
from typing import Optional
from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # Supabase Configuration (anon key - row level security does the scoping)
    supabase_url: str = Field(..., alias="SUPABASE_URL")
    supabase_key: str = Field(..., alias="SUPABASE_KEY")

    # Application Settings
    env: str = Field(default="development", alias="ENV")
    log_level: str = Field(default="info", alias="LOG_LEVEL")
    log_file: str = Field(default="logs.txt", alias="LOG_FILE")

    # Session cookies
    session_cookie_max_age_seconds: int = Field(default=604800, alias="SESSION_COOKIE_MAX_AGE_SECONDS")  # 7 days

    # Recommendation Settings
    # "edge_function" calls the managed function, "gemini" talks to the model directly
    recommendation_backend: str = Field(default="edge_function", alias="RECOMMENDATION_BACKEND")
    recommendation_function: str = Field(default="travel-recommendations", alias="RECOMMENDATION_FUNCTION")

    # Model Settings (only used by the gemini backend)
    gemini_api_key: Optional[str] = Field(default=None, alias="GEMINI_API_KEY")
    model_name: str = Field(default="gemini-2.5-flash-lite", alias="MODEL_NAME")
    model_temperature: float = Field(default=0.7, alias="MODEL_TEMPERATURE")

    # CORS Settings
    allowed_origins: str = Field(
        default="http://localhost:5173",
        alias="ALLOWED_ORIGINS",
        description="Comma-separated list of allowed origins for CORS"
    )

    class Config:
        env_file = ".env"
        case_sensitive = False

    @property
    def is_production(self) -> bool:
        return self.env == "production"


# Global settings instance
settings = Settings()
