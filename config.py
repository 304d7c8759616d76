"""
Math Solver Editor - Configuration
Environment-based configuration with sensible defaults.
"""

from typing import Literal
from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Server settings
    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = True
    cors_origins: list[str] = ["*"]
    log_level: Literal['DEBUG', 'INFO', 'WARNING', 'ERROR'] = 'INFO'

    # External math solver
    solver_url: str = Field(
        default="http://localhost:5000/api/math/solve",
        description="Endpoint accepting POST {formula} and returning a solution"
    )
    solver_timeout: float = 60.0  # seconds

    # Editor behaviour
    suggestion_limit: int = 8
    indent_token: str = "\\, "  # LaTeX thin space

    # Preview
    preview_display_mode: bool = True

    # Sessions
    max_sessions: int = 1000

    class Config:
        env_prefix = "MATHSOLVER_"
        env_file = ".env"
        env_file_encoding = "utf-8"


# Global settings instance
settings = Settings()


def get_solver_config() -> dict:
    """Get the outbound solver connection settings."""
    return {
        "url": settings.solver_url,
        "timeout": settings.solver_timeout,
    }
