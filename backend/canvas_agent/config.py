"""Application configuration from environment variables."""

from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    anthropic_api_key: str = ""
    canvas_agent_env: str = "development"
    canvas_agent_log_level: str = "info"

    # CORS
    cors_origins: list[str] = ["http://localhost:5173"]

    # Reasoning engine
    anthropic_model: str = "claude-sonnet-4-5-20250929"
    anthropic_max_tokens: int = 4000
    anthropic_temperature: float = 0.0

    # Agent loop
    max_iterations: int = 50
    batch_size: int = 50
    command_timeout_s: float = 60.0

    # Admission control
    rate_limit_requests: int = 20
    rate_limit_window_s: float = 60.0
    idempotency_ttl_s: float = 300.0
    sweep_interval_s: float = 300.0

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
