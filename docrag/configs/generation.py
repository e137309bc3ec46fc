"""
Generation backend configuration settings.

Settings for the Ollama chat endpoint used to generate answers.

Dependencies: pydantic_settings
System role: Answer generation configuration
"""

from pydantic_settings import BaseSettings
from pydantic import Field


class GenerationSettings(BaseSettings):
    """Ollama generation configuration."""

    endpoint: str = Field(
        default="http://localhost:11434",
        description="Ollama server URL",
    )
    model: str = Field(default="qwen3:1.7b", description="Chat model name")
    enable_thinking: bool = Field(
        default=False,
        description="Ask thinking-capable models to emit reasoning",
    )
    temperature: float = Field(default=0.7, ge=0.0, le=2.0, description="Sampling temperature")
    request_timeout_seconds: float = Field(
        default=120.0,
        gt=0,
        description="HTTP timeout for a single generation request",
    )

    class Config:
        """Pydantic config for environment variable loading."""

        env_prefix = "OLLAMA_"
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"
