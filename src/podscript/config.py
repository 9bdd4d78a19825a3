"""
Podscript Configuration
Pydantic Settings for credentials and runtime options.
"""

from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .llm.models import Provider


class Settings(BaseSettings):
    """Application settings loaded from environment variables or .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # --- LLM Credentials ---
    openai_api_key: str = ""
    anthropic_api_key: str = ""
    groq_api_key: str = ""
    gemini_api_key: str = ""

    # --- AWS Bedrock ---
    aws_region: str = ""
    aws_access_key_id: str = ""
    aws_secret_access_key: str = ""
    aws_session_token: str = ""  # Optional for long-lived IAM keys

    # --- Transcript Cleanup ---
    default_model: str = "gpt-4o"
    caption_language: str = "en"

    # --- LLM Calls ---
    llm_request_timeout: float = 120.0  # seconds
    retry_max_elapsed_seconds: float = Field(default=600.0, gt=0)  # 10 minutes
    stream_poll_interval: float = Field(default=0.1, gt=0)  # cancellation check

    # --- Logging ---
    log_level: str = "INFO"

    # --- Server ---
    api_host: str = "127.0.0.1"
    api_port: int = 8080

    def missing_credentials(self, provider: Provider) -> List[str]:
        """
        List the environment variables that must be set before a provider can be used.

        Returns an empty list when every required credential is present.
        """
        required = {
            Provider.OPENAI: {"OPENAI_API_KEY": self.openai_api_key},
            Provider.CLAUDE: {"ANTHROPIC_API_KEY": self.anthropic_api_key},
            Provider.GROQ: {"GROQ_API_KEY": self.groq_api_key},
            Provider.GEMINI: {"GEMINI_API_KEY": self.gemini_api_key},
            Provider.BEDROCK: {
                "AWS_REGION": self.aws_region,
                "AWS_ACCESS_KEY_ID": self.aws_access_key_id,
                "AWS_SECRET_ACCESS_KEY": self.aws_secret_access_key,
            },
        }[provider]
        return [name for name, value in required.items() if not value]


# Global settings instance
settings = Settings()
