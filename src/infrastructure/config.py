"""
infrastructure.config - Typed, injectable configuration.

A frozen dataclass that can be constructed from the environment (and an
optional .env file) or passed explicitly in tests.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from domain.exceptions import ConfigurationError

_TRUTHY = {"1", "true", "yes", "on"}
_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG", "NOTSET")


@dataclass(frozen=True)
class Settings:
    """Centralized configuration for the Learn docs copilot.

    No module-level globals — construct via from_env() or pass explicitly
    in tests.
    """

    # ── LLM Provider ────────────────────────────────────────────
    # Allowed: "azure", "openai"
    llm_provider: str = "azure"

    # Azure OpenAI (required when llm_provider="azure")
    azure_openai_endpoint: str = ""
    azure_openai_deployment: str = ""
    azure_openai_api_version: str = "2024-10-21"
    # Empty → authenticate with the Azure CLI credential
    azure_openai_api_key: str = ""

    # Plain OpenAI (used when llm_provider="openai")
    openai_api_key: str = ""
    llm_model_openai: str = "gpt-4.1-mini"

    # MCP tool server
    mcp_url: str = "https://learn.microsoft.com/api/mcp"

    # Agent
    agent_name: str = "DocsAgent"
    memory_enabled: bool = True

    # Where /save writes conversation_<timestamp>.txt
    transcript_dir: Path = Path(".")

    log_level: str = "WARNING"

    @property
    def active_llm_model(self) -> str:
        """Return the deployment/model name for the active provider."""
        if self.llm_provider == "openai":
            return self.llm_model_openai
        return self.azure_openai_deployment

    def validate(self, require_llm: bool = True) -> Settings:
        """Raise ConfigurationError when a required value is missing.

        Commands that never talk to the model pass require_llm=False and
        only get the logging check.
        """
        if self.log_level not in _LOG_LEVELS:
            raise ConfigurationError(
                f"Invalid LOG_LEVEL: '{self.log_level}'. "
                f"Must be one of {', '.join(_LOG_LEVELS)}."
            )
        if not require_llm:
            return self
        if self.llm_provider == "azure":
            if not self.azure_openai_endpoint:
                raise ConfigurationError("Missing AZURE_OPENAI_ENDPOINT")
            if not self.azure_openai_deployment:
                raise ConfigurationError("Missing AZURE_OPENAI_DEPLOYMENT_NAME")
        elif self.llm_provider == "openai":
            if not self.openai_api_key:
                raise ConfigurationError("Missing OPENAI_API_KEY")
        else:
            raise ConfigurationError(
                f"Unsupported LLM_PROVIDER: '{self.llm_provider}'. "
                "Must be 'azure' or 'openai'."
            )
        return self

    @classmethod
    def from_env(cls, env_file: Optional[Path] = None) -> Settings:
        """Build Settings from the environment, loading .env first."""
        from dotenv import load_dotenv
        load_dotenv(dotenv_path=env_file)

        return cls(
            llm_provider=os.getenv("LLM_PROVIDER", "azure").lower().strip(),
            azure_openai_endpoint=os.getenv("AZURE_OPENAI_ENDPOINT", ""),
            azure_openai_deployment=os.getenv("AZURE_OPENAI_DEPLOYMENT_NAME", ""),
            azure_openai_api_version=os.getenv("AZURE_OPENAI_API_VERSION", "2024-10-21"),
            azure_openai_api_key=os.getenv("AZURE_OPENAI_API_KEY", ""),
            openai_api_key=os.getenv("OPENAI_API_KEY", ""),
            llm_model_openai=os.getenv("LLM_MODEL_OPENAI", "gpt-4.1-mini"),
            mcp_url=os.getenv("LEARN_MCP_URL", "https://learn.microsoft.com/api/mcp"),
            agent_name=os.getenv("AGENT_NAME", "DocsAgent"),
            memory_enabled=os.getenv("MEMORY_ENABLED", "true").lower() in _TRUTHY,
            transcript_dir=Path(os.getenv("TRANSCRIPT_DIR", ".")),
            log_level=os.getenv("LOG_LEVEL", "WARNING").upper(),
        )
