"""
infrastructure.llm.llm_builder - Centralized LLM construction.

Single source of truth for building the chat model behind the agent. The
provider is controlled by the LLM_PROVIDER environment variable.

Supported providers:
    - "azure"   → langchain_openai.AzureChatOpenAI (API key or Azure CLI login)
    - "openai"  → langchain_openai.ChatOpenAI
"""

from __future__ import annotations

import logging
from typing import Any, Dict

from langchain_core.language_models import BaseChatModel

logger = logging.getLogger(__name__)

AZURE_COGNITIVE_SCOPE = "https://cognitiveservices.azure.com/.default"


def build_llm(
    *,
    provider: str,
    model: str,
    azure_endpoint: str = "",
    azure_api_version: str = "2024-10-21",
    azure_api_key: str = "",
    openai_api_key: str = "",
) -> BaseChatModel:
    """Build a chat model for the given provider.

    Args:
        provider: One of "azure", "openai".
        model: Deployment name (azure) or model name (openai).
        azure_endpoint: Azure OpenAI resource URL.
        azure_api_version: Azure OpenAI REST API version.
        azure_api_key: API key; when empty the Azure CLI credential is used.
        openai_api_key: API key for OpenAI.

    Returns:
        A configured LangChain chat model that supports tool calling.

    Raises:
        ValueError: If the provider is unknown or required credentials are missing.
    """
    provider = provider.lower().strip()

    kwargs: Dict[str, Any] = {}

    if provider == "azure":
        from langchain_openai import AzureChatOpenAI

        if not azure_endpoint or not model:
            raise ValueError(
                "AZURE_OPENAI_ENDPOINT and AZURE_OPENAI_DEPLOYMENT_NAME are "
                "required when LLM_PROVIDER='azure'"
            )

        kwargs.update({
            "azure_endpoint": azure_endpoint,
            "azure_deployment": model,
            "api_version": azure_api_version,
        })
        if azure_api_key:
            kwargs["api_key"] = azure_api_key
            auth = "api-key"
        else:
            from azure.identity import AzureCliCredential, get_bearer_token_provider

            kwargs["azure_ad_token_provider"] = get_bearer_token_provider(
                AzureCliCredential(), AZURE_COGNITIVE_SCOPE,
            )
            auth = "azure-cli"

        logger.info("Building AzureChatOpenAI (deployment=%s, auth=%s)", model, auth)
        return AzureChatOpenAI(**kwargs)

    elif provider == "openai":
        from langchain_openai import ChatOpenAI

        if not openai_api_key:
            raise ValueError("OPENAI_API_KEY is required when LLM_PROVIDER='openai'")

        kwargs.update({"model": model, "api_key": openai_api_key})
        logger.info("Building OpenAI LLM (model=%s)", model)
        return ChatOpenAI(**kwargs)

    else:
        raise ValueError(
            f"Unsupported LLM_PROVIDER: '{provider}'. "
            "Must be 'azure' or 'openai'."
        )
