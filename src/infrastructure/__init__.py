"""
infrastructure - Concrete implementations of external collaborators.

Contains all vendor-specific code: Azure OpenAI / LangChain model
construction, the MCP transport, and environment configuration.
Depends on domain/ only. Never imported by application/.
"""
