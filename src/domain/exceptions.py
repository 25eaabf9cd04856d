"""
domain.exceptions - Custom exception hierarchy for the Learn docs copilot.

All domain-level errors inherit from CopilotError so callers can catch
broad or specific exceptions as needed.
"""


class CopilotError(Exception):
    """Base exception for all domain-level errors."""


class ConfigurationError(CopilotError):
    """Raised when a required setting is missing or invalid."""


class ToolCatalogError(CopilotError):
    """Raised when the MCP server cannot be reached or listed."""


class ToolInvocationError(CopilotError):
    """Raised when an MCP tool reports an error result."""


class AgentError(CopilotError):
    """Raised when the agent is unavailable or produced no reply."""
