"""
agent.prompt - System prompt for the Learn docs agent.

The memory block, when present, is appended after the fixed instructions.
"""

from __future__ import annotations

AGENT_INSTRUCTIONS = (
    "You are an expert agent in Microsoft technologies. "
    "For any question about Azure/.NET/Windows/VS/Entra/M365, "
    "you MUST first use the Microsoft Learn MCP Server tools "
    "(search/fetch/code samples) and cite the official URL. "
    "Be conversational, helpful, and provide practical examples when possible."
)

DEMO_QUESTION = (
    "I need information on how to create an agent in Azure AI Foundry Agents. "
    "Include the Learn reference and code examples if they exist."
)


def build_system_prompt(memory_context: str = "") -> str:
    """Build the agent instructions.

    Args:
        memory_context: Output of MemoryStore.render_context(). An empty
                        string means the section is left out.

    Returns:
        The system prompt string.
    """
    if not memory_context:
        return AGENT_INSTRUCTIONS
    return AGENT_INSTRUCTIONS + "\n\n" + memory_context
