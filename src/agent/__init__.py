"""
agent - Conversational agent layer.

Contains the MCP tool adapter, memory, prompt, and the executor that runs
the LLM + tool loop. Depends on domain/. Never imports from adapters/.
"""
