"""
Run the Learn docs copilot CLI.

Usage:
    python run_cli.py [COMMAND] [OPTIONS]

Commands:
    chat       Interactive chat session (type /help inside for commands)
    ask        One-shot question; without an argument asks the demo question
    tools      List the tools exposed by the Microsoft Learn MCP server
    profile    Show the default user profile kept in memory

Examples:
    python run_cli.py chat
    python run_cli.py chat --no-memory
    python run_cli.py ask "How do I deploy a container to Azure Container Apps?"

Environment variables:
    AZURE_OPENAI_ENDPOINT          Required. Azure OpenAI resource URL
    AZURE_OPENAI_DEPLOYMENT_NAME   Required. Chat model deployment name
    AZURE_OPENAI_API_VERSION       API version (default: 2024-10-21)
    AZURE_OPENAI_API_KEY           Optional; without it `az login` credentials are used
    LLM_PROVIDER                   "azure" (default) or "openai"
    OPENAI_API_KEY                 Required when LLM_PROVIDER=openai
    LEARN_MCP_URL                  MCP server (default: https://learn.microsoft.com/api/mcp)
    MEMORY_ENABLED                 "false" to start without the user profile
    TRANSCRIPT_DIR                 Where /save writes files (default: current directory)
    LOG_LEVEL                      Logging level (default: WARNING)
"""

import sys
from pathlib import Path

# Ensure src/ is importable
sys.path.insert(0, str(Path(__file__).parent / "src"))

from adapters.cli.main import app

if __name__ == "__main__":
    app()
