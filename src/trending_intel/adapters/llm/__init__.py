"""LLM adapters."""

from trending_intel.adapters.llm.claude_client import ClaudeClient

__all__ = ["ClaudeClient"]
