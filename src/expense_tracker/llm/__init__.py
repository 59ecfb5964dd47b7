from expense_tracker.llm.openai_client import OpenAIClient

__all__ = ["OpenAIClient"]
