"""LLM client utilities for LangChain integration."""

from langchain_openai import ChatOpenAI

from portfolio.core.config import get_settings


def get_llm(
    model: str | None = None,
    temperature: float | None = None,
    max_tokens: int | None = None,
) -> ChatOpenAI:
    """
    Get configured chat model for the portfolio assistant.

    Args:
        model: Model name override (defaults to CHAT_MODEL)
        temperature: Temperature override (defaults to CHAT_TEMPERATURE)
        max_tokens: Completion cap override (defaults to CHAT_MAX_TOKENS)

    Returns:
        ChatOpenAI instance configured with API key and model
    """
    settings = get_settings()

    return ChatOpenAI(
        api_key=settings.OPENAI_API_KEY,
        model=model or settings.CHAT_MODEL,
        temperature=settings.CHAT_TEMPERATURE if temperature is None else temperature,
        max_tokens=max_tokens or settings.CHAT_MAX_TOKENS,
    )
