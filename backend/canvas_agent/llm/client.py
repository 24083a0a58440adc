"""LangChain ChatAnthropic wrapper: the tool-calling reasoning engine."""

from __future__ import annotations

import logging
from typing import Any

from canvas_agent.config import Settings, settings
from canvas_agent.errors import ReasoningEngineUnavailable

logger = logging.getLogger(__name__)


def create_reasoning_engine(tools: list[dict[str, Any]], app_settings: Settings | None = None):
    """Return a chat model bound to ``tools``; anything with ``ainvoke(messages)`` works."""
    app_settings = app_settings or settings
    if not app_settings.anthropic_api_key:
        raise ReasoningEngineUnavailable("Reasoning engine not configured. Set ANTHROPIC_API_KEY in .env")

    from langchain_anthropic import ChatAnthropic

    llm = ChatAnthropic(
        model=app_settings.anthropic_model,
        api_key=app_settings.anthropic_api_key,
        max_tokens=app_settings.anthropic_max_tokens,
        temperature=app_settings.anthropic_temperature,
    )
    logger.debug("Binding %d tools to %s", len(tools), app_settings.anthropic_model)
    return llm.bind_tools(tools)
