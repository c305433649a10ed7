"""
Resolves the configured LLM provider, or None when AI is not configured.
"""
import logging
from typing import Optional

from pathwise.core import config
from pathwise.llm.provider import LLMProvider

logger = logging.getLogger(__name__)

_provider: Optional[LLMProvider] = None
_initialized = False


def get_llm_provider() -> Optional[LLMProvider]:
    """
    Return the process-wide provider, creating it on first use.

    Returns None if OPENAI_API_KEY is not set; callers then take their
    rule-based path.
    """
    global _provider, _initialized
    if _initialized:
        return _provider

    _initialized = True
    if not config.OPENAI_API_KEY:
        logger.info("OPENAI_API_KEY not configured - using rule-based analysis")
        return None

    try:
        from pathwise.llm.openai_provider import OpenAIProvider
        _provider = OpenAIProvider()
    except Exception as e:
        logger.warning(f"Failed to initialize LLM provider: {e}, falling back to rule-based")
        _provider = None
    return _provider


def set_llm_provider(provider: Optional[LLMProvider]) -> None:
    """Install a provider explicitly (used by tests and scripts)."""
    global _provider, _initialized
    _provider = provider
    _initialized = True
