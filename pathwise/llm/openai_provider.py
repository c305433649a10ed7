"""
OpenAI provider implementation.

Works against api.openai.com or any OpenAI-compatible inference endpoint
configured through LLM_BASE_URL.
"""
import logging
from typing import Optional, Dict
from openai import OpenAI, OpenAIError

from pathwise.core import config
from pathwise.llm.provider import LLMProvider, LLMResponse, LLMError

logger = logging.getLogger(__name__)


class OpenAIProvider(LLMProvider):
    """OpenAI provider using official OpenAI SDK."""

    def __init__(self, api_key: Optional[str] = None, base_url: Optional[str] = None, default_model: Optional[str] = None):
        self.api_key = api_key or config.OPENAI_API_KEY
        if not self.api_key:
            raise ValueError("OPENAI_API_KEY not configured")
        self.default_model = default_model or config.LLM_MODEL
        self.client = OpenAI(api_key=self.api_key, base_url=base_url or config.LLM_BASE_URL)
        logger.info(f"OpenAI provider initialized (model={self.default_model})")

    def chat(
        self,
        messages: list[Dict[str, str]],
        model: Optional[str] = None,
        temperature: float = 0.7,
        max_tokens: Optional[int] = None,
        **kwargs
    ) -> LLMResponse:
        """Generate a chat completion."""
        model = model or self.default_model
        try:
            response = self.client.chat.completions.create(
                model=model,
                messages=messages,
                temperature=temperature,
                max_tokens=max_tokens or 4000,
                **kwargs
            )
        except OpenAIError as e:
            logger.error(f"LLM API error: {type(e).__name__}: {e}")
            raise LLMError(f"AI request failed: {e}") from e

        if not response.choices:
            raise LLMError("AI response contained no choices")

        content = response.choices[0].message.content or ""
        usage = getattr(response, "usage", None)
        return LLMResponse(
            content=content,
            tokens_in=getattr(usage, "prompt_tokens", 0) or 0,
            tokens_out=getattr(usage, "completion_tokens", 0) or 0,
            model=model,
        )
