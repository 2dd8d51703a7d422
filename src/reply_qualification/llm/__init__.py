"""
LLM client abstraction and implementations.

Components:
- BaseLLMClient: Abstract base class for LLM clients
- AnthropicClient: Anthropic Messages API client
- PromptBuilder: Constructs system/user prompts from EmailContent
- pricing: Per-model token prices and cost names
- text_utils: HTML stripping and body selection
- exceptions: LLM-specific exceptions
"""

from reply_qualification.llm.anthropic_client import AnthropicClient
from reply_qualification.llm.base_client import BaseLLMClient
from reply_qualification.llm.exceptions import (
    LLMAuthenticationError,
    LLMClientError,
    LLMConnectionError,
    LLMGenerationError,
    LLMRateLimitError,
    LLMTimeoutError,
)
from reply_qualification.llm.pricing import ModelPricing, compute_cost_usd, get_pricing
from reply_qualification.llm.prompt_builder import PromptBuilder

__all__ = [
    "AnthropicClient",
    "BaseLLMClient",
    "PromptBuilder",
    "ModelPricing",
    "compute_cost_usd",
    "get_pricing",
    "LLMAuthenticationError",
    "LLMClientError",
    "LLMConnectionError",
    "LLMGenerationError",
    "LLMRateLimitError",
    "LLMTimeoutError",
]
