"""
Abstract base client for LLM inference.

Defines the interface that the classification invoker relies on. The
credential is passed per call because it is resolved per request.
"""

from abc import ABC, abstractmethod

import structlog

from reply_qualification.models.credential_models import ResolvedCredential
from reply_qualification.models.llm_models import LLMCompletion


logger = structlog.get_logger(__name__)


class BaseLLMClient(ABC):
    """
    Abstract base class for LLM provider clients.

    Responsibilities:
    - Send one completion request with the given credential
    - Extract text and token usage into LLMCompletion
    - Map provider errors to LLMClientError subclasses

    Does NOT handle:
    - Prompt construction (that's PromptBuilder's job)
    - Output parsing (that's the response parser's job)
    - Retries (none are performed)
    """

    def __init__(self, model: str, max_tokens: int = 1024):
        """
        Initialize base client.

        Args:
            model: Model name used for every call
            max_tokens: Upper bound on generated tokens
        """
        self.model = model
        self.max_tokens = max_tokens

        logger.info(
            "Initialized LLM client",
            client_class=self.__class__.__name__,
            model=model,
            max_tokens=max_tokens,
        )

    @abstractmethod
    async def complete(
        self,
        credential: ResolvedCredential,
        system_prompt: str,
        user_prompt: str,
    ) -> LLMCompletion:
        """
        Generate a completion.

        Args:
            credential: Resolved provider API key and its tier
            system_prompt: Fixed system instruction
            user_prompt: Single user turn

        Returns:
            LLMCompletion with text and token usage

        Raises:
            LLMConnectionError: Network errors
            LLMTimeoutError: Call exceeded timeout
            LLMRateLimitError: Provider rate limit
            LLMAuthenticationError: Credential rejected
            LLMGenerationError: Any other provider error
        """
        pass

    async def close(self):
        """
        Close client connections and cleanup resources.

        Default implementation does nothing.
        """
        logger.debug("Closing LLM client", client_class=self.__class__.__name__)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(model={self.model}, max_tokens={self.max_tokens})"
