"""
Anthropic client implementation for reply classification.

Uses the official anthropic SDK (AsyncAnthropic, Messages API). Supports:
- Per-call credentials (platform, org/BYOK or app key)
- A memoized client for the platform-tier key
- Mapping of SDK errors to LLMClientError subclasses
- Token usage and latency metrics

SDK retries are disabled; a failed call surfaces once.
"""

import hashlib
import time
from typing import Any, Callable, Optional

import anthropic
from anthropic import AsyncAnthropic
import structlog

from reply_qualification.llm.base_client import BaseLLMClient
from reply_qualification.llm.exceptions import (
    LLMAuthenticationError,
    LLMClientError,
    LLMConnectionError,
    LLMGenerationError,
    LLMRateLimitError,
    LLMTimeoutError,
)
from reply_qualification.models.credential_models import ResolvedCredential
from reply_qualification.models.enums import SourceTier
from reply_qualification.models.llm_models import LLMCompletion
from reply_qualification.monitoring.metrics import llm_latency_seconds, llm_tokens_total


logger = structlog.get_logger(__name__)


def _key_digest(api_key: str) -> str:
    return hashlib.sha256(api_key.encode("utf-8")).hexdigest()


class AnthropicClient(BaseLLMClient):
    """
    Anthropic Messages API client.

    Platform-tier calls reuse one AsyncAnthropic instance as long as the
    platform key does not change. Org and app keys get a fresh SDK client
    per call, closed once the call returns.
    """

    def __init__(
        self,
        model: str = "claude-3-haiku-20240307",
        max_tokens: int = 1024,
        timeout: Optional[float] = None,
        client_factory: Callable[..., AsyncAnthropic] = AsyncAnthropic,
    ):
        """
        Initialize Anthropic client.

        Args:
            model: Anthropic model name
            max_tokens: max_tokens sent with every request
            timeout: Request timeout in seconds (None keeps the SDK default)
            client_factory: Callable building SDK clients (used by tests)
        """
        super().__init__(model, max_tokens)
        self.timeout = timeout
        self._client_factory = client_factory
        self._platform_client: Optional[AsyncAnthropic] = None
        self._platform_key_digest: Optional[str] = None

    def _build_client(self, api_key: str) -> AsyncAnthropic:
        kwargs: dict[str, Any] = {"api_key": api_key, "max_retries": 0}
        if self.timeout is not None:
            kwargs["timeout"] = self.timeout
        return self._client_factory(**kwargs)

    async def _platform_client_for(self, api_key: str) -> AsyncAnthropic:
        digest = _key_digest(api_key)
        if self._platform_client is None or self._platform_key_digest != digest:
            if self._platform_client is not None:
                await self._platform_client.close()
                logger.info("Platform key changed, closed previous Anthropic client")
            self._platform_client = self._build_client(api_key)
            self._platform_key_digest = digest
            logger.debug("Created platform Anthropic client")
        return self._platform_client

    async def complete(
        self,
        credential: ResolvedCredential,
        system_prompt: str,
        user_prompt: str,
    ) -> LLMCompletion:
        """
        Call POST /v1/messages with one user turn.

        The first text block of the reply is returned as content.
        """
        api_key = credential.api_key.get_secret_value()
        memoized = credential.source_tier == SourceTier.PLATFORM
        client = await self._platform_client_for(api_key) if memoized else self._build_client(api_key)

        logger.info(
            "Sending classification request to Anthropic",
            model=self.model,
            source_tier=credential.source_tier.value,
            prompt_length=len(user_prompt),
            max_tokens=self.max_tokens,
        )

        start_time = time.time()
        try:
            message = await client.messages.create(
                model=self.model,
                max_tokens=self.max_tokens,
                system=system_prompt,
                messages=[{"role": "user", "content": user_prompt}],
            )
        except anthropic.APIError as e:
            latency_s = time.time() - start_time
            llm_latency_seconds.labels(model=self.model, success="false").observe(latency_s)
            raise self._map_error(e) from e
        finally:
            if not memoized:
                await client.close()

        latency_ms = int((time.time() - start_time) * 1000)
        content = next(
            (block.text for block in message.content if getattr(block, "type", None) == "text"),
            "",
        )
        input_tokens = message.usage.input_tokens
        output_tokens = message.usage.output_tokens

        logger.info(
            "Anthropic classification successful",
            model=message.model,
            latency_ms=latency_ms,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            stop_reason=message.stop_reason,
            source_tier=credential.source_tier.value,
        )

        llm_latency_seconds.labels(model=self.model, success="true").observe(latency_ms / 1000.0)
        llm_tokens_total.labels(
            model=self.model, direction="input", source_tier=credential.source_tier.value
        ).inc(input_tokens)
        llm_tokens_total.labels(
            model=self.model, direction="output", source_tier=credential.source_tier.value
        ).inc(output_tokens)

        return LLMCompletion(
            content=content,
            model=self.model,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            stop_reason=message.stop_reason,
            latency_ms=latency_ms,
            raw_response=message.model_dump(mode="json"),
        )

    def _map_error(self, error: anthropic.APIError) -> LLMClientError:
        # APITimeoutError subclasses APIConnectionError, so it is checked first
        if isinstance(error, anthropic.APITimeoutError):
            logger.warning("Anthropic request timeout", model=self.model, timeout=self.timeout)
            return LLMTimeoutError(
                "Anthropic request timed out",
                details={"model": self.model, "timeout": self.timeout},
            )
        if isinstance(error, anthropic.APIConnectionError):
            logger.warning("Anthropic network error", model=self.model, error=str(error))
            return LLMConnectionError(
                f"Network error: {error}",
                details={"model": self.model, "error_type": type(error).__name__},
            )

        status_code = getattr(error, "status_code", None)
        details = {"model": self.model, "status": status_code}
        logger.error(
            "Anthropic API error",
            model=self.model,
            status_code=status_code,
            error_type=type(error).__name__,
        )

        if isinstance(error, anthropic.RateLimitError):
            return LLMRateLimitError("Anthropic rate limit exceeded", details=details)
        if isinstance(error, (anthropic.AuthenticationError, anthropic.PermissionDeniedError)):
            return LLMAuthenticationError("Anthropic rejected the API key", details=details)
        return LLMGenerationError(f"Anthropic API error: {status_code}", details=details)

    async def close(self):
        """Close the memoized platform client."""
        if self._platform_client is not None:
            await self._platform_client.close()
            self._platform_client = None
            self._platform_key_digest = None
            logger.debug("Closed platform Anthropic client")
