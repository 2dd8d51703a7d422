"""
Qualification invoker: one classification call per email reply.

Provider call failures propagate as LLMClientError subclasses. Only the
parsing of a successful reply is tolerant (see response_parser).
"""

import structlog

from reply_qualification.llm.base_client import BaseLLMClient
from reply_qualification.llm.pricing import compute_cost_usd
from reply_qualification.llm.prompt_builder import PromptBuilder
from reply_qualification.models.credential_models import ResolvedCredential
from reply_qualification.models.input_models import EmailContent
from reply_qualification.models.output_models import QualificationResult
from reply_qualification.monitoring.metrics import llm_cost_usd_total, qualifications_total
from reply_qualification.qualification.response_parser import parse_classification_output


logger = structlog.get_logger(__name__)


class QualificationInvoker:
    """
    Turns email content plus a resolved credential into a QualificationResult.

    The result carries the credential's source tier so cost items recorded
    later use the tier that actually paid for the tokens.
    """

    def __init__(self, llm_client: BaseLLMClient, prompt_builder: PromptBuilder):
        self.llm_client = llm_client
        self.prompt_builder = prompt_builder

    async def qualify(
        self,
        email: EmailContent,
        credential: ResolvedCredential,
    ) -> QualificationResult:
        """
        Classify one email reply.

        Args:
            email: Subject and body of the reply
            credential: Provider key and the tier that supplied it

        Returns:
            QualificationResult (fallback classification if the output is malformed)

        Raises:
            LLMClientError: The provider call itself failed
        """
        completion = await self.llm_client.complete(
            credential,
            self.prompt_builder.build_system_prompt(),
            self.prompt_builder.build_user_prompt(email),
        )

        judgement = parse_classification_output(completion.content)
        cost_usd = compute_cost_usd(
            completion.model, completion.input_tokens, completion.output_tokens
        )

        tier = credential.source_tier.value
        qualifications_total.labels(
            classification=judgement.classification.value, source_tier=tier
        ).inc()
        llm_cost_usd_total.labels(model=completion.model, source_tier=tier).inc(cost_usd)

        logger.info(
            "Reply qualified",
            classification=judgement.classification.value,
            confidence=judgement.confidence,
            input_tokens=completion.input_tokens,
            output_tokens=completion.output_tokens,
            cost_usd=cost_usd,
            source_tier=tier,
        )

        return QualificationResult(
            classification=judgement.classification,
            confidence=judgement.confidence,
            reasoning=judgement.reasoning,
            suggested_action=judgement.suggested_action,
            extracted_details=judgement.extracted_details,
            model=completion.model,
            input_tokens=completion.input_tokens,
            output_tokens=completion.output_tokens,
            cost_usd=cost_usd,
            source_tier=credential.source_tier,
            raw_provider_response=completion.raw_response,
        )
