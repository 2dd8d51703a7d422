"""
Per-model token prices and run-service cost names.

Prices are USD per million tokens. Cost is computed without rounding;
storage keeps 6 fractional digits.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class ModelPricing:
    model: str
    input_per_million: float
    output_per_million: float
    cost_name_prefix: str

    @property
    def input_cost_name(self) -> str:
        return f"{self.cost_name_prefix}-input"

    @property
    def output_cost_name(self) -> str:
        return f"{self.cost_name_prefix}-output"

    def cost_usd(self, input_tokens: int, output_tokens: int) -> float:
        return (
            input_tokens * self.input_per_million
            + output_tokens * self.output_per_million
        ) / 1_000_000


# Cost name prefixes must match the cost names registered in the runs service.
MODEL_PRICING: dict[str, ModelPricing] = {
    "claude-3-haiku-20240307": ModelPricing(
        model="claude-3-haiku-20240307",
        input_per_million=0.25,
        output_per_million=1.25,
        cost_name_prefix="anthropic-haiku-4.5-tokens",
    ),
    "claude-3-5-haiku-20241022": ModelPricing(
        model="claude-3-5-haiku-20241022",
        input_per_million=0.80,
        output_per_million=4.00,
        cost_name_prefix="anthropic-haiku-4.5-tokens",
    ),
    "claude-haiku-4-5": ModelPricing(
        model="claude-haiku-4-5",
        input_per_million=1.00,
        output_per_million=5.00,
        cost_name_prefix="anthropic-haiku-4.5-tokens",
    ),
}


def get_pricing(model: str) -> ModelPricing:
    """
    Look up pricing for a model.

    Dated snapshots (e.g. "claude-haiku-4-5-20251001") match their alias.

    Raises:
        ValueError: No pricing known for the model
    """
    pricing = MODEL_PRICING.get(model)
    if pricing is not None:
        return pricing
    for alias, candidate in MODEL_PRICING.items():
        if model.startswith(f"{alias}-"):
            return candidate
    raise ValueError(f"No pricing configured for model {model!r}")


def compute_cost_usd(model: str, input_tokens: int, output_tokens: int) -> float:
    return get_pricing(model).cost_usd(input_tokens, output_tokens)
