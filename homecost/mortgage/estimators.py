"""
Location-dependent cost estimation (property taxes, HOA, insurance, other).

Two strategies share the CostEstimator interface:

- HeuristicCostEstimator: flat national averages, no network access.
- RemoteCostEstimator: asks an OpenAI-compatible chat model for the four
  location-sensitive amounts and falls back to the heuristic value for any
  field it cannot use.

build_cost_estimator picks one from Settings. Callers only ever see the
interface, so tests can hand the calculator a fake.
"""

import asyncio
import json
import re
from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Any, Dict, Optional

from openai import AsyncOpenAI, OpenAIError

from homecost.logging_config import get_logger
from homecost.mortgage.breakdown import LocationCosts
from homecost.mortgage.errors import EstimationUnavailableError
from homecost.mortgage.inputs import PropertyInput
from homecost.mortgage.money import MAX_AMOUNT, ZERO, parse_optional_decimal, to_money

logger = get_logger(__name__)

# Annual property tax as a fraction of price
PROPERTY_TAX_RATE = Decimal("0.012")
HOMESTEAD_PROPERTY_TAX_RATE = Decimal("0.008")

# Flat monthly estimates
DEFAULT_HOA = Decimal("150.00")
DEFAULT_HOMEOWNERS_INSURANCE = Decimal("150.00")
DEFAULT_FLOOD_INSURANCE = ZERO
DEFAULT_OTHER = Decimal("50.00")

ATTACHED_HOME_PATTERN = re.compile(
    r"\b(condo|condominium|townhouse|townhome|unit|apt|apartment)\b|#\s*\w+",
    re.IGNORECASE,
)
ZIP_CODE_PATTERN = re.compile(r"\b\d{5}(?:-\d{4})?\b")

# JSON keys the remote service must return, mapped to LocationCosts fields
REMOTE_FIELDS = {
    "propertyTaxes": "property_taxes",
    "hoa": "hoa",
    "homeownersInsurance": "homeowners_insurance",
    "floodInsurance": "flood_insurance",
}

SYSTEM_PROMPT = (
    "You estimate monthly housing costs for US properties. "
    "Reply with a single JSON object and nothing else."
)


def extract_zip_code(address: str) -> Optional[str]:
    """
    Pull a ZIP or ZIP+4 code out of a free-form address.

    The last match wins, since house numbers can also be five digits.
    """
    matches = ZIP_CODE_PATTERN.findall(address or "")
    return matches[-1] if matches else None


def looks_like_attached_home(address: str) -> bool:
    """True when the address reads like a condo or townhouse (HOA likely)."""
    return bool(ATTACHED_HOME_PATTERN.search(address or ""))


class CostEstimator(ABC):
    """Estimates the location-sensitive monthly costs of a property."""

    @abstractmethod
    async def estimate(self, property_input: PropertyInput, homestead_exemption: bool) -> LocationCosts:
        ...


class HeuristicCostEstimator(CostEstimator):
    async def estimate(self, property_input: PropertyInput, homestead_exemption: bool) -> LocationCosts:
        return self.estimate_now(property_input, homestead_exemption)

    def estimate_now(self, property_input: PropertyInput, homestead_exemption: bool) -> LocationCosts:
        """Synchronous form of estimate(); nothing here ever waits."""
        tax_rate = HOMESTEAD_PROPERTY_TAX_RATE if homestead_exemption else PROPERTY_TAX_RATE
        hoa = DEFAULT_HOA if looks_like_attached_home(property_input.address) else ZERO
        return LocationCosts(
            property_taxes=to_money(property_input.asking_price * tax_rate / 12),
            hoa=hoa,
            homeowners_insurance=DEFAULT_HOMEOWNERS_INSURANCE,
            flood_insurance=DEFAULT_FLOOD_INSURANCE,
            other=DEFAULT_OTHER,
        )


class RemoteCostEstimator(CostEstimator):
    """
    Cost estimator backed by an OpenAI-compatible chat completions API.

    Args:
        client: An AsyncOpenAI (or compatible) client
        model: Chat model name
        timeout: Seconds to wait before cancelling the request
        fallback: On failure, use heuristic values instead of raising
            EstimationUnavailableError
    """

    def __init__(self, client, model: str, timeout: float = 20.0, fallback: bool = True):
        self.client = client
        self.model = model
        self.timeout = timeout
        self.fallback = fallback
        self.heuristic = HeuristicCostEstimator()

    @classmethod
    def from_credentials(
        cls,
        api_key: str,
        base_url: Optional[str] = None,
        model: str = "gpt-4o-mini",
        timeout: float = 20.0,
        fallback: bool = True,
    ) -> "RemoteCostEstimator":
        # Retries would stretch the call past the timeout
        client = AsyncOpenAI(api_key=api_key, base_url=base_url, timeout=timeout, max_retries=0)
        return cls(client, model=model, timeout=timeout, fallback=fallback)

    def build_prompt(self, property_input: PropertyInput, homestead_exemption: bool) -> str:
        zip_code = extract_zip_code(property_input.address) or "unknown"
        return (
            "Estimate the monthly costs of owning this property.\n\n"
            f"Address: {property_input.address}\n"
            f"ZIP code: {zip_code}\n"
            f"Asking price: ${property_input.asking_price:,.2f}\n"
            f"Homestead exemption: {'Yes' if homestead_exemption else 'No'}\n\n"
            "Use typical property tax rates for the location, applying the homestead "
            "reduction if one is claimed. Estimate HOA dues from the property type "
            "(0 if an HOA is unlikely), homeowners insurance for the area, and flood "
            "insurance from the location's flood risk (0 outside flood zones).\n\n"
            "Return ONLY a JSON object with these numeric keys, all monthly USD amounts: "
            "propertyTaxes, hoa, homeownersInsurance, floodInsurance.\n"
            'Example: {"propertyTaxes": 412.5, "hoa": 0, "homeownersInsurance": 140, "floodInsurance": 0}'
        )

    async def _request(self, prompt: str) -> Optional[str]:
        response = await self.client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            response_format={"type": "json_object"},
        )
        if not response.choices:
            return None
        return response.choices[0].message.content

    def _unavailable(self, defaults: LocationCosts, reason: str) -> LocationCosts:
        if not self.fallback:
            logger.error(f"Cost estimation unavailable: {reason}")
            raise EstimationUnavailableError("Cost estimation is temporarily unavailable. Please try again.")
        logger.warning(f"Cost estimation fell back to heuristic values: {reason}")
        return defaults

    @staticmethod
    def _amount(payload: Dict[str, Any], key: str, default: Decimal) -> Decimal:
        value = payload.get(key)
        if isinstance(value, bool) or not isinstance(value, (int, float, str)):
            return default
        number = parse_optional_decimal(value)
        if number is None or number < 0 or number > MAX_AMOUNT:
            return default
        return to_money(number)

    def parse_response(self, content: Optional[str], defaults: LocationCosts) -> LocationCosts:
        """Merge the service's JSON answer over the heuristic defaults, field by field."""
        payload = json.loads(content) if content else {}
        if not isinstance(payload, dict):
            raise ValueError(f"expected a JSON object, got {type(payload).__name__}")

        values = {}
        for key, field in REMOTE_FIELDS.items():
            default = getattr(defaults, field)
            values[field] = self._amount(payload, key, default)
            if key not in payload:
                logger.debug(f"Remote estimate missing '{key}', using {default}")

        return LocationCosts(other=defaults.other, **values)

    async def estimate(self, property_input: PropertyInput, homestead_exemption: bool) -> LocationCosts:
        defaults = self.heuristic.estimate_now(property_input, homestead_exemption)
        prompt = self.build_prompt(property_input, homestead_exemption)

        try:
            content = await asyncio.wait_for(self._request(prompt), timeout=self.timeout)
        except asyncio.TimeoutError:
            return self._unavailable(defaults, f"request timed out after {self.timeout}s")
        except OpenAIError as e:
            return self._unavailable(defaults, f"request failed: {e}")

        try:
            costs = self.parse_response(content, defaults)
        except ValueError as e:
            return self._unavailable(defaults, f"malformed response: {e}")

        logger.info(f"Remote cost estimate received for {property_input.address}")
        return costs


def build_cost_estimator(settings) -> CostEstimator:
    """
    Create the configured estimator.

    Args:
        settings: A homecost.config.Settings (or anything with the same attributes)

    Raises:
        ValueError: for an unknown ESTIMATION_STRATEGY
    """
    strategy = settings.ESTIMATION_STRATEGY
    if strategy == "heuristic":
        return HeuristicCostEstimator()
    if strategy == "remote":
        if not settings.OPENAI_API_KEY:
            logger.warning("ESTIMATION_STRATEGY is 'remote' but OPENAI_API_KEY is not set; using heuristic estimates")
            return HeuristicCostEstimator()
        return RemoteCostEstimator.from_credentials(
            api_key=settings.OPENAI_API_KEY,
            base_url=settings.OPENAI_BASE_URL,
            model=settings.ESTIMATION_MODEL,
            timeout=settings.ESTIMATION_TIMEOUT_SECONDS,
            fallback=settings.ESTIMATION_FALLBACK,
        )
    raise ValueError(f"Unknown ESTIMATION_STRATEGY: {strategy!r}")
