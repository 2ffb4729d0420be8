"""
Tests for location cost estimation.

The remote estimator is exercised against a fake chat-completions client,
so nothing here touches the network.
"""

import asyncio
import json
import pytest
from decimal import Decimal
from types import SimpleNamespace

import httpx
from openai import APIConnectionError

from homecost.config import Settings
from homecost.mortgage.errors import EstimationUnavailableError
from homecost.mortgage.estimators import (
    HeuristicCostEstimator,
    RemoteCostEstimator,
    build_cost_estimator,
    extract_zip_code,
    looks_like_attached_home,
)
from homecost.mortgage.inputs import PropertyInput


HOUSE = PropertyInput(address="123 Main St, Austin, TX 78701", asking_price=Decimal("300000"))
CONDO = PropertyInput(address="500 Lake Dr Unit 4B, Chicago, IL 60611-1234", asking_price=Decimal("300000"))


class FakeCompletions:
    """Stands in for client.chat.completions."""

    def __init__(self, content=None, error=None, delay=0):
        self.content = content
        self.error = error
        self.delay = delay
        self.calls = []

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error:
            raise self.error
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def fake_client(**kwargs):
    completions = FakeCompletions(**kwargs)
    return SimpleNamespace(chat=SimpleNamespace(completions=completions)), completions


def run(coro):
    return asyncio.run(coro)


class TestZipCodeExtraction:
    """Test suite for ZIP code parsing."""

    def test_five_digit(self):
        assert extract_zip_code("123 Main St, Austin, TX 78701") == "78701"

    def test_zip_plus_four(self):
        assert extract_zip_code("1 Loop Rd, Chicago IL 60611-1234") == "60611-1234"

    def test_last_match_wins_over_house_number(self):
        assert extract_zip_code("12345 Ranch Rd, Austin TX 78738") == "78738"

    def test_missing(self):
        assert extract_zip_code("123 Main St, Austin") is None
        assert extract_zip_code("") is None


class TestHeuristicEstimator:
    """Test suite for the flat-rate estimator."""

    def test_property_tax_without_homestead(self):
        costs = run(HeuristicCostEstimator().estimate(HOUSE, False))
        assert costs.property_taxes == Decimal("300.00")

    def test_property_tax_with_homestead(self):
        costs = run(HeuristicCostEstimator().estimate(HOUSE, True))
        assert costs.property_taxes == Decimal("200.00")

    def test_single_family_defaults(self):
        costs = run(HeuristicCostEstimator().estimate(HOUSE, False))
        assert costs.hoa == Decimal("0.00")
        assert costs.homeowners_insurance == Decimal("150.00")
        assert costs.flood_insurance == Decimal("0.00")
        assert costs.other == Decimal("50.00")

    def test_condo_gets_hoa(self):
        costs = run(HeuristicCostEstimator().estimate(CONDO, False))
        assert costs.hoa == Decimal("150.00")

    @pytest.mark.parametrize("address,expected", [
        ("88 Bay St Condo 12, Miami FL", True),
        ("9 Elm Townhouse Ct, Plano TX", True),
        ("77 Pine St #305, Denver CO", True),
        ("4 Oak Ln, Boise ID", False),
        ("100 Community Blvd, Reno NV", False),
    ])
    def test_attached_home_detection(self, address, expected):
        assert looks_like_attached_home(address) is expected


class TestRemoteEstimator:
    """Test suite for the remote estimator and its fallbacks."""

    def test_uses_service_values(self):
        content = json.dumps({
            "propertyTaxes": 412.5,
            "hoa": 85,
            "homeownersInsurance": "133.333",
            "floodInsurance": 20,
        })
        client, completions = fake_client(content=content)
        estimator = RemoteCostEstimator(client, model="test-model", timeout=5)

        costs = run(estimator.estimate(HOUSE, False))

        assert costs.property_taxes == Decimal("412.50")
        assert costs.hoa == Decimal("85.00")
        assert costs.homeowners_insurance == Decimal("133.33")
        assert costs.flood_insurance == Decimal("20.00")
        # "other" is never delegated
        assert costs.other == Decimal("50.00")

        request = completions.calls[0]
        assert request["model"] == "test-model"
        assert request["response_format"] == {"type": "json_object"}
        prompt = request["messages"][-1]["content"]
        assert "78701" in prompt
        assert "300,000.00" in prompt
        assert "Homestead exemption: No" in prompt

    def test_missing_and_invalid_fields_fall_back_individually(self):
        content = json.dumps({
            "propertyTaxes": "lots",
            "hoa": -10,
            "homeownersInsurance": 99,
        })
        client, _ = fake_client(content=content)
        estimator = RemoteCostEstimator(client, model="m", timeout=5)

        costs = run(estimator.estimate(HOUSE, True))

        assert costs.property_taxes == Decimal("200.00")
        assert costs.hoa == Decimal("0.00")
        assert costs.homeowners_insurance == Decimal("99.00")
        assert costs.flood_insurance == Decimal("0.00")

    def test_out_of_range_value_falls_back(self):
        content = json.dumps({"propertyTaxes": 1e40, "hoa": 0, "homeownersInsurance": 100, "floodInsurance": 0})
        client, _ = fake_client(content=content)

        costs = run(RemoteCostEstimator(client, model="m").estimate(HOUSE, False))

        assert costs.property_taxes == Decimal("300.00")
        assert costs.homeowners_insurance == Decimal("100.00")

    def test_boolean_values_are_not_numbers(self):
        client, _ = fake_client(content=json.dumps({"propertyTaxes": True, "hoa": 0,
                                                     "homeownersInsurance": 100, "floodInsurance": 0}))
        costs = run(RemoteCostEstimator(client, model="m").estimate(HOUSE, False))
        assert costs.property_taxes == Decimal("300.00")

    def test_malformed_json_falls_back(self):
        client, _ = fake_client(content="not json at all")
        costs = run(RemoteCostEstimator(client, model="m").estimate(HOUSE, False))
        assert costs == HeuristicCostEstimator().estimate_now(HOUSE, False)

    def test_non_object_json_falls_back(self):
        client, _ = fake_client(content="[1, 2, 3]")
        costs = run(RemoteCostEstimator(client, model="m").estimate(CONDO, False))
        assert costs == HeuristicCostEstimator().estimate_now(CONDO, False)

    def test_timeout_falls_back(self):
        client, _ = fake_client(content="{}", delay=1)
        estimator = RemoteCostEstimator(client, model="m", timeout=0.05)
        costs = run(estimator.estimate(HOUSE, False))
        assert costs.property_taxes == Decimal("300.00")

    def test_transport_error_falls_back(self):
        error = APIConnectionError(request=httpx.Request("POST", "https://example.invalid/v1/chat/completions"))
        client, _ = fake_client(error=error)
        costs = run(RemoteCostEstimator(client, model="m").estimate(HOUSE, False))
        assert costs.homeowners_insurance == Decimal("150.00")

    def test_timeout_without_fallback_raises(self):
        client, _ = fake_client(content="{}", delay=1)
        estimator = RemoteCostEstimator(client, model="m", timeout=0.05, fallback=False)
        with pytest.raises(EstimationUnavailableError):
            run(estimator.estimate(HOUSE, False))

    def test_malformed_without_fallback_raises(self):
        client, _ = fake_client(content="{oops")
        estimator = RemoteCostEstimator(client, model="m", fallback=False)
        with pytest.raises(EstimationUnavailableError):
            run(estimator.estimate(HOUSE, False))


class TestBuildCostEstimator:
    """Test suite for strategy selection."""

    def make_settings(self, **overrides):
        settings = Settings()
        for key, value in overrides.items():
            setattr(settings, key, value)
        return settings

    def test_heuristic(self):
        estimator = build_cost_estimator(self.make_settings(ESTIMATION_STRATEGY="heuristic"))
        assert isinstance(estimator, HeuristicCostEstimator)

    def test_remote_with_credentials(self):
        estimator = build_cost_estimator(self.make_settings(
            ESTIMATION_STRATEGY="remote",
            OPENAI_API_KEY="sk-test",
            OPENAI_BASE_URL="http://localhost:9999/v1",
            ESTIMATION_TIMEOUT_SECONDS=15.0,
            ESTIMATION_FALLBACK=False,
        ))
        assert isinstance(estimator, RemoteCostEstimator)
        assert estimator.timeout == 15.0
        assert estimator.fallback is False

    def test_remote_without_key_uses_heuristic(self):
        estimator = build_cost_estimator(self.make_settings(ESTIMATION_STRATEGY="remote", OPENAI_API_KEY=""))
        assert isinstance(estimator, HeuristicCostEstimator)

    def test_unknown_strategy(self):
        with pytest.raises(ValueError):
            build_cost_estimator(self.make_settings(ESTIMATION_STRATEGY="crystal-ball"))
