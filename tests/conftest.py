"""Shared test fixtures."""

from pathlib import Path

import pytest

from tests.payloads import FakeClient, scenario_responses

# Test fixture config directory with a synthetic connection.yaml
FIXTURE_CONFIG_DIR = Path(__file__).parent / "fixtures" / "config"


@pytest.fixture
def responses():
    """Endpoint → payload map for a one-budget run."""
    return scenario_responses()


@pytest.fixture
def client(responses):
    return FakeClient(responses)
