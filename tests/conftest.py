"""Shared fakes for the model and the Apify scraper."""

import copy

import pytest


class FakeLLM:
    """Returns canned JSON objects in order and records every prompt it receives."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    def complete_json(self, system, user, temperature):
        self.calls.append({"system": system, "user": user, "temperature": temperature})
        if not self.responses:
            raise AssertionError("FakeLLM ran out of responses")
        response = self.responses.pop(0) if len(self.responses) > 1 else self.responses[0]
        if isinstance(response, Exception):
            raise response
        return copy.deepcopy(response)


class FakeScraper:
    """Answers actor runs from a function of (actor_id, run_input)."""

    def __init__(self, handler=None):
        self.handler = handler or (lambda actor_id, run_input: [])
        self.calls = []

    def run(self, actor_id, run_input, timeout):
        self.calls.append({"actor_id": actor_id, "run_input": copy.deepcopy(run_input), "timeout": timeout})
        return self.handler(actor_id, run_input)


@pytest.fixture(autouse=True)
def no_credentials_from_env(monkeypatch):
    for name in ("OPENAI_API_KEY", "APIFY_API_TOKEN", "ENRICHLAYER_API_KEY", "JOB_AGGREGATOR_CONFIG"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def fake_llm():
    return FakeLLM


@pytest.fixture
def fake_scraper():
    return FakeScraper
