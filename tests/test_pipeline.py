"""Tests for the per-platform pipeline and the concurrent search session."""

import threading

import pytest

from job_aggregator import pipeline
from job_aggregator.config import AppConfig
from job_aggregator.errors import GenerationError, InputError, UpstreamAuthError, UpstreamTimeout
from job_aggregator.jobs import behance_jobs, indeed_jobs, upwork_jobs
from job_aggregator.profile.models import Profile
from job_aggregator.queries import behance, freelance, indeed, linkedin, source_selector, upwork

MODEL_RESPONSES = {
    linkedin.SYSTEM_PROMPT: {"queries": [{"params": {"titleSearch": ["Designer"]}}]},
    upwork.SYSTEM_PROMPT: {"queries": [{"params": {"keywords": "figma", "experience_level": ["expert"]}}]},
    indeed.SYSTEM_PROMPT: {"search_terms": ["designer"], "posted_since": "3 days"},
    behance.SYSTEM_PROMPT: {"keyword": "brand designer"},
    freelance.SYSTEM_PROMPT: {"queries": ["logo design"]},
    source_selector.SYSTEM_PROMPT: {"behance": True, "linkedin": False, "indeed": False, "reasoning": "creative"},
}

RAW_RESULTS = {
    behance_jobs.ACTOR_ID: [{"job_id": 1, "title": "Brand Designer", "job_status": "ACTIVE"}],
    indeed_jobs.ACTOR_ID: [{"platform_url": "https://www.indeed.com/viewjob?jk=1", "title": "Designer"}],
}


class RoutingLLM:
    """Answers each generator and the selector by matching its system prompt."""

    def __init__(self, overrides=None):
        self.responses = dict(MODEL_RESPONSES)
        self.responses.update(overrides or {})
        self.calls = []
        self._lock = threading.Lock()

    def complete_json(self, system, user, temperature):
        with self._lock:
            self.calls.append(system)
        response = self.responses[system]
        if isinstance(response, Exception):
            raise response
        return dict(response)


def raw_results(actor_id, run_input):
    return [dict(item) for item in RAW_RESULTS.get(actor_id, [])]


@pytest.fixture
def config():
    return AppConfig()


class TestDispatch:
    def test_unknown_platform(self, config):
        with pytest.raises(InputError):
            pipeline.generate_query("monster", "designer", None, RoutingLLM(), config)
        with pytest.raises(InputError):
            pipeline.transform_results("monster", [])

    def test_generate_query_always_returns_list(self, config):
        for name in pipeline.PLATFORMS:
            queries = pipeline.generate_query(name, "designer", None, RoutingLLM(), config)
            assert isinstance(queries, list)
            assert queries[0].platform == name

    def test_linkedin_query_count_from_config(self, config, fake_llm):
        config.search.linkedin_queries = 3
        llm = fake_llm({"queries": [{"params": {}}] * 3})
        assert len(pipeline.generate_query("linkedin", "designer", None, llm, config)) == 3
        assert "Generate 3" in llm.calls[0]["user"]

    def test_search_uses_platform_actor_and_timeout(self, config, fake_scraper):
        scraper = fake_scraper(raw_results)
        config.search.timeouts["behance"] = 45
        results = pipeline.search_with_retry("behance", {"keyword": "x", "maxitems": 30}, scraper, config)
        assert results == RAW_RESULTS[behance_jobs.ACTOR_ID]
        assert scraper.calls[0]["actor_id"] == behance_jobs.ACTOR_ID
        assert scraper.calls[0]["timeout"] == 45

    def test_search_keeps_fixed_fields_while_relaxing(self, config, fake_scraper):
        scraper = fake_scraper()
        params = pipeline.generate_query("upwork", "figma designer", None, RoutingLLM(), config)[0].params
        assert pipeline.search_with_retry("upwork", params, scraper, config) == []
        assert len(scraper.calls) >= 2
        assert "experience_level" in scraper.calls[0]["run_input"]
        assert "experience_level" not in scraper.calls[-1]["run_input"]
        assert all(call["run_input"]["limit"] == 50 for call in scraper.calls)
        assert scraper.calls[0]["actor_id"] == upwork_jobs.ACTOR_ID

    def test_run_platform(self, config, fake_scraper):
        records = pipeline.run_platform("indeed", "designer", None, RoutingLLM(), fake_scraper(raw_results), config)
        assert [r.id for r in records] == ["1"]


class TestSearchSession:
    def test_merges_all_platforms(self, config, fake_scraper):
        session = pipeline.SearchSession(config, RoutingLLM(), fake_scraper(raw_results))
        seen = []
        outcome = session.search("designer", platforms=["behance", "indeed"], on_results=lambda p, r: seen.append(p))

        assert sorted(r.source for r in outcome.results) == ["behance", "indeed"]
        assert sorted(seen) == ["behance", "indeed"]
        assert outcome.errors == {}
        assert outcome.stale is False

    def test_failure_is_isolated(self, config, fake_scraper):
        def handler(actor_id, run_input):
            if actor_id == indeed_jobs.ACTOR_ID:
                raise UpstreamAuthError("bad token")
            return raw_results(actor_id, run_input)

        llm = RoutingLLM({freelance.SYSTEM_PROMPT: GenerationError("No response from AI")})
        session = pipeline.SearchSession(config, llm, fake_scraper(handler))
        outcome = session.search("designer", platforms=["behance", "indeed", "freelance"])

        assert [r.source for r in outcome.results] == ["behance"]
        assert set(outcome.errors) == {"indeed", "freelance"}
        assert outcome.errors["freelance"] == "No response from AI"

    def test_timeout_is_zero_results_not_error(self, config, fake_scraper):
        def handler(actor_id, run_input):
            raise UpstreamTimeout("slow")

        session = pipeline.SearchSession(config, RoutingLLM(), fake_scraper(handler))
        outcome = session.search("designer", platforms=["indeed"])
        assert outcome.results == []
        assert outcome.errors == {}

    def test_auto_select(self, config, fake_scraper):
        session = pipeline.SearchSession(config, RoutingLLM(), fake_scraper(raw_results))
        outcome = session.search("brand designer", auto_select=True)
        assert outcome.selection.selected == ["behance"]
        assert [r.source for r in outcome.results] == ["behance"]

    def test_selection_failure_searches_everything(self, config, fake_scraper):
        llm = RoutingLLM({source_selector.SYSTEM_PROMPT: GenerationError("bad json")})
        scraper = fake_scraper(raw_results)
        outcome = pipeline.SearchSession(config, llm, scraper).search("designer", auto_select=True)
        assert outcome.selection is None
        assert {call["actor_id"] for call in scraper.calls} >= {behance_jobs.ACTOR_ID, indeed_jobs.ACTOR_ID}
        assert len({call["actor_id"] for call in scraper.calls}) == len(pipeline.PLATFORMS)

    def test_profile_summary_reaches_generators(self, config, fake_scraper):
        llm = RoutingLLM()
        user_prompts = []
        answer = llm.complete_json

        def spy(system, user, temperature):
            user_prompts.append(user)
            return answer(system, user, temperature)

        llm.complete_json = spy
        session = pipeline.SearchSession(config, llm, fake_scraper(raw_results))
        session.search("designer", profile=Profile(skills=["Figma"]), platforms=["behance"])
        assert "Figma" in user_prompts[0]

    def test_empty_query_rejected(self, config, fake_scraper):
        session = pipeline.SearchSession(config, RoutingLLM(), fake_scraper())
        with pytest.raises(InputError):
            session.search("  ")
        assert session.generation == 0

    def test_unknown_platform_rejected(self, config, fake_scraper):
        session = pipeline.SearchSession(config, RoutingLLM(), fake_scraper())
        with pytest.raises(InputError):
            session.search("designer", platforms=["behance", "monster"])

    def test_superseded_search_is_discarded(self, config, fake_scraper):
        entered = threading.Event()
        release = threading.Event()
        calls = []

        def handler(actor_id, run_input):
            calls.append(actor_id)
            if len(calls) == 1:
                entered.set()
                assert release.wait(5)
            return raw_results(actor_id, run_input)

        session = pipeline.SearchSession(config, RoutingLLM(), fake_scraper(handler))
        first = {}

        def run_first():
            first["outcome"] = session.search("designer", platforms=["behance"])

        thread = threading.Thread(target=run_first)
        thread.start()
        assert entered.wait(5)

        second = session.search("designer", platforms=["behance"])
        release.set()
        thread.join(5)

        assert second.generation == 2
        assert len(second.results) == 1
        assert second.stale is False
        assert first["outcome"].generation == 1
        assert first["outcome"].stale is True
        assert first["outcome"].results == []


class TestSearchSessions:
    def test_same_client_shares_a_session(self, config, fake_scraper):
        sessions = pipeline.SearchSessions(config, RoutingLLM(), fake_scraper())
        assert sessions.for_client("alice") is sessions.for_client("alice")
        assert sessions.for_client("alice") is not sessions.for_client("bob")
        assert len(sessions) == 2

    def test_clients_do_not_supersede_each_other(self, config, fake_scraper):
        sessions = pipeline.SearchSessions(config, RoutingLLM(), fake_scraper(raw_results))
        sessions.for_client("alice").search("designer", platforms=["behance"])
        sessions.for_client("bob").search("designer", platforms=["behance"])
        assert sessions.for_client("alice").is_current(1)
        assert sessions.for_client("bob").is_current(1)

    def test_anonymous_requests_get_fresh_sessions(self, config, fake_scraper):
        sessions = pipeline.SearchSessions(config, RoutingLLM(), fake_scraper())
        assert sessions.for_client(None) is not sessions.for_client(None)
        assert sessions.for_client("") is not sessions.for_client("")
        assert len(sessions) == 0

    def test_least_recently_used_client_dropped(self, config, fake_scraper):
        sessions = pipeline.SearchSessions(config, RoutingLLM(), fake_scraper(), max_clients=2)
        alice = sessions.for_client("alice")
        sessions.for_client("bob")
        sessions.for_client("alice")
        sessions.for_client("carol")
        assert len(sessions) == 2
        assert sessions.for_client("alice") is alice
