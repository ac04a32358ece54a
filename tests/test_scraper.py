"""Tests for the Apify actor runner."""

from unittest.mock import MagicMock

import pytest
import requests

from job_aggregator.errors import UpstreamAuthError, UpstreamFailure, UpstreamTimeout
from job_aggregator.jobs.scraper import ApifyScraper


def make_response(status=200, body=None, text=""):
    response = MagicMock()
    response.status_code = status
    response.text = text
    response.json.return_value = body
    return response


@pytest.fixture
def session():
    return MagicMock()


class TestApifyScraper:
    def test_posts_to_run_sync_endpoint(self, session):
        session.post.return_value = make_response(body=[{"id": 1}, "junk"])
        scraper = ApifyScraper("token-123", session=session)

        items = scraper.run("fasty_dev/upwork-job-scraper", {"keywords": "react"}, timeout=120)

        assert items == [{"id": 1}]
        url = session.post.call_args.args[0]
        kwargs = session.post.call_args.kwargs
        assert url == "https://api.apify.com/v2/acts/fasty_dev~upwork-job-scraper/run-sync-get-dataset-items"
        assert kwargs["json"] == {"keywords": "react"}
        assert kwargs["headers"]["Authorization"] == "Bearer token-123"
        assert kwargs["params"]["timeout"] == 120
        assert kwargs["timeout"] > 120

    def test_missing_token(self, session):
        with pytest.raises(UpstreamAuthError):
            ApifyScraper("", session=session).run("a/b", {}, timeout=10)
        session.post.assert_not_called()

    @pytest.mark.parametrize("status", [401, 403])
    def test_rejected_token(self, session, status):
        session.post.return_value = make_response(status=status, text="unauthorized")
        with pytest.raises(UpstreamAuthError):
            ApifyScraper("t", session=session).run("a/b", {}, timeout=10)

    def test_request_timeout(self, session):
        session.post.side_effect = requests.Timeout("read timed out")
        with pytest.raises(UpstreamTimeout):
            ApifyScraper("t", session=session).run("a/b", {}, timeout=10)

    def test_run_timeout_status(self, session):
        session.post.return_value = make_response(status=408)
        with pytest.raises(UpstreamTimeout):
            ApifyScraper("t", session=session).run("a/b", {}, timeout=10)

    def test_server_error(self, session):
        session.post.return_value = make_response(status=502, text="bad gateway")
        with pytest.raises(UpstreamFailure):
            ApifyScraper("t", session=session).run("a/b", {}, timeout=10)

    def test_connection_error(self, session):
        session.post.side_effect = requests.ConnectionError("refused")
        with pytest.raises(UpstreamFailure):
            ApifyScraper("t", session=session).run("a/b", {}, timeout=10)

    def test_non_list_body(self, session):
        session.post.return_value = make_response(body={"error": "weird"})
        with pytest.raises(UpstreamFailure):
            ApifyScraper("t", session=session).run("a/b", {}, timeout=10)
