"""Tests for raw actor result to DisplayRecord transformation."""

from job_aggregator.jobs import behance_jobs, freelance_jobs, indeed_jobs, linkedin_jobs, upwork_jobs
from job_aggregator.pipeline import transform_results


class TestTotalTransforms:
    def test_empty_records_get_placeholders(self):
        for module in (linkedin_jobs, upwork_jobs, indeed_jobs, behance_jobs, freelance_jobs):
            record = module.transform({})
            assert record.source == module.PLATFORM
            assert record.title
            assert isinstance(record.description, str)

    WRONG_TYPES = {
        linkedin_jobs: {
            "title": 7, "organization": ["Globex"], "ai_work_arrangement": 1, "ai_key_skills": 5,
            "employment_type": [3], "linkedin_org_description": {"text": "x"},
            "locations_derived": [{"city": 9, "country": "US"}], "ai_salary_currency": 1,
            "ai_salary_value": "lots", "salary_raw": {"currency": 3, "value": 50000, "unitText": 12},
        },
        upwork_jobs: {
            "title": None, "link": 4, "skills": "React, Node", "workload": 30,
            "budget": {"type": "HOURLY", "min_hourly_rate": "abc"},
            "client": {"name": 5, "location": {"city": 1, "country": "DE"}, "job_history": 12},
        },
        indeed_jobs: {
            "platform_url": 123, "title": ["x"], "location": 5, "skills": 42,
            "salary_currency": 7, "salary_minimum": float("nan"), "salary_period": 1,
        },
        behance_jobs: {"job_type": 3, "job_status": 1, "title": {}, "job_url": 8, "location": 0},
        freelance_jobs: {
            "skills": 3, "budget_range": 100, "title": 2, "time_left": 5, "query": [1],
            "minbudget": float("inf"),
        },
    }

    def test_wrong_field_types_do_not_raise(self):
        for module, job in self.WRONG_TYPES.items():
            record = module.transform(job)
            assert isinstance(record.title, str) and record.title
            assert isinstance(record.url, str)
            assert isinstance(record.company, str)
            assert isinstance(record.location, str)
            assert all(isinstance(s, str) for s in record.skills)

    def test_wrong_field_types_use_defaults(self):
        assert behance_jobs.transform({"job_type": 3}).employment_type == ""
        assert linkedin_jobs.transform({"ai_key_skills": "Go, Rust"}).skills == ["Go", "Rust"]
        assert linkedin_jobs.transform({"employment_type": [3]}).employment_type == "FULL_TIME"
        assert upwork_jobs.transform({"skills": 5}).skills == []
        assert indeed_jobs.transform({"salary_minimum": float("nan"), "salary_currency": "USD"}).salary is None
        assert freelance_jobs.transform({"minbudget": float("inf")}).extra["min_budget"] is None

    def test_unhashable_identity_keys_are_kept(self):
        raw = [{"job_id": [1], "title": "A"}, {"job_id": [1], "title": "B"}]
        assert [r.title for r in transform_results("behance", raw)] == ["A", "B"]

    def test_placeholders(self):
        assert linkedin_jobs.transform({}).company == "Unknown Company"
        assert linkedin_jobs.transform({}).location == "Location not specified"
        assert behance_jobs.transform({}).location == "Anywhere"
        assert freelance_jobs.transform({}).title == "Untitled Project"


class TestLinkedInTransform:
    JOB = {
        "id": "123",
        "title": "Senior React Developer",
        "organization": "Globex",
        "url": "https://www.linkedin.com/jobs/view/123",
        "locations_derived": [{"city": "Austin", "admin": "Texas", "country": "United States"}],
        "employment_type": ["CONTRACTOR"],
        "ai_salary_currency": "USD",
        "ai_salary_minvalue": 90000,
        "ai_salary_maxvalue": 120000,
        "ai_salary_unittext": "YEAR",
        "salary_raw": {"currency": "USD", "value": 1, "unitText": "HOUR"},
        "description_text": "## About\n**Great** <b>team</b>",
        "ai_work_arrangement": "Remote Solely",
    }

    def test_maps_fields(self):
        record = linkedin_jobs.transform(self.JOB)
        assert record.company == "Globex"
        assert record.location == "Austin, Texas, United States"
        assert record.employment_type == "CONTRACTOR"
        assert record.is_remote is True
        assert record.description == "About\nGreat team"

    def test_ai_salary_preferred(self):
        assert linkedin_jobs.format_linkedin_salary(self.JOB) == "USD 90K - 120K / year"

    def test_raw_salary_fallback(self):
        job = {"salary_raw": {"currency": "EUR", "value": 2500000, "unitText": "YEAR"}}
        assert linkedin_jobs.format_linkedin_salary(job) == "EUR 2.5M / year"

    def test_no_salary(self):
        assert linkedin_jobs.format_linkedin_salary({}) is None


class TestUpworkTransform:
    def test_budget_formats(self):
        assert upwork_jobs.format_budget({"type": "FIXED", "fixed_amount": 2000}) == "$2K fixed"
        assert upwork_jobs.format_budget({"type": "FIXED", "fixed_amount": 500}) == "$500 fixed"
        assert upwork_jobs.format_budget({"type": "HOURLY", "min_hourly_rate": 25, "max_hourly_rate": 40}) == "$25 - $40 / hour"
        assert upwork_jobs.format_budget({"type": "HOURLY", "max_hourly_rate": 40}) == "$40 / hour"
        assert upwork_jobs.format_budget({}) is None

    def test_client_review_summary(self):
        history = [
            {"title": "Site", "feedback_to_worker": {"score": 5, "comment": "Great"},
             "feedback_to_client": {"score": 4}, "contractor": {"name": "Ann"}},
            {"title": "App", "feedback_to_worker": {"score": 0}, "feedback_to_client": {"score": 5}},
        ]
        summary = upwork_jobs.client_review_summary(history)
        assert summary["avg_rating_given"] == 5
        assert summary["avg_rating_received"] == 4.5
        assert summary["recent_reviews"][1]["freelancer_name"] == "Unknown"

    def test_transform(self):
        record = upwork_jobs.transform({
            "id": "~01",
            "title": "React dashboard",
            "link": "https://www.upwork.com/jobs/~01",
            "budget": {"type": "HOURLY", "min_hourly_rate": 30, "max_hourly_rate": 50},
            "client": {"payment_verified": True, "location": {"country": "Canada"}},
            "skills": ["React"],
        })
        assert record.is_remote is True
        assert record.salary == "$30 - $50 / hour"
        assert record.location == "Canada"
        assert record.extra["client"]["payment_verified"] is True


class TestIndeedTransform:
    def test_job_id_and_salary(self):
        record = indeed_jobs.transform({
            "platform_url": "https://www.indeed.com/viewjob?jk=abc123&from=x",
            "title": "Nurse",
            "salary_currency": "USD",
            "salary_minimum": 70000,
            "salary_maximum": 90000,
            "salary_period": "YEAR",
            "skills": "ICU, Triage",
        })
        assert record.id == "abc123"
        assert record.salary == "USD 70K - 90K / year"
        assert record.skills == ["ICU", "Triage"]

    def test_dedup_by_url(self):
        raw = [{"platform_url": "u1", "title": "A"}, {"platform_url": "u1", "title": "B"}, {"platform_url": "u2"}]
        records = transform_results("indeed", raw)
        assert [r.url for r in records] == ["u1", "u2"]
        assert records[0].title == "A"

    def test_run_input_omits_empty_location(self):
        run_input = indeed_jobs.build_run_input({"search_terms": ["nurse"], "country": "United States", "location": ""})
        assert "location" not in run_input


class TestBehanceTransform:
    def test_dedup_by_job_id(self):
        raw = [
            {"job_id": 7, "title": "Illustrator", "job_status": "ACTIVE"},
            {"job_id": 7, "title": "Illustrator (copy)", "job_status": "ACTIVE"},
        ]
        records = transform_results("behance", raw)
        assert len(records) == 1
        assert records[0].title == "Illustrator"

    def test_inactive_filtered(self):
        raw = [{"job_id": 1, "job_status": "CLOSED"}, {"job_id": 2, "job_status": "ACTIVE"}, {"job_id": 3}]
        assert [r.id for r in transform_results("behance", raw)] == ["2", "3"]

    def test_job_type_and_urls(self):
        record = behance_jobs.transform({"job_id": 9, "job_type": "fulltime", "job_url": "https://behance.net/joblist/9"})
        assert record.employment_type == "Full-time"
        assert record.extra["application_url"] == "https://behance.net/joblist/9"


class TestFreelanceTransform:
    def test_budget_parsing(self):
        record = freelance_jobs.transform({
            "project_id": 42,
            "title": "WordPress plugin",
            "budget_range": "min $50 / hr",
            "minbudget": "$50",
            "maxbudget": "",
            "bid_avg": "$1,200",
            "description": {"html": "x"},
            "query": "wordpress",
        })
        assert record.id == "42"
        assert record.extra["min_budget"] == 50.0
        assert record.extra["max_budget"] is None
        assert record.extra["is_hourly"] is True
        assert record.extra["bid_average"] == 1200.0
        assert record.extra["matched_query"] == "wordpress"
        assert record.description == '{"html": "x"}'

    def test_dedup_by_project_id(self):
        raw = [{"project_id": 1, "query": "a"}, {"project_id": 1, "query": "b"}, {"project_id": 2}]
        records = transform_results("freelance", raw)
        assert [r.extra["matched_query"] for r in records] == ["a", ""]


class TestNoDedup:
    def test_linkedin_keeps_duplicates(self):
        assert len(transform_results("linkedin", [{"id": "1"}, {"id": "1"}])) == 2
