"""Tests for the trends endpoints."""

from datetime import datetime, timezone

from fastapi.testclient import TestClient

from app.core.database import utc_now

API = "/api/v1"


def _at(day, hour=12):
    return datetime(2024, 3, day, hour, tzinfo=timezone.utc)


class TestEndToEnd:
    def test_language_distribution_after_captures(self, client):
        for language in ("js", "TypeScript", "js"):
            response = client.post(
                f"{API}/capture/",
                json={"user_message": "question", "assistant_message": "answer", "language": language},
            )
            assert response.status_code == 201

        today = utc_now().date().isoformat()
        body = client.get(f"{API}/trends/languages", params={"start": today, "end": today}).json()
        assert body["dimension"] == "languages"
        assert body["total"] == 3
        assert body["items"] == [
            {"category": "JavaScript", "count": 2, "percentage": 66.7},
            {"category": "TypeScript", "count": 1, "percentage": 33.3},
        ]


class TestDistributions:
    def test_fallback_labels(self, client, make_question):
        make_question()
        for path, label in [
            ("languages", "unknown"),
            ("topic-languages", "general"),
            ("frameworks", "none"),
            ("runtimes", "none"),
            ("ides", "unknown"),
            ("repositories", "none"),
        ]:
            items = client.get(f"{API}/trends/{path}").json()["items"]
            assert items == [{"category": label, "count": 1, "percentage": 100.0}], path

    def test_date_window_filters(self, client, make_question):
        make_question(asked_at=_at(1), source_ide="Cursor")
        make_question(asked_at=_at(2), source_ide="VSCode")
        body = client.get(f"{API}/trends/ides", params={"start": "2024-03-02", "end": "2024-03-02"}).json()
        assert body["items"] == [{"category": "VSCode", "count": 1, "percentage": 100.0}]

    def test_empty_window(self, client, make_question):
        make_question(asked_at=_at(1))
        body = client.get(f"{API}/trends/frameworks", params={"start": "2023-01-01", "end": "2023-01-31"}).json()
        assert body == {"dimension": "frameworks", "total": 0, "items": []}

    def test_half_range_is_400(self, client):
        response = client.get(f"{API}/trends/languages", params={"start": "2024-03-01"})
        assert response.status_code == 400
        assert "both `start` and `end`" in response.json()["detail"]

    def test_malformed_date_is_400(self, client):
        response = client.get(f"{API}/trends/runtimes", params={"start": "2024-3-1", "end": "2024-03-02"})
        assert response.status_code == 400


class TestTemporal:
    def test_weekly_buckets(self, client, make_question):
        make_question(asked_at=_at(4))
        make_question(asked_at=_at(6))
        make_question(asked_at=_at(12))
        body = client.get(f"{API}/trends/temporal", params={"interval": "weekly"}).json()
        assert body["interval"] == "weekly"
        assert [t["count"] for t in body["trends"]] == [2, 1]
        assert body["trends"][0]["date"].startswith("2024-03-04T00:00:00")
        assert body["trends"][1]["date"].startswith("2024-03-11T00:00:00")

    def test_invalid_interval_falls_back_to_daily(self, client, make_question):
        make_question(asked_at=_at(4))
        body = client.get(f"{API}/trends/temporal", params={"interval": "yearly"}).json()
        assert body["interval"] == "daily"
        assert len(body["trends"]) == 1


class TestKeywords:
    def test_keywords(self, client, make_question):
        make_question(prompt="How do I use async and await in JavaScript?")
        make_question(prompt="async generators in Python")
        body = client.get(f"{API}/trends/keywords", params={"limit": 2}).json()
        assert body["total_questions"] == 2
        assert body["keywords"] == [{"keyword": "async", "count": 2}, {"keyword": "how", "count": 1}]

    def test_limit_must_be_positive(self, client):
        assert client.get(f"{API}/trends/keywords", params={"limit": 0}).status_code == 400


class TestAnswerQuality:
    def test_report(self, client, make_question):
        make_question(asked_at=_at(1), answers=[(10, True)])
        make_question(asked_at=_at(1), answers=[(30, False), (20, False)])
        make_question(asked_at=_at(1), answers=[(40, False)])
        make_question(asked_at=_at(1))
        body = client.get(f"{API}/trends/answer-quality").json()
        assert body["total_questions"] == 4
        assert body["questions_with_answers"] == 3
        assert body["unanswered_questions"] == 1
        assert body["questions_with_multiple_answers"] == 1
        assert body["questions_with_correct_answer"] == 1
        assert body["correct_answers"] == 1
        assert body["total_answers"] == 4
        assert body["question_answer_rate"] == 0.75
        assert body["correct_answer_rate"] == 0.25
        assert body["avg_response_time_seconds"] == 23.33
        assert body["median_response_time_seconds"] == 20.0


class TestOverview:
    def test_overview(self, client, make_question):
        make_question(asked_at=_at(1, 9), answers=[(1, True)])
        make_question(asked_at=_at(3, 18), answers=[(1, False)])
        body = client.get(f"{API}/trends/overview").json()
        assert body["total_interactions"] == 2
        assert body["total_answers"] == 2
        assert body["correct_answer_rate"] == 0.5
        assert body["date_range"]["start"].startswith("2024-03-01T09:00:00")
        assert body["date_range"]["end"].startswith("2024-03-03T18:00:00")

    def test_empty(self, client):
        body = client.get(f"{API}/trends/overview").json()
        assert body["total_interactions"] == 0
        assert body["date_range"] == {"start": None, "end": None}


class TestUnexpectedErrors:
    def test_unhandled_error_is_generic_500(self, client, monkeypatch):
        import app.api.routes.trends as trends_route

        def broken(questions):
            raise RuntimeError("secret connection string in here")

        monkeypatch.setattr(trends_route, "compute_overview", broken)
        safe_client = TestClient(client.app, raise_server_exceptions=False)
        response = safe_client.get(f"{API}/trends/overview")

        assert response.status_code == 500
        assert response.json() == {"detail": "Something went wrong"}
