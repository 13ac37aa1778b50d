from candidate_eval.utils.config import get_settings
from candidate_eval.utils.utils import TRUNCATION_MARKER
from conftest import make_settings


class TestSummarizeEndpoints:
    """Test cases for the job and transcript summary endpoints"""

    def test_job_summary(self, client, fake_llm):
        fake_llm.reply_text = "  Backend Engineer (Go, 3+ yrs)\n"

        response = client.post("/api/summarize", json={"jobText": "We are hiring a backend engineer..."})

        assert response.status_code == 200
        assert response.json() == {"summary": "Backend Engineer (Go, 3+ yrs)"}
        call = fake_llm.calls[0]
        assert call["max_tokens"] == 256
        assert call["content"].endswith("We are hiring a backend engineer...")

    def test_job_summary_truncates_long_postings(self, client, fake_llm, settings):
        fake_llm.reply_text = "summary"

        client.post("/api/summarize", json={"jobText": "x" * (settings.max_text_length + 500)})

        prompt = fake_llm.calls[0]["content"]
        assert prompt.endswith("x" * settings.max_text_length + TRUNCATION_MARKER)

    def test_job_summary_requires_job_text(self, client, fake_llm):
        response = client.post("/api/summarize", json={})

        assert response.status_code == 400
        assert response.json() == {"error": "Missing jobText"}
        assert fake_llm.calls == []

    def test_transcript_summary(self, client, fake_llm, settings):
        fake_llm.reply_text = "The applicant introduced themselves...  "
        transcript = "y" * (settings.max_summary_transcript_length + 1)

        response = client.post("/api/summarize-transcript", json={"transcript": transcript})

        assert response.status_code == 200
        assert response.json() == {"summary": "The applicant introduced themselves..."}
        call = fake_llm.calls[0]
        assert call["max_tokens"] == 1024
        assert call["content"].endswith(TRUNCATION_MARKER)

    def test_transcript_summary_requires_transcript(self, client, fake_llm):
        response = client.post("/api/summarize-transcript", json={"transcript": ""})

        assert response.status_code == 400
        assert response.json() == {"error": "Missing transcript"}

    def test_missing_api_key(self, test_app, client):
        test_app.dependency_overrides[get_settings] = lambda: make_settings(anthropic_api_key="")

        response = client.post("/api/summarize", json={"jobText": "Backend Engineer"})

        assert response.status_code == 500
        assert response.json() == {"error": "API key not configured"}

    def test_put_is_not_allowed(self, client):
        response = client.put("/api/summarize-transcript", json={"transcript": "hi"})

        assert response.status_code == 405
        assert response.json() == {"error": "Method not allowed"}
