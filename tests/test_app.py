from fastapi.testclient import TestClient

from candidate_eval.dependencies import get_anthropic_client


class TestAppSurface:
    """Test cases for the cross-cutting HTTP behaviour"""

    def test_root_and_health(self, client):
        assert client.get("/").json()["status"] == "ok"
        assert client.get("/health").json() == {"status": "healthy"}

    def test_cors_preflight(self, client):
        response = client.options(
            "/api/evaluate",
            headers={
                "Origin": "https://recruit.example.com",
                "Access-Control-Request-Method": "POST",
                "Access-Control-Request-Headers": "Content-Type",
            },
        )

        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == "*"
        assert "POST" in response.headers["access-control-allow-methods"]

    def test_cors_header_on_error_response(self, client):
        response = client.get("/api/evaluate", headers={"Origin": "https://recruit.example.com"})

        assert response.status_code == 405
        assert response.headers["access-control-allow-origin"] == "*"

    def test_request_id_header(self, client, fake_llm):
        response = client.post("/api/evaluate", json={})

        assert response.status_code == 400
        assert response.headers["x-request-id"]

    def test_domain_errors_are_logged_with_their_details(self, client, fake_llm, caplog):
        with caplog.at_level("WARNING"):
            client.post("/api/evaluate", json={})

        record = next(r for r in caplog.records if getattr(r, "error", None))
        assert record.error["error_code"] == "VALIDATION_ERROR"
        assert record.error["message"] == "Missing jobText or resumeText"
        assert record.request_id

    def test_body_size_cap(self, client, fake_llm, blob_store, settings):
        oversized = "a" * (10 * 1024 * 1024 + 1)

        for path in ("/api/evaluate", "/api/share-create", "/api/share-upload"):
            response = client.post(path, content=oversized, headers={"Content-Type": "application/json"})

            assert response.status_code == 413
            assert response.json() == {"error": "Request body too large"}

        assert fake_llm.calls == []
        assert blob_store.puts == []

    def test_malformed_json_body(self, client, fake_llm):
        response = client.post("/api/evaluate", content="{not json", headers={"Content-Type": "application/json"})

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid request body"}

    def test_unexpected_errors_do_not_leak_details(self, test_app, settings):
        class BrokenClient:
            async def create_message(self, content, max_tokens):
                raise RuntimeError("secret internal state")

        test_app.dependency_overrides[get_anthropic_client] = lambda: BrokenClient()
        client = TestClient(test_app, raise_server_exceptions=False)

        response = client.post("/api/evaluate", json={"jobText": "job", "resumeText": "resume"})

        assert response.status_code == 500
        assert response.json() == {"error": "Internal server error"}
