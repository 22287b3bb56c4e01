import json

from shared.llm_adapter import EmptyCompletionError, UpstreamError


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_metrics(client):
    response = client.get("/metrics")
    assert response.status_code == 200
    assert "optimize_requests_total" in response.text


def test_web_shells_are_served(client):
    for path in ("/", "/v2"):
        response = client.get(path)
        assert response.status_code == 200
        assert "text/html" in response.headers["content-type"]
    assert client.get("/static/js/app-v2.js").status_code == 200


def test_v2_shell_has_copy_export_and_version_tabs(client):
    page = client.get("/v2").text
    assert 'data-copy="optimizedPrompt"' in page
    assert 'id="exportBtn"' in page
    assert 'id="modelVersionTabs"' in page

    script = client.get("/static/js/app-v2.js").text
    assert "function toMarkdown" in script
    assert "function renderVersions" in script


# ---------------------------------------------------------------------------
# V1
# ---------------------------------------------------------------------------


def test_v1_optimize(client, provider):
    response = client.post("/api/optimize", json={"input": "write a poem"})

    assert response.status_code == 200
    assert response.json() == {"result": "optimized text"}
    assert provider.last_prompt == "Optimize this: write a poem"
    assert provider.requests[0].model == "test-model"


def test_v1_empty_input_is_rejected(client, provider):
    response = client.post("/api/optimize", json={"input": ""})

    assert response.status_code == 400
    assert response.json() == {"error": "Invalid request parameters"}
    assert provider.requests == []


def test_v1_missing_input_and_bad_json_are_rejected(client):
    assert client.post("/api/optimize", json={}).status_code == 400
    response = client.post(
        "/api/optimize",
        content="{not json",
        headers={"Content-Type": "application/json"},
    )
    assert response.status_code == 400


def test_v1_upstream_failure_is_500(client, provider):
    provider.error = UpstreamError("connection refused")

    response = client.post("/api/optimize", json={"input": "x"})

    assert response.status_code == 500
    assert response.json() == {"error": "Optimization failed: connection refused"}


def test_v1_empty_completion_returns_empty_result(client, provider):
    provider.error = EmptyCompletionError("no response received")

    response = client.post("/api/optimize", json={"input": "x"})

    assert response.status_code == 200
    assert response.json() == {"result": ""}


# ---------------------------------------------------------------------------
# V2
# ---------------------------------------------------------------------------


def test_v2_optimize_returns_structured_result(client, provider):
    provider.content = "Sure!\n" + json.dumps({
        "optimized_prompt": "p",
        "usage_guide": "g",
        "model_versions": {"claude": "c"},
        "metadata": {"estimated_tokens": 42, "techniques_used": ["few-shot"]},
    })

    response = client.post("/api/v2/optimize", json={"input": "x", "language": "english"})

    assert response.status_code == 200
    result = response.json()["result"]
    assert result["optimized_prompt"] == "p"
    assert result["model_versions"] == {"claude": "c", "gpt": "", "gemini": "", "deepseek": ""}
    assert result["metadata"]["estimated_tokens"] == 42
    assert result["test_cases"] == []

    prompt = provider.last_prompt
    assert "- Please reply in english\n" in prompt
    assert "- Complexity level: medium\n" in prompt
    assert "- Task type: general\n" in prompt
    assert "multiple AI models" not in prompt


def test_v2_degraded_response_is_still_200(client, provider):
    provider.content = "I could not produce JSON, here is a prompt instead."

    response = client.post(
        "/api/v2/optimize",
        json={"input": "x", "complexity_level": "complex", "target_models": ["gpt"]},
    )

    assert response.status_code == 200
    result = response.json()["result"]
    assert result["optimized_prompt"] == provider.content
    assert result["metadata"] == {
        "complexity_level": "complex",
        "task_type": "general",
        "estimated_tokens": len(provider.content) // 4,
        "target_models": ["gpt"],
        "techniques_used": ["basic optimization"],
    }


def test_v2_validation_error_includes_detail(client):
    response = client.post("/api/v2/optimize", json={"target_models": ["gpt"]})

    assert response.status_code == 400
    error = response.json()["error"]
    assert error.startswith("Invalid request parameters: ")
    assert "input" in error


def test_v2_empty_input_is_rejected(client, provider):
    for path in ("/api/v2/optimize", "/api/v2/generate-multi"):
        response = client.post(path, json={"input": ""})

        assert response.status_code == 400
        assert response.json()["error"].startswith("Invalid request parameters: input")
    assert provider.requests == []


def test_v2_empty_completion_is_500(client, provider):
    provider.error = EmptyCompletionError("no response received")

    response = client.post("/api/v2/optimize", json={"input": "x"})

    assert response.status_code == 500
    assert response.json() == {"error": "Optimization failed: no response received"}


def test_generate_multi_defaults_to_all_catalog_models(client, provider):
    provider.content = json.dumps({"optimized_prompt": "p"})

    response = client.post("/api/v2/generate-multi", json={"input": "x"})

    assert response.status_code == 200
    prompt = provider.last_prompt
    assert (
        "- Generate specialised versions for the following AI models: "
        "claude, gpt, gemini, deepseek\n"
    ) in prompt
    assert "- Generate specialised versions for multiple AI models\n" in prompt


def test_generate_multi_keeps_requested_models(client, provider):
    provider.content = json.dumps({"optimized_prompt": "p"})

    client.post("/api/v2/generate-multi", json={"input": "x", "target_models": ["deepseek"]})

    assert "following AI models: deepseek\n" in provider.last_prompt


def test_generate_multi_failure_message(client, provider):
    provider.error = UpstreamError("timeout")

    response = client.post("/api/v2/generate-multi", json={"input": "x"})

    assert response.status_code == 500
    assert response.json() == {"error": "Batch generation failed: timeout"}


def test_models_endpoint(client):
    response = client.get("/api/v2/models")

    assert response.status_code == 200
    models = response.json()["models"]
    assert len(models) == 4
    assert {m["id"] for m in models} == {"claude", "gpt", "gemini", "deepseek"}
    assert all(m["supported"] is True for m in models)
