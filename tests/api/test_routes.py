"""Tests for the HTTP service."""

from __future__ import annotations

from fastapi.testclient import TestClient

from jq2react.main import app


def test_root_health() -> None:
    with TestClient(app) as client:
        response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "UP"


def test_prefixed_health_and_info() -> None:
    with TestClient(app) as client:
        health = client.get("/api/jq2react/health")
        info = client.get("/api/jq2react/info")
    assert health.status_code == 200
    assert info.json()["componentExtension"] == ".jsx"


def test_convert_script() -> None:
    with TestClient(app) as client:
        response = client.post(
            "/api/jq2react/convert",
            json={
                "source": "$('#submitBtn').on('click', function (e) { e.preventDefault(); });",
                "componentName": "signup-form",
            },
        )
    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["componentName"] == "SignupForm"
    assert "const handleSubmitBtnClick = (e) => {" in data["code"]
    assert data["summary"]["handlers"] == 1
    assert data["stylesheet"] == ""


def test_convert_page_returns_stylesheet() -> None:
    with TestClient(app) as client:
        response = client.post(
            "/api/jq2react/convert",
            json={
                "source": "<style>.a { color: red; }</style><script>$('#a').hide();</script>",
                "kind": "page",
            },
        )
    assert response.status_code == 200
    data = response.json()
    assert data["componentName"] == "Component"
    assert data["stylesheet"] == ".a { color: red; }"
    assert "import './Component.css';" in data["code"]


def test_convert_rejects_empty_source() -> None:
    with TestClient(app) as client:
        response = client.post("/api/jq2react/convert", json={"source": "   "})
    assert response.status_code == 422


def test_convert_reports_unparsable_source_as_warning() -> None:
    with TestClient(app) as client:
        response = client.post("/api/jq2react/convert", json={"source": "$(function () {"})
    assert response.status_code == 200
    assert response.json()["warnings"][0].startswith("Script could not be parsed")


def test_analyze() -> None:
    with TestClient(app) as client:
        response = client.post("/api/jq2react/analyze", json={"source": "$('#a').click(go);"})
    assert response.status_code == 200
    data = response.json()
    assert data["containsJQuery"] is True
    assert data["analysis"]["selectors"] == 1
    assert data["analysis"]["event_handlers"] == 1
    assert data["analysis"]["score"] == 3
    assert data["analysis"]["complexity"] == "Low"
