from __future__ import annotations

from fastapi.testclient import TestClient

from naybourhood.main import app

client = TestClient(app)


def test_health():
    response = client.get("/api/v1/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_score_inline_lead(hot_cash_buyer):
    response = client.post("/api/v1/score", json={"lead": hot_cash_buyer})

    assert response.status_code == 200
    body = response.json()
    assert body["classification"] == "Hot Lead"
    assert body["is_28_day_buyer"] is True
    assert body["call_priority"]["level"] == 1
    assert body["legacy"]["ai_priority"] == "P1"
    assert body["summary_source"] == "template"
    assert body["lead"]["full_name"] == "Sarah Mitchell"


def test_score_requires_lead_or_buyer_id():
    response = client.post("/api/v1/score", json={})

    assert response.status_code == 400
    assert response.json()["detail"]["error_code"] == "validation_error"


def test_score_tolerates_non_finite_numbers():
    body = b'{"lead": {"full_name": "Amy Ng", "email": "amy@ng.com", "bedrooms": Infinity, "budget_min": -Infinity}}'

    response = client.post("/api/v1/score", content=body, headers={"Content-Type": "application/json"})

    assert response.status_code == 200
    lead = response.json()["lead"]
    assert lead["preferred_bedrooms"] is None
    assert lead["budget_min"] is None


def test_score_unknown_buyer_is_404(isolated_session_factory):
    response = client.post("/api/v1/score", json={"buyer_id": 12345})

    assert response.status_code == 404
    assert response.json()["detail"]["error_code"] == "not_found"


def test_score_batch_inline_leads(hot_cash_buyer, fake_buyer):
    response = client.post("/api/v1/score/batch", json={"leads": [hot_cash_buyer, fake_buyer]})

    assert response.status_code == 200
    body = response.json()
    assert body["total"] == 2
    assert body["scored"] == 2
    assert [item["classification"] for item in body["results"]] == ["Hot Lead", "Disqualified"]


def test_score_batch_over_limit_is_400():
    response = client.post("/api/v1/score/batch", json={"leads": [{"full_name": f"Lead {i}"} for i in range(51)]})

    assert response.status_code == 400
    assert "Maximum 50" in response.json()["detail"]["detail"]


def test_webhook_creates_and_scores_buyer(isolated_session_factory, mortgage_buyer):
    response = client.post("/api/v1/webhook/lead-created", json={"lead": mortgage_buyer})

    assert response.status_code == 201
    body = response.json()
    assert body["classification"] == "Nurture"
    assert body["buyer_id"] >= 1

    rescored = client.post("/api/v1/score", json={"buyer_id": body["buyer_id"]})
    assert rescored.status_code == 200
    assert rescored.json()["buyer_id"] == body["buyer_id"]
    assert rescored.json()["classification"] == "Nurture"


def test_webhook_accepts_bare_payload(isolated_session_factory):
    response = client.post("/api/v1/webhook/lead-created", json={"email": "lola.ng@gmail.com", "timeline": "ASAP"})

    assert response.status_code == 201
    assert response.json()["is_28_day_buyer"] is True


def test_webhook_without_identity_is_400(isolated_session_factory):
    response = client.post("/api/v1/webhook/lead-created", json={"lead": {"phone": "+447700900123"}})
    assert response.status_code == 400


def test_import_leads(isolated_session_factory, hot_cash_buyer, nurture_buyer):
    response = client.post("/api/v1/import/leads", json={"leads": [hot_cash_buyer, nurture_buyer]})

    assert response.status_code == 200
    body = response.json()
    assert body["imported"] == 2
    assert body["by_classification"] == {"Hot Lead": 1, "Needs Qualification": 1}


def test_import_leads_rejects_empty_list():
    response = client.post("/api/v1/import/leads", json={"leads": []})
    assert response.status_code == 422
