from fastapi.testclient import TestClient
import pytest

from plateworks.main import app

client = TestClient(app)


def test_initial_status_uses_default_settings():
    r = client.get("/api/v1/resource/status")
    assert r.status_code == 200
    data = r.json()
    assert data["current_liters"] == 0.0
    assert data["total_barrels"] == 0
    assert data["cost_per_barrel"] == 35000.0
    assert data["recycling_cost_per_barrel"] == 800.0
    assert data["cost_per_square_meter"] == pytest.approx(424.44)
    assert data["liters_per_square_meter"] == 10.0
    assert data["recycling_rate"] == pytest.approx(0.70)
    assert data["recycling_frequency"] == 30
    assert data["metrics"]["fill_percentage"] == 0.0
    assert data["metrics"]["estimated_days_remaining"] is None


def test_refill():
    r = client.post("/api/v1/resource/refill", json={"barrel_count": 3})
    assert r.status_code == 200
    assert r.json() == {"new_total_barrels": 3, "new_current_liters": 600.0}
    metrics = client.get("/api/v1/resource/status").json()["metrics"]
    assert metrics["fill_percentage"] == 100.0
    assert metrics["max_capacity"] == 600.0


@pytest.mark.parametrize("count", [0, -1, 1.5, "two"])
def test_refill_rejects_bad_counts(count):
    r = client.post("/api/v1/resource/refill", json={"barrel_count": count})
    assert r.status_code == 400
    assert r.json()["error"] == "invalid_quantity"
    assert client.get("/api/v1/resource/status").json()["total_barrels"] == 0


def test_settings_update():
    r = client.put("/api/v1/resource/settings", json={"recycling_rate": 0.8, "cost_per_square_meter": 450})
    assert r.status_code == 200
    data = r.json()
    assert data["recycling_rate"] == pytest.approx(0.8)
    assert data["cost_per_square_meter"] == 450.0
    assert data["metrics"]["efficiency"] == pytest.approx(80.0)


def test_invalid_settings_are_rejected_atomically():
    r = client.put("/api/v1/resource/settings", json={"cost_per_barrel": 1000, "recycling_rate": 1.5})
    assert r.status_code == 400
    assert r.json()["error"] == "invalid_setting"
    assert r.json()["details"]["field"] == "recycling_rate"
    data = client.get("/api/v1/resource/status").json()
    assert data["cost_per_barrel"] == 35000.0
    assert data["recycling_rate"] == pytest.approx(0.70)


def test_unknown_setting_is_rejected():
    r = client.put("/api/v1/resource/settings", json={"liters_per_m2": 12})
    assert r.status_code == 400
    assert r.json()["error"] == "invalid_setting"
    assert r.json()["details"]["field"] == "liters_per_m2"
    assert client.get("/api/v1/resource/status").json()["liters_per_square_meter"] == 10.0


def test_non_numeric_setting_is_rejected():
    r = client.put("/api/v1/resource/settings", json={"recycling_rate": "abc"})
    assert r.status_code == 400
    assert r.json()["error"] == "invalid_setting"
    assert r.json()["details"] == {"field": "recycling_rate", "value": "abc"}
    assert client.get("/api/v1/resource/status").json()["recycling_rate"] == pytest.approx(0.70)


def test_calculate_does_not_touch_ledger():
    r = client.post("/api/v1/resource/calculate", json={"width": 100, "height": 70})
    assert r.status_code == 200
    calc = r.json()["calculations"]
    assert calc == {"total_area_m2": 0.7, "liters_needed": 7.0, "estimated_cost": 297.11}
    assert client.get("/api/v1/resource/history").json()["usage_history"] == []

    r = client.post("/api/v1/resource/calculate", json={"width": -10, "height": 70})
    assert r.status_code == 400
    assert r.json()["error"] == "invalid_geometry"


def test_monthly_report():
    client.post("/api/v1/resource/refill", json={"barrel_count": 1})
    client.post("/api/v1/resource/usage", json={"area_processed_m2": 1.0})
    r = client.get("/api/v1/resource/monthly-report")
    assert r.status_code == 200
    report = r.json()
    assert report["recycling_costs"] == 24000.0
    assert report["processing_costs"] == 424.44
    assert report["liters_used"] == pytest.approx(10.0)
    assert report["orders_processed"] == 0
    assert report["efficiency"]["actual_liters_consumed"] == pytest.approx(3.0)


def test_history_validates_month():
    assert client.get("/api/v1/resource/history", params={"year": 2025, "month": 13}).status_code == 422


def test_workflow_templates():
    keys = [t["key"] for t in client.get("/api/v1/workflow-templates/").json()]
    assert keys == ["standard", "extended"]

    payload = {"key": "sleeve", "name": "Sleeve", "sub_processes": ["mounting", "washout", "finishing"]}
    r = client.post("/api/v1/workflow-templates/", json=payload)
    assert r.status_code == 200
    assert r.json()["trigger_sub_process"] == "washout"

    r = client.post("/api/v1/orders/", json={"title": "Sleeve job", "workflow_template": "sleeve"})
    assert [sp["name"] for sp in r.json()["sub_processes"]] == ["mounting", "washout", "finishing"]

    r = client.post("/api/v1/workflow-templates/", json={"key": "bad", "name": "Bad", "sub_processes": ["drying"]})
    assert r.status_code == 400
