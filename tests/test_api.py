from datetime import date


# ── System ─────────────────────────────────────────────────────────────────

def test_root(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["success"] is True


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] in ("healthy", "degraded")


# ── Customers & units CRUD ─────────────────────────────────────────────────

def _create_customer(client, customer_id="C900", **overrides):
    payload = {
        "id": customer_id,
        "name": "Lager Müller GmbH",
        "email": "info@lager-mueller.de",
        "type": "business",
        "start_date": "2025-01-10",
    }
    payload.update(overrides)
    return client.post("/api/customers/", json=payload)


def _create_unit(client, unit_id="X1", **overrides):
    payload = {"id": unit_id, "size": "10m²", "price_per_month": 89}
    payload.update(overrides)
    return client.post("/api/units/", json=payload)


def test_create_and_get_customer(client):
    response = _create_customer(client)
    assert response.status_code == 201
    assert response.json()["unit_ids"] == []

    response = client.get("/api/customers/C900")
    assert response.status_code == 200
    assert response.json()["name"] == "Lager Müller GmbH"


def test_create_customer_duplicate(client):
    _create_customer(client)
    assert _create_customer(client).status_code == 409


def test_create_customer_end_before_start(client):
    response = _create_customer(client, end_date="2024-12-31")
    assert response.status_code == 422


def test_get_customer_not_found(client):
    assert client.get("/api/customers/NOPE").status_code == 404


def test_rent_unit_to_customer(client):
    _create_customer(client)
    response = _create_unit(
        client, is_occupied=True, customer_id="C900", rented_since="2025-02-01"
    )
    assert response.status_code == 201
    assert response.json()["customer_id"] == "C900"

    customer = client.get("/api/customers/C900").json()
    assert customer["unit_ids"] == ["X1"]


def test_create_vacant_unit_with_customer_rejected(client):
    _create_customer(client)
    response = _create_unit(client, customer_id="C900")
    assert response.status_code == 422


def test_create_unit_unknown_customer(client):
    response = _create_unit(client, is_occupied=True, customer_id="C404")
    assert response.status_code == 422


def test_create_unit_duplicate(client):
    _create_unit(client)
    assert _create_unit(client).status_code == 409


def test_vacating_unit_releases_customer(client):
    _create_customer(client)
    _create_unit(client, is_occupied=True, customer_id="C900", rented_since="2025-02-01")

    response = client.put("/api/units/X1", json={"is_occupied": False})
    assert response.status_code == 200
    assert response.json()["customer_id"] is None
    assert response.json()["rented_since"] is None


def test_vacating_unit_with_explicit_null_customer_clears_rented_since(client):
    _create_customer(client)
    _create_unit(client, is_occupied=True, customer_id="C900", rented_since="2025-02-01")

    response = client.put("/api/units/X1", json={"is_occupied": False, "customer_id": None})
    assert response.status_code == 200
    assert response.json()["customer_id"] is None
    assert response.json()["rented_since"] is None


def test_create_vacant_unit_with_rented_since_rejected(client):
    response = _create_unit(client, rented_since="2025-02-01")
    assert response.status_code == 422


def test_update_unit_null_required_field_rejected(client):
    _create_unit(client)
    for field in ("price_per_month", "size", "is_occupied"):
        response = client.put("/api/units/X1", json={field: None})
        assert response.status_code == 422, field

    assert client.get("/api/units/X1").json()["price_per_month"] == 89


def test_update_unit_customer_on_vacant_unit_rejected(client):
    _create_customer(client)
    _create_unit(client)
    response = client.put("/api/units/X1", json={"customer_id": "C900"})
    assert response.status_code == 422


def test_update_unit_price(client):
    _create_unit(client)
    response = client.put("/api/units/X1", json={"price_per_month": 95})
    assert response.status_code == 200
    assert response.json()["price_per_month"] == 95


def test_delete_customer_with_units_conflicts(client):
    _create_customer(client)
    _create_unit(client, is_occupied=True, customer_id="C900")
    assert client.delete("/api/customers/C900").status_code == 409

    assert client.delete("/api/units/X1").status_code == 204
    assert client.delete("/api/customers/C900").status_code == 204
    assert client.get("/api/customers/C900").status_code == 404


def test_update_customer_end_date(client):
    _create_customer(client)
    response = client.put("/api/customers/C900", json={"end_date": "2025-05-31"})
    assert response.status_code == 200
    assert response.json()["end_date"] == "2025-05-31"

    response = client.put("/api/customers/C900", json={"end_date": "2024-01-01"})
    assert response.status_code == 422


def test_update_customer_null_required_field_rejected(client):
    _create_customer(client, end_date="2025-05-31")
    for field in ("start_date", "name", "type"):
        response = client.put("/api/customers/C900", json={field: None})
        assert response.status_code == 422, field

    customer = client.get("/api/customers/C900").json()
    assert customer["start_date"] == "2025-01-10"
    assert customer["name"] == "Lager Müller GmbH"


def test_update_customer_clear_end_date(client):
    _create_customer(client, end_date="2025-05-31")
    response = client.put("/api/customers/C900", json={"end_date": None})
    assert response.status_code == 200
    assert response.json()["end_date"] is None


# ── Listings on seeded data ────────────────────────────────────────────────

def test_list_units(seeded_client):
    units = seeded_client.get("/api/units/").json()
    assert len(units) == 125

    small = seeded_client.get("/api/units/", params={"size": "5m²"}).json()
    assert len(small) == 40
    assert all(u["size"] == "5m²" for u in small)

    vacant = seeded_client.get("/api/units/", params={"is_occupied": False}).json()
    assert all(u["customer_id"] is None for u in vacant)


def test_list_customers_filters(seeded_client):
    everyone = seeded_client.get("/api/customers/").json()
    active = seeded_client.get("/api/customers/", params={"active": True}).json()
    former = seeded_client.get("/api/customers/", params={"active": False}).json()

    assert len(everyone) == 85
    assert len(active) + len(former) == 85
    assert all(c["end_date"] is None for c in active)

    business = seeded_client.get("/api/customers/", params={"type": "business"}).json()
    assert all(c["type"] == "business" for c in business)


def test_unit_stats_by_size(seeded_client):
    stats = seeded_client.get("/api/units/stats/by-size").json()
    assert [s["size"] for s in stats] == ["5m²", "10m²", "15m²", "20m²", "30m²"]
    assert sum(s["total_units"] for s in stats) == 125


# ── Analytics on seeded data ───────────────────────────────────────────────

def test_dashboard(seeded_client):
    response = seeded_client.get("/api/metrics/dashboard")
    assert response.status_code == 200
    summary = response.json()
    assert summary["total_units"] == 125
    assert summary["total_customers"] == 85
    assert summary["occupied_units"] + summary["available_units"] == 125


def test_list_metrics_with_range(seeded_client):
    assert len(seeded_client.get("/api/metrics/").json()) == 24

    rows = seeded_client.get("/api/metrics/", params={"start": "2025-01", "end": "2025-03"}).json()
    assert [r["month"] for r in rows] == ["2025-01", "2025-02", "2025-03"]


def test_list_metrics_bad_month(seeded_client):
    response = seeded_client.get("/api/metrics/", params={"start": "2025-1"})
    assert response.status_code == 422


def test_get_metric(seeded_client):
    assert seeded_client.get("/api/metrics/2025-06").json()["month"] == "2025-06"
    assert seeded_client.get("/api/metrics/2030-01").status_code == 404
    assert seeded_client.get("/api/metrics/2025-13").status_code == 422


def test_revenue_comparison(seeded_client):
    series = seeded_client.get("/api/metrics/revenue").json()
    assert series["current_year"] == 2025
    assert series["previous_year"] == 2024
    assert [m["month"] for m in series["months"]][:2] == ["Jan", "Feb"]

    series = seeded_client.get("/api/metrics/revenue", params={"year": 2024}).json()
    assert series["previous_year"] == 2023


def test_occupancy_analytics(seeded_client):
    data = seeded_client.get("/api/metrics/occupancy").json()
    assert len(data["unit_sizes"]) == 5
    assert len(data["recommendations"]) == 5
    assert data["most_profitable_size"] is not None
    assert {r["type"] for r in data["recommendations"]} <= {"increase", "decrease", "maintain"}


def test_calculate_metrics(seeded_client):
    response = seeded_client.post("/api/metrics/calculate")
    assert response.status_code == 200
    row = response.json()

    today = date.today()
    assert row["month"] == f"{today.year:04d}-{today.month:02d}"
    assert row["total_units"] == 125
    assert len(row["revenue_by_size"]) == 5

    # Recalculating the same month updates instead of duplicating
    seeded_client.post("/api/metrics/calculate")
    assert seeded_client.get(f"/api/metrics/{row['month']}").status_code == 200


def test_forecast(seeded_client):
    data = seeded_client.get("/api/forecast/").json()
    points = data["points"]
    assert len(points) == 27
    assert all(p["forecast"] is not None for p in points[-3:])
    assert data["forecast_start_month"] == "Jul"
    assert data["total_forecast"] == sum(p["forecast"] for p in points[-3:])

    data = seeded_client.get("/api/forecast/", params={"months": 6}).json()
    assert len(data["points"]) == 30


def test_forecast_empty_database(client):
    data = client.get("/api/forecast/").json()
    assert [p["month"] for p in data["points"]] == ["Jan", "Feb", "Mär"]
    assert data["total_forecast"] == 0


def test_seasonal(seeded_client):
    points = seeded_client.get("/api/forecast/seasonal").json()
    assert len(points) == 24
    assert points[0]["month"] == "Jul"


def test_pricing_alerts(seeded_client):
    alerts = seeded_client.get("/api/alerts/pricing").json()
    assert len(alerts) <= 8
    order = {"high": 0, "medium": 1, "low": 2}
    ranks = [order[a["priority"]] for a in alerts]
    assert ranks == sorted(ranks)

    assert len(seeded_client.get("/api/alerts/pricing", params={"limit": 2}).json()) <= 2


def test_customer_analytics(seeded_client):
    segments = seeded_client.get("/api/customers/segments").json()
    assert sum(s["count"] for s in segments) == 85

    top = seeded_client.get("/api/customers/top", params={"limit": 5}).json()
    assert len(top) == 5
    revenues = [c["monthly_revenue"] for c in top]
    assert revenues == sorted(revenues, reverse=True)

    trend = seeded_client.get("/api/customers/trend").json()
    assert len(trend) == 24
    assert all(p["net_growth"] == p["new_customers"] - p["churned_customers"] for p in trend)


def test_summary_csv(seeded_client):
    response = seeded_client.get("/api/reports/summary.csv")
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert "StorageHub_Report_" in response.headers["content-disposition"]
    assert response.content.startswith(b"\xef\xbb\xbf")
    assert "Customer Segments" in response.text
