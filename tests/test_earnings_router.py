"""API tests for the monthly earnings router."""

from datetime import date

from sqlalchemy.orm import Session

from app.models.monthly_earning_model import MonthlyEarning


def this_month() -> str:
    return date.today().replace(day=1).isoformat()


class TestCurrentEarning:
    """Tests for GET /api/earnings/current."""

    def test_zero_when_nothing_stored(self, client) -> None:
        resp = client.get("/api/earnings/current")

        assert resp.status_code == 200
        assert resp.json() == {"earning_id": None, "amount": 0.0, "month": this_month()}

    def test_returns_stored_month(self, client) -> None:
        client.post("/api/earnings", json={"amount": 4200})

        data = client.get("/api/earnings/current").json()

        assert data["amount"] == 4200.0
        assert data["month"] == this_month()
        assert data["earning_id"] is not None

    def test_other_months_ignored(self, client) -> None:
        client.post("/api/earnings", json={"amount": 3000, "month": "2001-05-20"})

        assert client.get("/api/earnings/current").json()["amount"] == 0.0


class TestSetEarning:
    """Tests for POST /api/earnings."""

    def test_month_normalised_to_first_day(self, client) -> None:
        resp = client.post("/api/earnings", json={"amount": 3500.5, "month": "2026-04-17"})

        assert resp.status_code == 200
        assert resp.json()["month"] == "2026-04-01"
        assert resp.json()["amount"] == 3500.5

    def test_same_month_updates_single_row(self, client, db_session: Session) -> None:
        first = client.post("/api/earnings", json={"amount": 3000, "month": "2026-04-02"}).json()
        second = client.post("/api/earnings", json={"amount": 3250, "month": "2026-04-28"}).json()

        assert second["earning_id"] == first["earning_id"]
        assert second["amount"] == 3250.0

        rows = db_session.query(MonthlyEarning).all()
        assert len(rows) == 1
        assert float(rows[0].amount) == 3250.0

    def test_month_defaults_to_current(self, client) -> None:
        assert client.post("/api/earnings", json={"amount": 10}).json()["month"] == this_month()

    def test_non_positive_amount(self, client) -> None:
        for body in ({"amount": 0}, {"amount": -5}, {}):
            resp = client.post("/api/earnings", json=body)
            assert resp.status_code == 400
            assert resp.json()["detail"] == "Amount must be greater than 0"

        assert client.get("/api/earnings/history").json() == []

    def test_oversized_amount_is_422(self, client) -> None:
        assert client.post("/api/earnings", json={"amount": "1e27"}).status_code == 422


class TestEarningHistory:
    """Tests for GET /api/earnings/history."""

    def test_newest_month_first(self, client) -> None:
        for month in ("2026-01-05", "2026-03-05", "2026-02-05"):
            client.post("/api/earnings", json={"amount": 100, "month": month})

        months = [r["month"] for r in client.get("/api/earnings/history").json()]

        assert months == ["2026-03-01", "2026-02-01", "2026-01-01"]


class TestUpdateDeleteEarning:
    """Tests for PUT/DELETE /api/earnings/{id}."""

    def test_update_amount(self, client) -> None:
        row = client.post("/api/earnings", json={"amount": 100, "month": "2026-06-01"}).json()

        resp = client.put(f"/api/earnings/{row['earning_id']}", json={"amount": 150.25})

        assert resp.status_code == 200
        assert resp.json() == {"earning_id": row["earning_id"], "amount": 150.25, "month": "2026-06-01"}

    def test_update_rejects_non_positive(self, client) -> None:
        row = client.post("/api/earnings", json={"amount": 100}).json()

        resp = client.put(f"/api/earnings/{row['earning_id']}", json={"amount": 0})

        assert resp.status_code == 400

    def test_update_missing(self, client) -> None:
        resp = client.put("/api/earnings/99", json={"amount": 10})

        assert resp.status_code == 404
        assert resp.json()["detail"] == "Earning entry not found"

    def test_delete(self, client) -> None:
        row = client.post("/api/earnings", json={"amount": 100}).json()

        resp = client.delete(f"/api/earnings/{row['earning_id']}")

        assert resp.status_code == 200
        assert resp.json() == {"message": "Earning entry deleted successfully"}
        assert client.get("/api/earnings/history").json() == []

    def test_delete_missing(self, client) -> None:
        resp = client.delete("/api/earnings/99")

        assert resp.status_code == 404
        assert resp.json()["detail"] == "Earning entry not found"
