"""
Health/version endpoints, error envelope for unknown routes, CLI commands.
"""
from purchasing.extensions import db
from purchasing.models import Item, PurchaseOrderHeader, User


def test_health_reports_counts_and_zone(client, item_a):
    resp = client.get("/api/health")

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["status"] == "healthy"
    assert body["timestamp"].endswith("Z")
    assert body["checks"]["database"]["details"]["items"] == 1
    assert body["checks"]["database"]["details"]["purchase_orders"] == 0
    tz = body["checks"]["timezone"]["details"]
    assert tz["zone"] == "Asia/Jakarta"
    assert tz["offset"] == "+07:00"


def test_version(client):
    body = client.get("/api/version").get_json()
    assert body["api_version"] == "1.0.0"
    assert body["timezone"] == "Asia/Jakarta"


def test_unknown_route_uses_error_envelope(client):
    resp = client.get("/api/v1/nothing-here")

    assert resp.status_code == 404
    body = resp.get_json()
    assert body["status"] == 404
    assert body["path"] == "/api/v1/nothing-here"


def test_wrong_method_uses_error_envelope(client):
    resp = client.patch("/api/v1/items/1", json={})
    assert resp.status_code == 405
    assert resp.get_json()["status"] == 405


def test_cors_header_for_known_origin(client):
    resp = client.get("/api/version", headers={"Origin": "http://localhost:5173"})
    assert resp.headers["Access-Control-Allow-Origin"] == "http://localhost:5173"

    resp = client.get("/api/version", headers={"Origin": "http://evil.example"})
    assert "Access-Control-Allow-Origin" not in resp.headers


class TestCli:
    def test_timezone_command(self, app):
        result = app.test_cli_runner().invoke(args=["system", "timezone"])

        assert result.exit_code == 0
        assert "Asia/Jakarta" in result.output
        assert "+07:00" in result.output

    def test_seed_demo(self, app, db_session):
        runner = app.test_cli_runner()

        result = runner.invoke(args=["seed", "demo"])
        assert result.exit_code == 0, result.output
        assert db.session.query(Item).count() == 2
        assert db.session.query(User).count() == 1

        po = db.session.query(PurchaseOrderHeader).one()
        assert po.total_price == 10 * 3000 + 2 * 55000
        assert po.total_cost == 10 * 2000 + 2 * 48000

        again = runner.invoke(args=["seed", "demo"])
        assert again.exit_code == 0
        assert "SKIP" in again.output
        assert db.session.query(PurchaseOrderHeader).count() == 1

    def test_reset_db_requires_confirmation(self, app, item_a):
        result = app.test_cli_runner().invoke(args=["system", "reset-db"], input="n\n")

        assert result.exit_code != 0
        assert db.session.query(Item).count() == 1

    def test_reset_db_with_yes(self, app, item_a):
        db.session.remove()
        result = app.test_cli_runner().invoke(args=["system", "reset-db", "--yes"])

        assert result.exit_code == 0, result.output
        assert db.session.query(Item).count() == 0
