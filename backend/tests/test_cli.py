"""
Tests for the operator CLI.
"""

from typer.testing import CliRunner

from cli import app

runner = CliRunner()


class TestReportCommand:
    def test_report_prints_daily_report(self, lifecycle, order_at_table_5):
        result = runner.invoke(app, ["report"])

        assert result.exit_code == 0
        assert "Daily Report - " in result.output
        assert "Total Orders: 1" in result.output

    def test_report_to_file(self, order_at_table_5, tmp_path):
        target = tmp_path / "report.txt"

        result = runner.invoke(app, ["report", "--output", str(target)])

        assert result.exit_code == 0
        assert target.read_text(encoding="utf-8").startswith("Daily Report - ")

    def test_report_bad_day(self, db_session):
        result = runner.invoke(app, ["report", "--day", "yesterday"])
        assert result.exit_code == 1


class TestReconcileCommand:
    def test_clean(self, order_at_table_5):
        result = runner.invoke(app, ["reconcile"])

        assert result.exit_code == 0
        assert "No drift found" in result.output

    def test_repairs_stale_table(self, store, order_at_table_5):
        store.update_order(order_at_table_5.order_id, {"payment_status": "paid", "status": "completed"})

        result = runner.invoke(app, ["reconcile"])

        assert result.exit_code == 0
        assert "stale_occupancy" in result.output
        assert store.get_table("5").status == "vacant"

    def test_anomalies_exit_code(self, store, order_at_table_5):
        store.update_order(order_at_table_5.order_id, {"status": "completed"})

        result = runner.invoke(app, ["reconcile", "--order-id", order_at_table_5.order_id])

        assert result.exit_code == 2
        assert "completed_unpaid" in result.output


class TestOtherCommands:
    def test_sync_without_webhook(self, db_session):
        result = runner.invoke(app, ["sync"])
        assert result.exit_code == 1
        assert "not configured" in result.output

    def test_version(self):
        result = runner.invoke(app, ["version"])
        assert result.exit_code == 0
        assert "Restaurant POS Version" in result.output
