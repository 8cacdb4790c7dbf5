"""End-to-end tests for the gastos CLI against a temporary local store."""

from pathlib import Path

import pytest
from typer.testing import CliRunner

from gastos.cli import app
from gastos.domain.models import Month
from gastos.store.backends import LocalBackend
from gastos.store.schema import get_db_path

runner = CliRunner()


@pytest.fixture(autouse=True)
def isolated_home(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("COLUMNS", "200")
    monkeypatch.delenv("GASTOS_SUPABASE_URL", raising=False)
    monkeypatch.delenv("GASTOS_SUPABASE_KEY", raising=False)
    return tmp_path


def stored(month: str) -> list:
    records, _ = LocalBackend(get_db_path()).load_month(Month(month))
    return records


class TestInit:
    """Tests for the init command."""

    def test_creates_store_and_config(self, isolated_home: Path) -> None:
        """Should create both files."""
        result = runner.invoke(app, ["init"])

        assert result.exit_code == 0
        assert (isolated_home / "data" / "gastos" / "gastos.db").exists()
        assert (isolated_home / "config" / "gastos" / "config.toml").exists()

    def test_refuses_to_overwrite(self) -> None:
        """Should need --force the second time."""
        runner.invoke(app, ["init"])

        assert runner.invoke(app, ["init"]).exit_code == 1
        assert runner.invoke(app, ["init", "--force"]).exit_code == 0


class TestAdd:
    """Tests for add and add-range."""

    def test_add_then_show(self) -> None:
        """Should list the new expense and count it in the totals."""
        result = runner.invoke(app, ["add", "Internet", "99,90", "--month", "2024-03"])
        assert result.exit_code == 0
        assert "Expense added" in result.output

        result = runner.invoke(app, ["show", "--month", "2024-03"])

        assert result.exit_code == 0
        assert "Internet" in result.output
        assert "R$ 99,90" in result.output

    def test_invalid_amount(self) -> None:
        """Should refuse and store nothing."""
        result = runner.invoke(app, ["add", "Internet", "abc", "--month", "2024-03"])

        assert result.exit_code == 1
        assert "Invalid amount" in result.output
        assert stored("2024-03") == []

    def test_unknown_category(self) -> None:
        """Should refuse categories outside the configured list."""
        result = runner.invoke(app, ["add", "Cinema", "30", "--category", "lazer", "--month", "2024-03"])

        assert result.exit_code == 1
        assert stored("2024-03") == []

    def test_range(self) -> None:
        """Should add one linked record per month."""
        result = runner.invoke(app, ["add-range", "Aluguel", "1500,00", "--from", "2024-11", "--to", "2025-01"])

        assert result.exit_code == 0
        for month in ("2024-11", "2024-12", "2025-01"):
            records = stored(month)
            assert len(records) == 1
            assert records[0].amount_cents == 150000
        assert stored("2024-11")[0].origin.series_id == stored("2025-01")[0].origin.series_id

    def test_inverted_range(self) -> None:
        """Should fail without creating anything."""
        result = runner.invoke(app, ["add-range", "Aluguel", "1500,00", "--from", "2024-03", "--to", "2024-01"])

        assert result.exit_code == 1
        assert "Invalid range" in result.output
        for month in ("2024-01", "2024-02", "2024-03"):
            assert stored(month) == []


class TestShow:
    """Tests for show."""

    def test_empty_month(self) -> None:
        """Should show seed income and no expenses."""
        result = runner.invoke(app, ["show", "--month", "2024-03"])

        assert result.exit_code == 0
        assert "R$ 7.096,40" in result.output
        assert "No expenses recorded" in result.output

    def test_grouped(self) -> None:
        """Should merge same-description expenses into one row."""
        runner.invoke(app, ["add", "Uber", "10", "--category", "aleatorios", "--month", "2024-03"])
        runner.invoke(app, ["add", "uber ", "15", "--category", "aleatorios", "--month", "2024-03"])

        result = runner.invoke(app, ["show", "--month", "2024-03", "--grouped"])

        assert result.exit_code == 0
        assert "R$ 25,00" in result.output

    def test_bad_month(self) -> None:
        """Should reject unreadable months."""
        assert runner.invoke(app, ["show", "--month", "someday"]).exit_code == 1


class TestChanges:
    """Tests for delete, delete-group, recategorize and clear."""

    def test_delete_by_prefix(self) -> None:
        """Should delete the expense matching an id prefix."""
        runner.invoke(app, ["add", "Padaria", "12", "--category", "mercado", "--month", "2024-03"])
        record_id = stored("2024-03")[0].id

        result = runner.invoke(app, ["delete", record_id[:8], "--month", "2024-03"])

        assert result.exit_code == 0
        assert stored("2024-03") == []

    def test_delete_missing(self) -> None:
        """Should fail for unknown ids."""
        assert runner.invoke(app, ["delete", "nope", "--month", "2024-03"]).exit_code == 1

    def test_delete_group(self) -> None:
        """Should delete every member of the group and nothing else."""
        runner.invoke(app, ["add", "Academia", "90", "--month", "2024-03"])
        runner.invoke(app, ["add", "ACADEMIA", "90", "--month", "2024-03"])
        runner.invoke(app, ["add", "Luz", "180", "--month", "2024-03"])

        result = runner.invoke(app, ["delete-group", "academia", "--month", "2024-03"])

        assert result.exit_code == 0
        assert [r.description for r in stored("2024-03")] == ["Luz"]

    def test_recategorize(self) -> None:
        """Should move the group to the new category."""
        runner.invoke(app, ["add", "Ana", "200", "--category", "aleatorios", "--month", "2024-03"])

        result = runner.invoke(
            app, ["recategorize", "Ana", "emprestado", "--category", "aleatorios", "--month", "2024-03"]
        )

        assert result.exit_code == 0
        assert stored("2024-03")[0].category == "emprestado"

    def test_clear(self) -> None:
        """Should empty only the chosen month."""
        runner.invoke(app, ["add-range", "Gym", "90", "--from", "2024-03", "--to", "2024-04"])

        result = runner.invoke(app, ["clear", "--month", "2024-03", "--yes"])

        assert result.exit_code == 0
        assert stored("2024-03") == []
        assert len(stored("2024-04")) == 1

    def test_clear_declined(self) -> None:
        """Should keep everything when the prompt is declined."""
        runner.invoke(app, ["add", "Gym", "90", "--month", "2024-03"])

        result = runner.invoke(app, ["clear", "--month", "2024-03"], input="n\n")

        assert result.exit_code == 0
        assert len(stored("2024-03")) == 1


class TestIncome:
    """Tests for the income command."""

    def test_set_and_show(self) -> None:
        """Should store the new amount and show it."""
        result = runner.invoke(app, ["income", "salary", "5000,00"])
        assert result.exit_code == 0

        result = runner.invoke(app, ["income"])

        assert result.exit_code == 0
        assert "R$ 5.000,00" in result.output

    def test_negative_rejected(self) -> None:
        """Should refuse negative income."""
        assert runner.invoke(app, ["income", "food", "--", "-10"]).exit_code == 1

    def test_unknown_field(self) -> None:
        """Should refuse fields that don't exist."""
        assert runner.invoke(app, ["income", "bonus", "10"]).exit_code == 1


class TestMonths:
    """Tests for the months command."""

    def test_window(self) -> None:
        """Should list the months around the center."""
        result = runner.invoke(app, ["months", "--center", "2024-03"])

        assert result.exit_code == 0
        assert "2022-03" in result.output
        assert "2025-03" in result.output
        assert "março de 2024" in result.output
