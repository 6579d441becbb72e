"""Tests for the command line harness."""

from pathlib import Path

import pytest

from cofinance.main import main
from cofinance.models import Account, Subscription
from cofinance.store import RecordStore


def run(db_url: str, *args: str) -> int:
    return main(["--database", db_url, *args])


class TestCommands:
    """End-to-end runs against a temp database."""

    def test_seed_then_summary(self, db_url: str, capsys: pytest.CaptureFixture[str]) -> None:
        assert run(db_url, "seed") == 0
        assert run(db_url, "seed") == 0
        out = capsys.readouterr().out
        assert "Datos de ejemplo creados" in out
        assert "ya tiene datos" in out

        assert run(db_url, "summary") == 0
        out = capsys.readouterr().out
        # 25430.50 - 2150 + 850 + 15000
        assert "39,130.50" in out

    def test_account_and_transactions(self, db_url: str, capsys: pytest.CaptureFixture[str]) -> None:
        assert run(db_url, "add-account", "Main", "--balance", "1000") == 0
        assert run(db_url, "add-transaction", "Coffee", "50", "--account", "Main", "--date", "2026-10-01") == 0
        capsys.readouterr()

        assert run(db_url, "transactions", "--account", "Main") == 0
        out = capsys.readouterr().out
        assert "Coffee" in out
        assert "Gastos: 50.00" in out
        assert "Ingresos: 0.00" in out

        assert run(db_url, "transactions", "--by-month") == 0
        assert "== " in capsys.readouterr().out

    def test_accounts_listing(self, db_url: str, capsys: pytest.CaptureFixture[str]) -> None:
        run(db_url, "add-account", "Card", "--type", "Credit", "--balance", "-20")
        run(db_url, "add-account", "Main", "--balance", "100")
        capsys.readouterr()

        assert run(db_url, "accounts", "--by-balance") == 0
        out = capsys.readouterr().out
        assert out.index("Main") < out.index("Card")
        assert "80.00" in out

    def test_update_and_delete(self, db_url: str, capsys: pytest.CaptureFixture[str]) -> None:
        run(db_url, "add-account", "Main")
        account_id = capsys.readouterr().out.strip()

        assert run(db_url, "update-account", account_id, "--balance", "7") == 0
        assert run(db_url, "delete", "account", account_id) == 0
        assert run(db_url, "delete", "account", account_id) == 0

        store = RecordStore.open(db_url, link_balances=False)
        try:
            assert store.count(Account) == 0
        finally:
            store.close()

    def test_update_unknown_account_fails(self, db_url: str, capsys: pytest.CaptureFixture[str]) -> None:
        assert run(db_url, "update-account", "missing", "--name", "x") == 1
        assert "missing" in capsys.readouterr().err

    def test_negative_amount_fails(self, db_url: str, capsys: pytest.CaptureFixture[str]) -> None:
        assert run(db_url, "add-transaction", "Bad", "-3") == 1
        assert "ERROR" in capsys.readouterr().err

    def test_subscription_charge(self, db_url: str, capsys: pytest.CaptureFixture[str]) -> None:
        run(db_url, "add-subscription", "Gym", "40", "--cycle", "Weekly", "--next", "2026-10-20")
        sub_id = capsys.readouterr().out.strip()

        assert run(db_url, "subscriptions") == 0
        assert "173.20" in capsys.readouterr().out

        assert run(db_url, "charge", sub_id) == 0
        store = RecordStore.open(db_url, link_balances=False)
        try:
            assert store.get(Subscription, sub_id).next_payment_date.day == 27
            assert len(store.fetch_transactions()) == 1
        finally:
            store.close()

    def test_link_balances_and_recalculate(self, db_url: str, capsys: pytest.CaptureFixture[str]) -> None:
        run(db_url, "add-account", "Main", "--balance", "500")
        run(db_url, "--link-balances", "add-transaction", "Pay", "100", "--income", "--account", "Main")
        capsys.readouterr()

        assert run(db_url, "recalculate") == 0
        assert "100.00" in capsys.readouterr().out

    def test_export(self, db_url: str, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        run(db_url, "seed")
        out_file = tmp_path / "tx.csv"

        assert run(db_url, "export", "transactions", str(out_file)) == 0
        assert "5 filas" in capsys.readouterr().out
        assert out_file.exists()

    def test_unopenable_database(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        url = f"sqlite:///{tmp_path / 'nope' / 'db.sqlite'}"

        assert run(url, "init") == 2
        assert "ERROR" in capsys.readouterr().err

    def test_config_set(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch,
                        capsys: pytest.CaptureFixture[str]) -> None:
        monkeypatch.setenv("DATE_FORMAT", "dd/MM/yyyy")
        env_file = tmp_path / ".env"

        assert main(["config", "set", "DATE_FORMAT", "yyyy-MM-dd", "--env-file", str(env_file)]) == 0
        assert "yyyy-MM-dd" in env_file.read_text()
