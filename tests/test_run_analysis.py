"""
Tests for the command-line runner.
"""

import json

import pytest

import run_analysis


JOURNAL = """symbol,openTime,closeTime,profit,commission,type
EURUSD,2024-01-01T09:00:00Z,2024-01-01T11:00:00Z,120,-2,buy
EURUSD,2024-01-02T09:00:00Z,2024-01-02T10:00:00Z,-45,-2,sell
GBPUSD,2024-01-03T14:00:00Z,2024-01-03T18:00:00Z,80,-2,buy
EURUSD,2024-01-08T09:00:00Z,2024-01-08T09:30:00Z,-20,-2,buy
"""


@pytest.fixture
def journal(tmp_path):
    path = tmp_path / "journal.csv"
    path.write_text(JOURNAL)
    return path


def test_main_prints_report_and_writes_json(journal, tmp_path, capsys) -> None:
    out = tmp_path / "metrics.json"

    code = run_analysis.main(["--trades", str(journal), "--balance", "5000", "--json", str(out)])

    assert code == 0
    printed = capsys.readouterr().out
    assert "TRADING PERFORMANCE REPORT" in printed
    assert "METRIC RATINGS" in printed
    assert "STRATEGY PROFILE" in printed
    # Profit factor after commission is 196 / 69
    assert "* Healthy profit/loss balance" in printed
    assert "> Hold winners longer" in printed

    data = json.loads(out.read_text())
    assert data["total_trades"] == 4
    assert data["winning_trades"] == 2
    assert data["buy_and_hold"]["primary_symbol"] == "EURUSD"


def test_main_options(journal) -> None:
    code = run_analysis.main([
        "-t", str(journal), "--annualize-volatility", "--daily-benchmark", "-r", "0.04", "-v"
    ])
    assert code == 0


def test_missing_file_fails(tmp_path) -> None:
    assert run_analysis.main(["--trades", str(tmp_path / "absent.csv")]) == 1


def test_invalid_balance_fails(journal) -> None:
    assert run_analysis.main(["--trades", str(journal), "--balance", "0"]) == 1


def test_trades_argument_is_required() -> None:
    with pytest.raises(SystemExit):
        run_analysis.main([])
