"""
Integration tests for the command line interface.

Tests cover:
1. Configuration display and dotenv overrides
2. Single-curve quotes
3. Scripted simulations
"""

import logging

import pytest
from click.testing import CliRunner

from curvevault.cli.main import cli, format_units
from curvevault.utils.logger import setup_logging


@pytest.fixture
def runner(monkeypatch):
    """CLI runner with a clean environment; rebinds logging to the real stdout afterwards."""
    import os

    for key in list(os.environ):
        if key.startswith("CURVEVAULT_"):
            monkeypatch.delenv(key)
    yield CliRunner()
    setup_logging(level=logging.WARNING)


class TestFormatUnits:
    """Tests for amount rendering."""

    def test_whole_and_fraction(self):
        assert format_units(1_500_000_000_000_000_000) == "1.500000"

    def test_negative(self):
        assert format_units(-10**18) == "-1.000000"


class TestStats:
    """Tests for the stats command."""

    def test_defaults(self, runner):
        result = runner.invoke(cli, ["stats"])
        assert result.exit_code == 0
        assert "twav_size: 6" in result.output
        assert "primary_reserve_ratio: 250000" in result.output

    def test_env_file(self, runner, tmp_path):
        env_file = tmp_path / "vault.env"
        env_file.write_text("CURVEVAULT_TWAV_SIZE=4\n")
        result = runner.invoke(cli, ["--env-file", str(env_file), "stats"])
        assert result.exit_code == 0
        assert "twav_size: 4" in result.output

    def test_log_file_in_configured_dir(self, runner, tmp_path):
        env_file = tmp_path / "vault.env"
        env_file.write_text(f"CURVEVAULT_LOG_DIR={tmp_path / 'logs'}\n")
        result = runner.invoke(cli, ["--env-file", str(env_file), "--log-file", "--debug", "simulate"])
        assert result.exit_code == 0, result.output
        assert "Vault" in (tmp_path / "logs" / "curvevault.log").read_text()


class TestQuotes:
    """Tests for the quote commands."""

    def test_quote_buy(self, runner):
        result = runner.invoke(
            cli,
            ["quote-buy", "--supply", str(10**24), "--reserve", str(25 * 10**18), "--ratio", "250000", "--amount", str(10**18)],
        )
        assert result.exit_code == 0
        assert "Tokens out:" in result.output
        assert "Price before: 0.000100" in result.output

    def test_quote_sell(self, runner):
        result = runner.invoke(
            cli,
            ["quote-sell", "--supply", str(10**24), "--reserve", str(25 * 10**18), "--ratio", "250000", "--tokens", str(5 * 10**23)],
        )
        assert result.exit_code == 0
        assert "Amount out: 23437500000000000000" in result.output

    def test_invalid_ratio(self, runner):
        result = runner.invoke(
            cli,
            ["quote-buy", "--supply", "1000", "--reserve", "1000", "--ratio", "0", "--amount", "10"],
        )
        assert result.exit_code == 2


class TestSimulate:
    """Tests for scripted scenarios."""

    @pytest.mark.parametrize("scenario", ["trading", "rejection", "redemption"])
    def test_scenarios_complete(self, runner, scenario):
        result = runner.invoke(cli, ["simulate", "--scenario", scenario])
        assert result.exit_code == 0, result.output
        assert "Simulation complete!" in result.output

    def test_rejection(self, runner):
        result = runner.invoke(cli, ["simulate", "--scenario", "rejection"])
        assert "✓ Buyout rejected" in result.output
        assert "status: INITIALIZED" in result.output
        assert "Bidder withdrew unsettled bid" in result.output

    def test_redemption(self, runner):
        result = runner.invoke(cli, ["simulate", "--scenario", "redemption"])
        assert "✓ Bidder withdrew the asset" in result.output
        assert "status: BOUGHT_OUT" in result.output

    def test_rejection_with_small_buffer(self, runner, tmp_path):
        env_file = tmp_path / "vault.env"
        env_file.write_text("CURVEVAULT_TWAV_SIZE=4\n")
        result = runner.invoke(cli, ["--env-file", str(env_file), "simulate", "--scenario", "rejection"])
        assert result.exit_code == 0, result.output
        assert "✓ Buyout rejected" in result.output

    def test_unknown_scenario(self, runner):
        result = runner.invoke(cli, ["simulate", "--scenario", "nope"])
        assert result.exit_code == 2


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
