"""CLI tests."""

import json

import pytest
from click.testing import CliRunner

from crashsim.__main__ import cli


RUN_ARGS = [
    "run", "--seed", "5", "--runs", "2", "--observations", "60", "--assets", "2",
    "--event-duration", "6", "--frequency", "daily", "-o", "result.json",
]


class TestDefaults:
    def test_prints_default_parameters(self):
        runner = CliRunner()
        with runner.isolated_filesystem():
            result = runner.invoke(cli, ["defaults"])
            assert result.exit_code == 0
            data = json.loads(result.output)
            assert data["nAssets"] == 5
            assert data["extremeEventDuration"] == 1440


class TestRun:
    def test_writes_result_file(self):
        runner = CliRunner()
        with runner.isolated_filesystem():
            result = runner.invoke(cli, RUN_ARGS)
            assert result.exit_code == 0, result.output
            assert "Wrote 2 runs" in result.output

            with open("result.json", encoding="utf-8") as f:
                payload = json.load(f)
            assert len(payload["simulations"]) == 2
            assert payload["params"]["randomSeed"] == 5
            assert payload["summary"]["nRuns"] == 2
            assert "extremeEventRate" in payload["summary"]

    def test_deterministic_output(self):
        runner = CliRunner()
        with runner.isolated_filesystem():
            runner.invoke(cli, RUN_ARGS)
            with open("result.json", encoding="utf-8") as f:
                first = json.load(f)
            runner.invoke(cli, RUN_ARGS)
            with open("result.json", encoding="utf-8") as f:
                second = json.load(f)
            assert first["simulations"] == second["simulations"]

    def test_params_file_with_overrides(self):
        runner = CliRunner()
        with runner.isolated_filesystem():
            with open("params.json", "w", encoding="utf-8") as f:
                json.dump({
                    "randomSeed": 1,
                    "nSimulations": 1,
                    "nObservations": 40,
                    "nCurrencies": 4,
                    "extremeEventDuration": 4,
                    "observationFrequency": "hourly",
                }, f)
            result = runner.invoke(cli, ["run", "-p", "params.json", "--seed", "9", "-o", "out.json"])
            assert result.exit_code == 0, result.output

            with open("out.json", encoding="utf-8") as f:
                payload = json.load(f)
            assert payload["params"]["randomSeed"] == 9
            assert payload["params"]["nAssets"] == 4
            assert len(payload["simulations"][0]["prices"]) == 4

    def test_assets_option_overrides_currency_alias(self):
        runner = CliRunner()
        with runner.isolated_filesystem():
            with open("params.json", "w", encoding="utf-8") as f:
                json.dump({
                    "nSimulations": 1,
                    "nObservations": 40,
                    "nCurrencies": 4,
                    "extremeEventDuration": 4,
                    "observationFrequency": "daily",
                }, f)
            result = runner.invoke(cli, ["run", "-p", "params.json", "--assets", "2", "-o", "out.json"])
            assert result.exit_code == 0, result.output

            with open("out.json", encoding="utf-8") as f:
                payload = json.load(f)
            assert payload["params"]["nAssets"] == 2
            assert len(payload["simulations"][0]["prices"]) == 2

    def test_option_overrides_snake_case_key(self):
        runner = CliRunner()
        with runner.isolated_filesystem():
            with open("params.json", "w", encoding="utf-8") as f:
                json.dump({
                    "random_seed": 1,
                    "n_simulations": 1,
                    "n_observations": 40,
                    "n_assets": 1,
                    "extreme_event_duration": 4,
                    "observation_frequency": "daily",
                }, f)
            result = runner.invoke(cli, ["run", "-p", "params.json", "--seed", "3", "-o", "out.json"])
            assert result.exit_code == 0, result.output

            with open("out.json", encoding="utf-8") as f:
                payload = json.load(f)
            assert payload["params"]["randomSeed"] == 3

    @pytest.mark.parametrize("content", ["{not json", "[1, 2, 3]"])
    def test_unreadable_params_file(self, content):
        runner = CliRunner()
        with runner.isolated_filesystem():
            with open("params.json", "w", encoding="utf-8") as f:
                f.write(content)
            result = runner.invoke(cli, ["run", "-p", "params.json"])
            assert result.exit_code == 2
            assert "--params" in result.output

    def test_invalid_parameter(self):
        runner = CliRunner()
        with runner.isolated_filesystem():
            result = runner.invoke(cli, ["run", "--assets", "0"])
            assert result.exit_code == 2
            assert "nAssets" in result.output
