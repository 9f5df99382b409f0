"""
tests/test_play.py - CLI Tests

Validates:
- run prints the table and exits 2 on a bad trial count
- trial shows one game
- validate-config passes good files and fails bad ones
- scenarios lists the presets
"""

import json

import pytest
from click.testing import CliRunner

from play import cli, main


@pytest.fixture
def runner():
    return CliRunner()


class TestRun:
    """Test the run command."""

    def test_json_output(self, runner):
        result = runner.invoke(cli, ["run", "-n", "200", "--seed", "1", "-o", "json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["config"]["n_trials"] == 200
        assert [row["strategy"] for row in data["table"]] == ["stay", "switch"]

    def test_rich_output(self, runner):
        result = runner.invoke(cli, ["run", "-n", "100", "--seed", "2"])
        assert result.exit_code == 0
        assert "stay" in result.output
        assert "switch" in result.output

    @pytest.mark.parametrize("n", ["0", "-5"])
    def test_invalid_trials(self, runner, n):
        """Non-positive trial count exits with code 2."""
        result = runner.invoke(cli, ["run", "-n", n, "-o", "json"])
        assert result.exit_code == 2
        assert "error" in json.loads(result.output)

    def test_invalid_precision(self, runner):
        result = runner.invoke(cli, ["run", "-n", "10", "-p", "9"])
        assert result.exit_code == 2

    def test_scenario(self, runner):
        result = runner.invoke(cli, ["run", "--scenario", "small", "-o", "json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["config"]["scenario_name"] == "SMALL"
        assert data["config"]["n_trials"] == 30

    def test_config_and_receipts(self, runner, tmp_path):
        config_path = tmp_path / "batch.yaml"
        config_path.write_text("n_trials: 40\nrandom_seed: 5\nscenario_name: FILE\n")
        ledger = tmp_path / "receipts.jsonl"
        result = runner.invoke(cli, ["run", "-c", str(config_path), "-r", str(ledger), "-o", "json"])
        assert result.exit_code == 0
        assert json.loads(result.output)["config"]["scenario_name"] == "FILE"
        receipts = [json.loads(line) for line in ledger.read_text().splitlines()]
        assert [r["receipt_type"] for r in receipts] == ["config_loaded", "batch_config", "batch_result"]
        assert receipts[-1]["n_trials"] == 40
        assert receipts[-1]["config_hash"] == receipts[1]["payload_hash"]

    def test_receipts_without_config(self, runner, tmp_path):
        """Without --config the ledger holds the batch_config and batch_result receipts."""
        ledger = tmp_path / "receipts.jsonl"
        result = runner.invoke(cli, ["run", "-n", "20", "--seed", "4", "-r", str(ledger)])
        assert result.exit_code == 0
        types = [json.loads(line)["receipt_type"] for line in ledger.read_text().splitlines()]
        assert types == ["batch_config", "batch_result"]

    def test_malformed_config(self, runner, tmp_path):
        """A config file that does not parse exits with code 2."""
        path = tmp_path / "bad.yaml"
        path.write_text("n_trials: [1, 2\n")
        result = runner.invoke(cli, ["run", "-c", str(path), "-o", "json"])
        assert result.exit_code == 2
        assert "Cannot parse" in json.loads(result.output)["error"]


class TestTrial:
    """Test the trial command."""

    def test_json(self, runner):
        result = runner.invoke(cli, ["trial", "--seed", "3", "-o", "json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert sorted(data["doors"]) == ["car", "goat", "goat"]
        assert data["revealed_door"] != data["initial_pick"]

    def test_rich(self, runner):
        result = runner.invoke(cli, ["trial", "--seed", "3"])
        assert result.exit_code == 0
        assert "Single Trial" in result.output


class TestValidateConfig:
    """Test the validate-config command."""

    def test_passes(self, runner, tmp_path):
        path = tmp_path / "ok.yaml"
        path.write_text("n_trials: 100\n")
        result = runner.invoke(cli, ["validate-config", str(path)])
        assert result.exit_code == 0
        assert "PASSED" in result.output

    def test_fails(self, runner, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"n_trials": 100, "precision": 9}))
        result = runner.invoke(cli, ["validate-config", str(path), "-o", "json"])
        assert result.exit_code == 2
        assert json.loads(result.output)["valid"] is False

    def test_malformed_yaml(self, runner, tmp_path):
        """Unparseable YAML fails validation instead of crashing."""
        path = tmp_path / "bad.yaml"
        path.write_text("n_trials: [1, 2\n")
        result = runner.invoke(cli, ["validate-config", str(path), "-o", "json"])
        assert result.exit_code == 2
        data = json.loads(result.output)
        assert data["valid"] is False
        assert "Cannot parse" in data["error"]

    def test_malformed_yaml_main(self, tmp_path, monkeypatch):
        """main() turns an unparseable file into exit code 2."""
        path = tmp_path / "bad.yaml"
        path.write_text("n_trials: [1, 2\n")
        monkeypatch.setattr("sys.argv", ["play.py", "validate-config", str(path), "-o", "json"])
        assert main() == 2


class TestScenarios:
    """Test the scenarios command."""

    def test_lists_presets(self, runner):
        result = runner.invoke(cli, ["scenarios"])
        assert result.exit_code == 0
        for name in ("BASELINE", "SMALL", "CONVERGENCE", "PARALLEL"):
            assert name in result.output
