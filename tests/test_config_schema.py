"""
tests/test_config_schema.py - Config Loader Tests

Validates:
- JSON and YAML files load into a frozen GameConfig
- Missing optional fields take defaults without warnings
- Out-of-range knobs and unknown fields heal with a UserWarning
- strict=True raises instead of healing
- n_trials is never healed
"""

import json
import warnings

import pytest

import config_schema
from game.types_config import SCENARIO_SMALL, GameConfig
from game.validation import InvalidTrialCount


class TestFromDict:
    """Test from_dict and validation."""

    def test_minimal_no_warnings(self):
        """Only n_trials given: defaults fill the rest quietly."""
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            config = config_schema.from_dict({"n_trials": 500})
        assert isinstance(config, GameConfig)
        assert config.n_trials == 500
        assert config.random_seed == 42
        assert config.precision == 2
        assert config.scenario_name == "CUSTOM"

    def test_full_config(self):
        config = config_schema.from_dict({
            "n_trials": 200, "random_seed": None, "n_workers": 2,
            "precision": 4, "tenant_id": "lab", "scenario_name": "MINE",
        })
        assert config.random_seed is None
        assert config.n_workers == 2
        assert config.precision == 4
        assert config.tenant_id == "lab"

    def test_precision_clamped(self):
        """precision above the maximum is clamped with a warning."""
        with pytest.warns(UserWarning, match="precision"):
            config = config_schema.from_dict({"n_trials": 10, "precision": 9})
        assert config.precision == 6

    def test_workers_clamped(self):
        with pytest.warns(UserWarning, match="n_workers"):
            config = config_schema.from_dict({"n_trials": 10, "n_workers": 0})
        assert config.n_workers == 1

    def test_wrong_type_replaced(self):
        with pytest.warns(UserWarning, match="n_workers"):
            config = config_schema.from_dict({"n_trials": 10, "n_workers": "two"})
        assert config.n_workers == 1

    def test_unknown_field_dropped(self):
        with pytest.warns(UserWarning, match="unknown field: doors"):
            config = config_schema.from_dict({"n_trials": 10, "doors": 4})
        assert not hasattr(config, "doors")

    def test_strict_raises(self):
        """strict=True refuses to heal."""
        with pytest.raises(ValueError, match="validation failed"):
            config_schema.from_dict({"n_trials": 10, "precision": 9}, strict=True)

    @pytest.mark.parametrize("n", [0, -1, 2.5, "10", None, True])
    def test_bad_trials_never_healed(self, n):
        with pytest.raises(InvalidTrialCount):
            config_schema.from_dict({"n_trials": n})

    def test_missing_trials(self):
        with pytest.raises(InvalidTrialCount):
            config_schema.from_dict({"precision": 2})


class TestLoad:
    """Test load from files."""

    def test_load_yaml(self, tmp_path):
        path = tmp_path / "batch.yaml"
        path.write_text("n_trials: 250\nrandom_seed: 7\nscenario_name: YAML\n")
        config = config_schema.load(path)
        assert config.n_trials == 250
        assert config.random_seed == 7
        assert config.scenario_name == "YAML"

    def test_load_json(self, tmp_path):
        path = tmp_path / "batch.json"
        path.write_text(json.dumps({"n_trials": 300, "n_workers": 3}))
        config = config_schema.load(path)
        assert config.n_trials == 300
        assert config.n_workers == 3

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            config_schema.load(tmp_path / "absent.yaml")

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- 1\n- 2\n")
        with pytest.raises(ValueError, match="mapping"):
            config_schema.load(path)

    def test_malformed_yaml(self, tmp_path):
        """YAML parse errors surface as ValueError."""
        path = tmp_path / "bad.yaml"
        path.write_text("n_trials: [1, 2\n")
        with pytest.raises(ValueError, match="Cannot parse"):
            config_schema.load(path)

    def test_malformed_json(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text('{"n_trials": ')
        with pytest.raises(ValueError, match="Cannot parse"):
            config_schema.load(path)

    def test_load_with_receipt(self, tmp_path):
        """The config_loaded receipt is handed back with the config."""
        path = tmp_path / "batch.yaml"
        path.write_text("n_trials: 60\ntenant_id: lab\n")
        config, receipt = config_schema.load_with_receipt(path)
        assert config.n_trials == 60
        assert receipt["receipt_type"] == "config_loaded"
        assert receipt["n_trials"] == 60
        assert receipt["path"] == str(path)
        assert receipt["tenant_id"] == "lab"

    def test_save_then_load(self, tmp_path):
        """A saved config loads back equal."""
        original = GameConfig(n_trials=123, random_seed=9, precision=3, scenario_name="SAVED")
        path = tmp_path / "saved.yml"
        config_schema.save(original, path)
        assert config_schema.load(path) == original


class TestHelpers:
    """Test default, to_dict and schema."""

    def test_default_case_insensitive(self):
        assert config_schema.default("small") is SCENARIO_SMALL

    def test_default_unknown(self):
        with pytest.raises(ValueError, match="Unknown scenario"):
            config_schema.default("HUGE")

    def test_to_dict(self):
        data = config_schema.to_dict(GameConfig(n_trials=5))
        assert data["n_trials"] == 5
        assert set(data) == {"n_trials", "random_seed", "n_workers", "precision",
                             "tenant_id", "scenario_name"}

    def test_schema_is_copy(self):
        """Mutating the returned schema leaves the module schema alone."""
        first = config_schema.schema()
        first["properties"].clear()
        assert "n_trials" in config_schema.schema()["properties"]
