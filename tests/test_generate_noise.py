"""
Tests for the generate_noise runner.
"""

import json
import pytest
from pathlib import Path
import sys

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from common.config import NoiseConfig, RandomMode, SearchMethod
from generate_noise import main, parse_args, build_config


class TestBuildConfig:
    """Test command-line / JSON config merging."""

    def test_defaults(self):
        config = build_config(parse_args([]))
        assert config == NoiseConfig()

    def test_seed_implies_seeded(self):
        config = build_config(parse_args(["--seed", "9"]))
        assert config.seed == 9
        assert config.random_mode == RandomMode.SEEDED

    def test_flags_override_json(self, tmp_path):
        path = tmp_path / "noise.json"
        NoiseConfig(size=16, grid_size=2, method=SearchMethod.KDTREE).save(path)

        config = build_config(parse_args(["--config", str(path), "--grid-size", "4"]))
        assert config.size == 16
        assert config.grid_size == 4
        assert config.method == SearchMethod.KDTREE


class TestMain:
    """Test the runner end to end."""

    def test_writes_summary(self, tmp_path):
        summary = tmp_path / "outputs" / "summary.json"
        main(["--size", "8", "--grid-size", "2", "--seed", "3", "--summary", str(summary)])

        with open(summary) as f:
            data = json.load(f)
        assert data["size"] == 8
        assert data["grid_size"] == 2
        assert data["seed"] == 3
        assert data["n_feature_points"] == 8
        assert data["value_max"] == 1.0

    def test_method_flag(self, tmp_path):
        summary = tmp_path / "summary.json"
        main(["-s", "6", "-g", "3", "-m", "brute_force", "--summary", str(summary)])

        with open(summary) as f:
            data = json.load(f)
        assert data["method"] == "brute_force"

    def test_invalid_grid_exits(self):
        with pytest.raises(SystemExit) as exc:
            main(["--size", "8", "--grid-size", "0"])
        assert exc.value.code == 1

    def test_unknown_config_key_exits(self, tmp_path):
        path = tmp_path / "noise.json"
        path.write_text(json.dumps({"size": 8, "grid_size": 2, "octaves": 3}))

        with pytest.raises(SystemExit) as exc:
            main(["--config", str(path)])
        assert exc.value.code == 1

    def test_missing_config_exits(self, tmp_path):
        with pytest.raises(SystemExit) as exc:
            main(["--config", str(tmp_path / "missing.json")])
        assert exc.value.code == 1
