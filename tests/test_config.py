"""Tests for configuration loading and validation."""

import pytest

from gosight.config import AnalysisConfig, ThresholdConfig, load_config
from gosight.exceptions import ConfigurationError, InvalidConfigError


@pytest.fixture(autouse=True)
def isolated(tmp_path, monkeypatch):
    """Keep user and project config files out of the way."""
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    monkeypatch.chdir(tmp_path)
    for key in ("GOSIGHT_WORKERS", "GOSIGHT_FAIL_FAST", "GOSIGHT_MAX_FILES"):
        monkeypatch.delenv(key, raising=False)


class TestDefaults:
    def test_defaults(self):
        config = load_config()
        assert config.workers is None
        assert config.fail_fast is False
        assert config.entry_points == ["main", "init"]
        assert config.strict_duplicates is True
        assert config.thresholds == ThresholdConfig()

    def test_max_file_size_bytes(self):
        assert AnalysisConfig(max_file_size_mb=1.0).max_file_size_bytes == 1024 * 1024


class TestSources:
    def test_project_file(self, tmp_path):
        (tmp_path / "gosight.toml").write_text(
            'workers = 2\nentry_points = ["main", "Run"]\n\n[thresholds]\nhotspot_complexity = 20\n'
        )
        config = load_config()
        assert config.workers == 2
        assert config.entry_points == ["main", "Run"]
        assert config.thresholds.hotspot_complexity == 20
        assert config.thresholds.low_complexity == 5

    def test_explicit_file_beats_project_file(self, tmp_path):
        (tmp_path / "gosight.toml").write_text("workers = 2\n")
        explicit = tmp_path / "custom.toml"
        explicit.write_text("workers = 3\n")
        assert load_config(config_file=explicit).workers == 3

    def test_env_beats_file(self, tmp_path, monkeypatch):
        (tmp_path / "gosight.toml").write_text("workers = 2\nfail_fast = false\n")
        monkeypatch.setenv("GOSIGHT_WORKERS", "6")
        monkeypatch.setenv("GOSIGHT_FAIL_FAST", "yes")
        config = load_config()
        assert config.workers == 6
        assert config.fail_fast is True

    def test_overrides_beat_env(self, monkeypatch):
        monkeypatch.setenv("GOSIGHT_WORKERS", "6")
        assert load_config(workers=1).workers == 1

    def test_none_overrides_ignored(self, tmp_path):
        (tmp_path / "gosight.toml").write_text("workers = 2\n")
        assert load_config(workers=None).workers == 2

    def test_verbose_and_quiet(self):
        assert load_config(verbose=True).verbosity == "verbose"
        assert load_config(quiet=True).verbosity == "quiet"
        assert load_config().verbosity == "normal"


class TestErrors:
    def test_missing_explicit_file(self, tmp_path):
        with pytest.raises(ConfigurationError):
            load_config(config_file=tmp_path / "nope.toml")

    def test_malformed_toml(self, tmp_path):
        bad = tmp_path / "bad.toml"
        bad.write_text("workers = = 2\n")
        with pytest.raises(ConfigurationError):
            load_config(config_file=bad)

    def test_unknown_key(self):
        with pytest.raises(ConfigurationError):
            load_config(colour="blue")

    def test_unknown_threshold_key(self, tmp_path):
        (tmp_path / "gosight.toml").write_text("[thresholds]\nshininess = 3\n")
        with pytest.raises(ConfigurationError):
            load_config()

    def test_bad_env_value(self, monkeypatch):
        monkeypatch.setenv("GOSIGHT_MAX_FILES", "lots")
        with pytest.raises(ConfigurationError):
            load_config()

    @pytest.mark.parametrize(
        "overrides",
        [
            {"workers": 0},
            {"max_files": 0},
            {"max_file_size_mb": 0},
            {"extensions": []},
            {"type_cache_size": 0},
            {"verbosity": "loud"},
        ],
    )
    def test_invalid_values(self, overrides):
        with pytest.raises(InvalidConfigError):
            AnalysisConfig(**overrides)

    def test_invalid_thresholds(self):
        with pytest.raises(InvalidConfigError):
            ThresholdConfig(low_complexity=8, medium_complexity=4)
