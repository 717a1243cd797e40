"""
Tests for YAML settings.
"""

import logging

import pytest
import yaml

from alumina import Evaluator, LoggingTrace, Settings, load_settings, save_settings


class TestSettings:
    """Settings validation and file round trips."""

    def test_defaults(self):
        settings = Settings()
        assert settings.epsilon == pytest.approx(1e-5)
        assert settings.section_digits == 9
        assert settings.trace is False
        assert settings.level == logging.DEBUG

    def test_save_and_load(self, tmp_path):
        path = tmp_path / "conf" / "alumina.yaml"
        save_settings(Settings(epsilon=1e-4, trace=True, log_level="info"), path)
        loaded = load_settings(path)
        assert loaded.epsilon == pytest.approx(1e-4)
        assert loaded.trace is True
        assert loaded.level == logging.INFO

    def test_file_is_plain_yaml(self, tmp_path):
        path = tmp_path / "alumina.yaml"
        save_settings(Settings(), path)
        data = yaml.safe_load(path.read_text())
        assert list(data) == ["epsilon", "section_digits", "lattice_fill", "trace", "log_level"]

    def test_missing_file_gives_defaults(self, tmp_path):
        assert load_settings(tmp_path / "absent.yaml") == Settings()

    def test_empty_file_gives_defaults(self, tmp_path):
        path = tmp_path / "alumina.yaml"
        path.write_text("")
        assert load_settings(path) == Settings()

    def test_exponent_without_decimal_point(self, tmp_path):
        # YAML 1.1 reads 1e-6 as a string
        path = tmp_path / "alumina.yaml"
        path.write_text("epsilon: 1e-6\nsection_digits: 6\n")
        loaded = load_settings(path)
        assert loaded.epsilon == pytest.approx(1e-6)
        assert isinstance(loaded.epsilon, float)
        assert loaded.section_digits == 6

    @pytest.mark.parametrize("text", [
        "log_level: 10\n",
        "epsilon: tiny\n",
        "trace: maybe\n",
        "section_digits: [3]\n",
    ])
    def test_badly_typed_file(self, tmp_path, text):
        path = tmp_path / "alumina.yaml"
        path.write_text(text)
        with pytest.raises(ValueError):
            load_settings(path)

    def test_unknown_key(self):
        with pytest.raises(ValueError, match="colour"):
            Settings.from_dict({"colour": "red"})

    def test_not_a_mapping(self):
        with pytest.raises(ValueError):
            Settings.from_dict(["epsilon"])

    @pytest.mark.parametrize("data", [
        {"epsilon": 0.0},
        {"section_digits": 0},
        {"lattice_fill": -1.0},
        {"log_level": "LOUD"},
    ])
    def test_invalid_values(self, data):
        with pytest.raises(ValueError):
            Settings.from_dict(data)

    def test_evaluator_from_settings(self):
        evaluator = Evaluator.from_settings(Settings(epsilon=1e-3, trace=True, log_level="INFO"))
        assert evaluator.kernel.epsilon == pytest.approx(1e-3)
        assert isinstance(evaluator.trace, LoggingTrace)
        assert evaluator.trace.level == logging.INFO
