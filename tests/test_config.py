"""Tests for config.py - threshold loading and runtime overrides."""

import json
import logging

import pytest

from config import DEFAULTS, load_config, merge_config
from models.data_models import MonitorConfig


class TestLoadConfig:
    """Test load_config."""

    def test_no_config_path_returns_defaults(self):
        assert load_config(None) == MonitorConfig()

    def test_defaults_match_documented_constants(self):
        assert DEFAULTS == {
            "ear_drowsy": 0.22,
            "ear_closed": 0.16,
            "mar_yawn": 0.5,
            "fatigue_trigger": 80.0,
            "warning_margin": 20.0,
            "inference_throttle_ms": 100,
            "notification_throttle_ms": 100,
            "persistence_throttle_ms": 5000,
            "event_log_capacity": 50,
            "poll_interval_ms": 16,
        }

    def test_valid_config_file(self, tmp_path):
        cfg = {
            "ear_drowsy": 0.25,
            "ear_closed": 0.18,
            "mar_yawn": 0.6,
            "fatigue_trigger": 70,
            "persistence_throttle_ms": 3000,
            "event_log_capacity": 20,
        }
        cfg_file = tmp_path / "config.json"
        cfg_file.write_text(json.dumps(cfg), encoding="utf-8")

        config = load_config(str(cfg_file))
        assert config.ear_drowsy == 0.25
        assert config.ear_closed == 0.18
        assert config.mar_yawn == 0.6
        assert config.fatigue_trigger == 70.0
        assert config.persistence_throttle_ms == 3000
        assert config.event_log_capacity == 20

    def test_missing_config_file_uses_defaults(self, caplog):
        with caplog.at_level(logging.WARNING):
            config = load_config("/nonexistent/path.json")
        assert config == MonitorConfig()
        assert "配置文件不存在" in caplog.text

    def test_invalid_json_uses_defaults(self, tmp_path, caplog):
        cfg_file = tmp_path / "bad.json"
        cfg_file.write_text("not valid json {{{", encoding="utf-8")

        with caplog.at_level(logging.WARNING):
            config = load_config(str(cfg_file))
        assert config == MonitorConfig()
        assert "配置文件格式错误" in caplog.text

    def test_non_object_json_uses_defaults(self, tmp_path):
        cfg_file = tmp_path / "list.json"
        cfg_file.write_text("[1, 2, 3]", encoding="utf-8")
        assert load_config(str(cfg_file)) == MonitorConfig()

    def test_partial_config_fills_defaults(self, tmp_path):
        cfg_file = tmp_path / "partial.json"
        cfg_file.write_text(json.dumps({"ear_closed": 0.12}), encoding="utf-8")

        config = load_config(str(cfg_file))
        assert config.ear_closed == 0.12
        assert config.ear_drowsy == DEFAULTS["ear_drowsy"]
        assert config.fatigue_trigger == DEFAULTS["fatigue_trigger"]

    def test_null_values_in_config_use_defaults(self, tmp_path):
        cfg_file = tmp_path / "nulls.json"
        cfg_file.write_text(json.dumps({"ear_drowsy": None, "mar_yawn": 0.4}), encoding="utf-8")

        config = load_config(str(cfg_file))
        assert config.ear_drowsy == DEFAULTS["ear_drowsy"]
        assert config.mar_yawn == 0.4

    def test_extra_fields_ignored(self, tmp_path):
        cfg_file = tmp_path / "extra.json"
        cfg_file.write_text(json.dumps({"ear_drowsy": 0.2, "unknown_field": 999}), encoding="utf-8")

        config = load_config(str(cfg_file))
        assert config.ear_drowsy == 0.2
        assert not hasattr(config, "unknown_field")


class TestMergeConfig:
    def test_invalid_value_keeps_previous(self, caplog):
        with caplog.at_level(logging.WARNING):
            config = merge_config(MonitorConfig(), {"mar_yawn": "wide", "ear_closed": 0.1})
        assert config.mar_yawn == 0.5
        assert config.ear_closed == 0.1
        assert "mar_yawn" in caplog.text

    def test_boolean_rejected(self):
        assert merge_config(MonitorConfig(), {"fatigue_trigger": True}).fatigue_trigger == 80.0

    def test_integer_fields_stay_integers(self):
        config = merge_config(MonitorConfig(), {"inference_throttle_ms": 150.0})
        assert config.inference_throttle_ms == 150
        assert isinstance(config.inference_throttle_ms, int)

    def test_inverted_eye_thresholds_warn(self, caplog):
        with caplog.at_level(logging.WARNING):
            merge_config(MonitorConfig(), {"ear_closed": 0.3})
        assert "ear_closed" in caplog.text

    @pytest.mark.parametrize("overrides", [None, {}])
    def test_empty_overrides(self, overrides):
        base = MonitorConfig(ear_drowsy=0.3)
        assert merge_config(base, overrides) == base

    @pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf"), "nan"])
    def test_non_finite_trigger_keeps_previous(self, value, caplog):
        with caplog.at_level(logging.WARNING):
            config = merge_config(MonitorConfig(), {"fatigue_trigger": value})
        assert config.fatigue_trigger == 80.0
        assert "fatigue_trigger" in caplog.text

    def test_infinite_integer_field_keeps_previous(self):
        config = merge_config(MonitorConfig(), {"persistence_throttle_ms": float("inf")})
        assert config.persistence_throttle_ms == 5000

    @pytest.mark.parametrize("key, value, expected", [
        ("event_log_capacity", 0, 50),
        ("event_log_capacity", -5, 50),
        ("poll_interval_ms", 0, 16),
        ("inference_throttle_ms", -1, 100),
        ("notification_throttle_ms", -100, 100),
        ("persistence_throttle_ms", -1, 5000),
        ("warning_margin", -10.0, 20.0),
    ])
    def test_out_of_range_keeps_previous(self, key, value, expected):
        config = merge_config(MonitorConfig(), {key: value})
        assert getattr(config, key) == expected

    def test_zero_throttle_allowed(self):
        assert merge_config(MonitorConfig(), {"notification_throttle_ms": 0}).notification_throttle_ms == 0

    def test_nan_in_config_file_keeps_default(self, tmp_path):
        cfg_file = tmp_path / "nan.json"
        cfg_file.write_text('{"fatigue_trigger": NaN, "mar_yawn": 0.4}', encoding="utf-8")

        config = load_config(str(cfg_file))
        assert config.fatigue_trigger == 80.0
        assert config.mar_yawn == 0.4
