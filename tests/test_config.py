"""
test_config.py
--------------

Validation and settings parsing of StaircaseConfig.
"""

import pytest

from fpsjnd.staircase.config import ConfigError, StaircaseConfig


class TestValidation:
    def test_defaults_are_valid(self):
        config = StaircaseConfig()
        assert config.min_base_fps <= config.start_base_fps

    def test_config_is_frozen(self):
        config = StaircaseConfig()
        with pytest.raises(AttributeError):
            config.start_base_fps = 50

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"min_base_fps": 40, "start_base_fps": 30},
            {"min_base_fps": 0, "start_base_fps": 30},
            {"target_diff_pct": -0.1},
            {"initial_step": 0},
            {"min_step": -1},
            {"target_reversals": 0},
            {"max_trials": 0},
            {"max_trials": 2.5},
            {"target_reversals": True},
            {"start_base_fps": "30"},
            {"start_base_fps": float("nan")},
            {"initial_step": float("inf")},
        ],
    )
    def test_invalid_values_raise(self, kwargs):
        with pytest.raises(ConfigError):
            StaircaseConfig(**kwargs)

    def test_config_error_is_value_error(self):
        with pytest.raises(ValueError):
            StaircaseConfig(max_trials=-3)

    def test_zero_difference_is_allowed(self):
        assert StaircaseConfig(target_diff_pct=0.0).target_diff_pct == 0.0


class TestFromSettings:
    def test_form_values_are_parsed(self):
        config = StaircaseConfig.from_settings(
            {
                "start_base": "30",
                "min_base": "10",
                "diff_pct": "10",
                "initial_step": "5",
                "min_step": "0.5",
                "target_reversals": "3",
                "max_trials": "50",
            }
        )
        assert config.start_base_fps == 30.0
        assert config.min_base_fps == 10.0
        assert config.target_diff_pct == pytest.approx(0.10)
        assert config.initial_step == 5.0
        assert config.min_step == 0.5
        assert config.target_reversals == 3
        assert config.max_trials == 50

    def test_field_names_and_defaults(self):
        config = StaircaseConfig.from_settings({"target_diff_pct": 0.05})
        assert config.target_diff_pct == 0.05
        assert config.start_base_fps == StaircaseConfig().start_base_fps

    @pytest.mark.parametrize(
        "settings",
        [
            {"start_base": "fast"},
            {"diff_pct": ""},
            {"max_trials": "12.5"},
            {"min_base": None},
            {"min_base": "inf"},
            {"colour": "red"},
            {"min_base": "50", "start_base": "30"},
        ],
    )
    def test_bad_settings_raise(self, settings):
        with pytest.raises(ConfigError):
            StaircaseConfig.from_settings(settings)
