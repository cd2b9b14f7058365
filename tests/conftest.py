"""
Central pytest configuration for this project.

This file is automatically discovered by pytest and is intended for:

- **Fixtures**: reusable objects or setup logic shared across multiple test files.
- **Pytest hooks**: project-wide customizations of pytest behavior.

Notes
-----
- Contributors should install the package in editable mode
  (`pip install -e .[test]`) so that imports are resolved consistently in
  local dev and CI environments.
- Keep this file focused on test setup. Do not add application logic here.
"""

import matplotlib

matplotlib.use("Agg")

import pytest

from fpsjnd.render.renderer import TemporalBlurRenderer
from fpsjnd.staircase.config import StaircaseConfig


@pytest.fixture
def scenario_config():
    """Reference configuration used by the worked scenarios (refresh rate 60 Hz)."""
    return StaircaseConfig(
        start_base_fps=30,
        min_base_fps=10,
        target_diff_pct=0.10,
        initial_step=5,
        min_step=0.5,
        target_reversals=3,
        max_trials=50,
    )


@pytest.fixture(scope="session")
def small_renderer():
    """Small odd-width renderer (the center column lands on the divider).

    Session-scoped so the render program is compiled only once.
    """
    return TemporalBlurRenderer(33, 16, samples=8)


@pytest.fixture
def answer():
    """Return ``answer(controller, correct)`` which responds to the pending trial."""

    def _answer(controller, correct: bool):
        state = controller.current_state()
        wrong = "left" if state.higher_side == "right" else "right"
        return controller.submit_response(state.higher_side if correct else wrong)

    return _answer
