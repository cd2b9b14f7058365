"""
fpsjnd.model
============

Observer models.

Includes
--------
- SimulatedObserver : logistic 2AFC observer for demos and tests.

Typical usage
-------------
    from fpsjnd.model import SimulatedObserver
    observer = SimulatedObserver(threshold_fps=40.0, seed=1)
    side = observer.respond(left_fps=30.0, right_fps=33.0)
"""

from .observer import SimulatedObserver

__all__ = ["SimulatedObserver"]
