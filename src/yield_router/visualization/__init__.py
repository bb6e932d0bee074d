"""Chart helpers for :mod:`yield_router`."""

from .visualizer import Visualizer

__all__ = ["Visualizer"]
