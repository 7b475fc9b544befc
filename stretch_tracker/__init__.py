"""Stretch habit tracker: weighted stretch selection and progress stats."""

__version__ = "1.0.0"
