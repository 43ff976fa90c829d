"""Camera rental booking core: calendar, conflicts and rental lifecycle."""

__version__ = "0.1.0"
