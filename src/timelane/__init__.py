"""timelane: lane-packed timeline editing engine."""

__version__ = "0.1.0"
