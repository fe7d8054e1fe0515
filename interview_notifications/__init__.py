"""Interview records plus scheduling and reminder emails."""

__version__ = "0.1.0"
