"""Command-line entry points: ``longshot`` and ``longshot-batch``."""
