"""Command-line interface for gridsynth."""
