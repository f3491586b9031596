"""Command line interface for overlay georeferencing."""
