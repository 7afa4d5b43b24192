"""Command line interface for rtdb."""
