"""CLI module for flightcontrol."""

from flightcontrol.cli.main import main

__all__ = ["main"]
