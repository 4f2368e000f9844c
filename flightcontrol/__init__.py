"""flightcontrol - build orchestrator for repository artifacts."""

__version__ = "0.1.0"
