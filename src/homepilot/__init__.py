"""HomePilot - deterministic property analysis and generated-output recovery."""

__version__ = "0.1.0"
