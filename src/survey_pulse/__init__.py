"""Survey Pulse: grouped survey collection and result aggregation."""

__version__ = "0.1.0"
