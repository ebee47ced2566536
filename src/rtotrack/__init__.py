"""rtotrack - RTO record lifecycle and renewal tracking."""

__version__ = "0.1.0"
