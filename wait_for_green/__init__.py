"""Wait for the commit statuses and check runs of a revision to become green."""

__version__ = "2.0.0"
