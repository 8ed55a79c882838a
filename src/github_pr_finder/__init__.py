"""GitHub PR Finder - local cache and browser for team pull requests."""

__version__ = "0.1.0"
