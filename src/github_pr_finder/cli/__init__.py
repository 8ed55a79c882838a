"""Command line interface for GitHub PR Finder."""
