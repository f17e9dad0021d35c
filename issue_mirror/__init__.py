"""Incremental mirror of GitHub issues, comments and pull request data."""

__version__ = "0.1.0"
