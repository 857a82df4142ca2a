"""Command line tooling for SQLite schema comparison."""
