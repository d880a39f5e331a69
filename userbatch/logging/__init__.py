"""Logging setup and the JSON Lines problem log."""
