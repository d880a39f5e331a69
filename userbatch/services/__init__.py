"""Verification services: orchestration, progress display and summary rendering."""
