"""Logging and metrics for GameDesk."""
