"""Shared utilities and telemetry (logging). No business logic."""
