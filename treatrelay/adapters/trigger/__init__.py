"""Trigger adapters: ways of firing the downstream actuator."""
