"""Collective community API."""
