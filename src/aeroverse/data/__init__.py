"""Preset launch conditions."""
