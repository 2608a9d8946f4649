"""Configuration constants for Mixtape."""
