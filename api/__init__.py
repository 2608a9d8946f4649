"""HTTP surface for Mixtape."""
