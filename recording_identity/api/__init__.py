"""HTTP surface for the engine."""
