"""Application-layer contracts consumed by the turn pipeline."""
