"""Safety-aware pedestrian navigation service."""
