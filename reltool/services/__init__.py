"""Services layer (release workflow)."""
