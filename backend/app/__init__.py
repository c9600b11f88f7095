"""Organization register application package."""
