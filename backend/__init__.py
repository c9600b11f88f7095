"""Organization register backend."""
