"""Recipe catalog, behavior storage and data models."""
