"""Engine configuration: RAF tables, limits and environment settings."""
