"""Data schema, loaders and build settings."""
