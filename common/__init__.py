"""Shared helpers: logging, paths, configuration and cleanup."""
