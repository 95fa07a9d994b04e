"""Core module - settings, errors, logging and security."""
