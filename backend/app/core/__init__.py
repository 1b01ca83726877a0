"""Configuration, security and shared utilities."""
