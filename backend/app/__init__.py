"""Sri Lanka Explorer backend application."""
