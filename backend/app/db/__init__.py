"""Database base, session and initialization."""
