"""
Utility functions for the application.
"""
from typing import Any, Dict, Optional
from urllib.parse import urlsplit


def format_error(message: str, details: Any = None) -> Dict[str, Any]:
    """Format error response envelope."""
    response = {"status": "error", "message": message}
    if details:
        response["error"] = details
    return response


def last_path_segment(url: str) -> str:
    """Return the final path segment of a URL, ignoring query string and fragment."""
    path = urlsplit(url).path
    return path.rstrip("/").rsplit("/", 1)[-1]


def url_host(url: Optional[str]) -> str:
    """Lower-cased host of a URL, or an empty string."""
    if not url:
        return ""
    return (urlsplit(url).hostname or "").lower()
