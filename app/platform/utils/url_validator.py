from typing import Tuple
from urllib.parse import urlsplit

ALLOWED_SCHEMES = ("http", "https")


def normalize_url(url: str) -> Tuple[str, bool]:
    """Trim ``url`` and default a scheme-less address to https. Returns (url, was_modified)."""
    url = url.strip()

    if "://" not in url:
        return f"https://{url.lstrip('/')}", True

    return url, False


def validate_url(url: str) -> Tuple[bool, str, str]:
    """Returns (is_valid, normalized_url, error_message)."""
    if not url or not url.strip():
        return False, "", "URL cannot be empty"

    normalized_url, _ = normalize_url(url)

    try:
        parsed = urlsplit(normalized_url)
        host = parsed.hostname
        parsed.port
    except ValueError as e:
        return False, normalized_url, f"URL parsing error: {e}"

    if parsed.scheme.lower() not in ALLOWED_SCHEMES:
        return False, normalized_url, f"Invalid URL scheme: {parsed.scheme} (must be http or https)"

    if not host:
        return False, normalized_url, "Invalid URL format: missing domain"

    if any(ch.isspace() for ch in normalized_url):
        return False, normalized_url, "Invalid URL format: contains whitespace"

    return True, normalized_url, ""
