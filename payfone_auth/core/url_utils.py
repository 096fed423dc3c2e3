"""URL helpers for the authentication legs.

Query parameters are read the way the carrier pages expect: keys are
lower-cased and the last value for a repeated key wins.
"""

from __future__ import annotations

from urllib.parse import quote, unquote, urlsplit


def parse_query(url: str | None) -> dict[str, str]:
    """Break a URL's query string into a name/value dict.

    Args:
        url: Absolute or relative URL (None yields an empty dict)

    Returns:
        Dict of lower-cased parameter names to percent-decoded values.
        Parameters without "=" map to an empty string.
    """
    if not url:
        return {}

    query = urlsplit(url).query
    params: dict[str, str] = {}
    for pair in query.split("&"):
        if not pair:
            continue
        name, _, value = pair.partition("=")
        key = unquote(name).lower()
        params[key] = unquote(value)
    return params


def append_query(url: str, name: str, value: str) -> str:
    """Append a single query parameter, respecting an existing "?".

    The value is percent-encoded so tokens containing base64 characters
    ("+", "/", "=") survive the trip to the integrator's endpoint.
    """
    separator = "&" if "?" in url else "?"
    return f"{url}{separator}{name}={quote(value, safe='')}"


def truncate(value: str | None, length: int) -> str:
    """Shorten a URL or token for debug narration."""
    if not value:
        return ""
    return value[:length] + "..." if len(value) > length else value
