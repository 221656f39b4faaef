"""
Launch URL rewriting.

Pure helpers that swap query parameters of a Player-issued launch URL for
gateway-scoped values while leaving the rest of the URL untouched.

Dependencies: urllib.parse (stdlib)
System role: Launch URL <-> gateway URL transformation
"""

from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

ENDPOINT_PARAM = "endpoint"
FETCH_PARAM = "fetch"


def rewrite_query_params(url: str, replacements: dict[str, str]) -> str:
    """
    Replace named query parameters in a URL.

    A replaced parameter keeps the position of its first occurrence and any
    later duplicates are dropped. Parameters missing from the input are
    appended in the order given. Scheme, host, path and fragment are kept.

    Args:
        url: Absolute URL to rewrite
        replacements: Mapping of parameter name to new value

    Returns:
        str: Rewritten URL
    """
    parts = urlsplit(url)
    pairs = parse_qsl(parts.query, keep_blank_values=True)

    rewritten: list[tuple[str, str]] = []
    placed: set[str] = set()
    for name, value in pairs:
        if name in replacements:
            if name in placed:
                continue
            rewritten.append((name, replacements[name]))
            placed.add(name)
        else:
            rewritten.append((name, value))

    for name, value in replacements.items():
        if name not in placed:
            rewritten.append((name, value))

    return urlunsplit(parts._replace(query=urlencode(rewritten)))


def get_query_param(url: str, name: str) -> str | None:
    """Return the first value of a query parameter, or None when absent."""
    for key, value in parse_qsl(urlsplit(url).query, keep_blank_values=True):
        if key == name:
            return value
    return None


def gateway_session_urls(gateway_base: str, session_id: int | str) -> dict[str, str]:
    """
    Build the gateway-scoped replacements for a session's launch URL.

    Args:
        gateway_base: Scheme, host and mount prefix of the gateway
        session_id: Local session identifier

    Returns:
        dict: ``endpoint`` and ``fetch`` parameter values
    """
    base = gateway_base.rstrip("/")
    return {
        ENDPOINT_PARAM: f"{base}/sessions/{session_id}/lrs",
        FETCH_PARAM: f"{base}/sessions/{session_id}/fetch",
    }
