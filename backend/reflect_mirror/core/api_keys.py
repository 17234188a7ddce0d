"""API Keys: generation and redacted description of integration API keys.

Invariants:
    - Generated keys are PREFIX + 43 url-safe chars from secrets.token_urlsafe(32)
    - describe_api_key never returns more than the prefix and the last four characters
"""

import secrets

KEY_ENTROPY_BYTES = 32


def generate_api_key(prefix: str) -> str:
    return f"{prefix}{secrets.token_urlsafe(KEY_ENTROPY_BYTES)}"


def describe_api_key(api_key: str, prefix: str) -> tuple[str, str]:
    """Return (prefix, last_four) for a key. Works for keys without the prefix too."""
    shown_prefix = prefix if api_key.startswith(prefix) else ""
    return shown_prefix, api_key[-4:]
