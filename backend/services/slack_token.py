"""Verify the token Slack sends with every slash-command request."""

import os
import secrets


def get_verify_token() -> str | None:
    """Expected token from SLACK_VERIFY_TOKEN, or None when not configured."""
    return os.environ.get("SLACK_VERIFY_TOKEN", "").strip() or None


def is_valid_token(token: str | None, expected: str | None = None) -> bool:
    """Constant-time comparison; an unconfigured or missing token never matches."""
    expected = expected if expected is not None else get_verify_token()
    if not expected or not token:
        return False
    return secrets.compare_digest(token.encode(), expected.encode())
