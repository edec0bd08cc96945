"""AWS session helpers for the Glue Data Catalog.

This module centralizes creation of a boto3 Glue client and turns the
profile failures boto3 raises at session creation into an AuthError with a
user-friendly message. Missing credentials only surface on the first API
call, where the adapter reports them as a CatalogError.
"""

from typing import Any

import boto3
from botocore.exceptions import ProfileNotFound


class AuthError(RuntimeError):
    """Raised when an AWS session or Glue client cannot be created."""


def _format_auth_error(message: str, profile: str | None) -> str:
    """Return a user-friendly auth error message."""
    if profile:
        return (
            f"AWS authentication failed for profile '{profile}': {message}\n"
            f"Configure it with:\n  $ aws configure --profile {profile}"
        )
    return f"AWS authentication failed: {message}"


def get_client(region: str | None = None, profile: str | None = None) -> Any:
    """
    Create and return a boto3 Glue client.

    Credentials are resolved through the standard AWS chain (environment,
    shared config/credentials files, instance metadata). A named profile,
    when given, must exist in the shared config.
    """
    try:
        session = boto3.session.Session(profile_name=profile, region_name=region)
    except ProfileNotFound as exc:
        raise AuthError(_format_auth_error(str(exc), profile)) from exc
    return session.client("glue")
