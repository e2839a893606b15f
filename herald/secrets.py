"""Resolve secret references at the moment a secret is needed.

A secret reference is a ``scheme:location`` string:

- ``env:NAME`` reads the environment variable ``NAME``.
- ``file:/path/to/secret`` reads a mounted secret file (for example a
  Kubernetes ``Secret`` volume), stripping surrounding whitespace.

Resolved values are never cached or logged.
"""

from __future__ import annotations

import os
from pathlib import Path


class SecretResolutionError(RuntimeError):
    """Raised when a secret reference cannot be turned into a value."""

    @classmethod
    def unsupported(cls, reference: str) -> SecretResolutionError:
        """Return an error for a reference with an unknown scheme."""
        return cls(
            f"unsupported secret reference {reference!r}; "
            "expected 'env:NAME' or 'file:/path'"
        )

    @classmethod
    def unavailable(cls, reference: str) -> SecretResolutionError:
        """Return an error for a reference that resolves to nothing."""
        return cls(f"secret {reference!r} is not available")


def _read_env(name: str) -> str | None:
    return os.environ.get(name)


def _read_file(location: str) -> str | None:
    try:
        return Path(location).read_text(encoding="utf-8")
    except OSError:
        return None


_READERS = {
    "env": _read_env,
    "file": _read_file,
}


def resolve_secret(reference: str) -> str:
    """Return the secret value named by *reference*.

    Raises
    ------
    SecretResolutionError
        If the scheme is unknown or the secret is missing or blank.

    """
    scheme, sep, location = reference.partition(":")
    reader = _READERS.get(scheme)
    if not sep or not location or reader is None:
        raise SecretResolutionError.unsupported(reference)

    value = reader(location)
    if value is None or not value.strip():
        raise SecretResolutionError.unavailable(reference)
    return value.strip()


__all__ = ["SecretResolutionError", "resolve_secret"]
