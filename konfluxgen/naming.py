"""Deterministic, length-bounded resource names for Konflux objects."""

from __future__ import annotations

import hashlib

MAX_NAME_LENGTH = 63
DIGEST_LENGTH = 32  # hex-encoded MD5
HEAD_LENGTH = MAX_NAME_LENGTH - DIGEST_LENGTH

_ALPHANUMERIC = frozenset("abcdefghijklmnopqrstuvwxyz" "ABCDEFGHIJKLMNOPQRSTUVWXYZ" "0123456789")
_COMPONENT_KEY_SEPARATOR = "-"


def _digest(value: str) -> str:
    return hashlib.md5(value.encode("utf-8"), usedforsecurity=False).hexdigest()


def derive_name(parent: str, suffix: str) -> str:
    """Return ``parent + suffix`` bounded to 63 characters.

    When the concatenation is too long the parent is cut and an MD5 digest of
    it is inserted before the suffix, so distinct parents keep distinct names.
    If the suffix leaves no room next to the digest (31 characters or more),
    the digest covers ``parent + suffix`` instead and the result is
    ``parent[:31] + digest`` padded with the start of the suffix.
    """
    if len(parent) + len(suffix) <= MAX_NAME_LENGTH:
        return parent + suffix

    if HEAD_LENGTH - len(suffix) <= 0:
        digest = _digest(parent + suffix)
        name = parent[:HEAD_LENGTH] + digest
        remaining = MAX_NAME_LENGTH - len(name)
        if remaining > 0:
            name += suffix[:remaining]
        return make_valid_name(name)

    name = parent[: HEAD_LENGTH - len(suffix)] + _digest(parent) + suffix
    return make_valid_name(name)


def make_valid_name(name: str) -> str:
    """Drop trailing characters until the name ends with [a-zA-Z0-9]."""
    end = len(name)
    while end > 0 and name[end - 1] not in _ALPHANUMERIC:
        end -= 1
    return name[:end]


def sanitize(value: object) -> str:
    # Only "." and " " are handled; this is not a general-purpose sanitizer.
    text = value if isinstance(value, str) else str(value)
    return text.replace(".", "").replace(" ", "-")


def truncate(value: object) -> str:
    text = value if isinstance(value, str) else str(value)
    return derive_name(text, "")


def application_key(application_name: str) -> str:
    """Key for the single application produced by a run."""
    return truncate(sanitize(application_name))


def component_key(org: str, repo: str, branch: str, destination: str) -> str:
    """Key for one image build step of one org/repo/branch."""
    joined = _COMPONENT_KEY_SEPARATOR.join((org, repo, branch, destination))
    return truncate(joined)


__all__ = [
    "DIGEST_LENGTH",
    "HEAD_LENGTH",
    "MAX_NAME_LENGTH",
    "application_key",
    "component_key",
    "derive_name",
    "make_valid_name",
    "sanitize",
    "truncate",
]
