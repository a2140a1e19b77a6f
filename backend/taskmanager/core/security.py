"""Password hashing helpers backed by :mod:`werkzeug.security`.

Digests are salted and produced by a deliberately slow KDF (scrypt by
default in current Werkzeug releases). Verification relies on
``check_password_hash`` which compares digests in constant time.
"""

from __future__ import annotations

from werkzeug.security import check_password_hash, generate_password_hash

# Verified against when no user matches, so unknown emails cost the same
# KDF round as wrong passwords.
_DUMMY_HASH = generate_password_hash("taskmanager-dummy-secret")


def hash_password(raw: str) -> str:
    """
    Hash a plaintext password.

    :param raw: Plaintext password.
    :type raw: str
    :returns: Salted one-way digest (method prefix included).
    :rtype: str
    :raises ValueError: If ``raw`` is empty or not a string.
    """
    if not isinstance(raw, str) or not raw:
        raise ValueError("Password must be a non-empty string.")
    return generate_password_hash(raw)


def verify_password(raw: str, digest: str | None) -> bool:
    """
    Check a plaintext password against a stored digest.

    :param raw: Plaintext candidate.
    :type raw: str
    :param digest: Stored digest; ``None``/empty never matches.
    :type digest: str | None
    :returns: ``True`` when the candidate matches.
    :rtype: bool
    """
    if not digest or not isinstance(raw, str):
        return False
    return bool(check_password_hash(digest, raw))


def burn_verification(raw: str) -> None:
    """Spend one verification round on a dummy digest."""
    check_password_hash(_DUMMY_HASH, raw if isinstance(raw, str) else "")
