"""Password hashing utilities.

Learn: Uses bcrypt for secure password hashing. bcrypt automatically
handles salting and is resistant to rainbow table attacks.
The work factor is fixed by settings.bcrypt_rounds (default 10).
"""

from functools import lru_cache

import bcrypt

DEFAULT_ROUNDS = 10


def _encode(password: str) -> bytes:
    # bcrypt only looks at the first 72 bytes
    return password.encode("utf-8")[:72]


def hash_password(password: str, rounds: int = DEFAULT_ROUNDS) -> str:
    """Hash a password with bcrypt.

    Learn: bcrypt includes a random salt automatically and produces
    hashes starting with "$2b$". Hashing the same password twice gives
    two different strings; verify_password handles the comparison.
    """
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(_encode(password), salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Verify a password against its bcrypt hash.

    Malformed or empty hashes verify as False rather than raising.
    """
    try:
        return bcrypt.checkpw(_encode(password), password_hash.encode("utf-8"))
    except (ValueError, TypeError, AttributeError):
        return False


@lru_cache(maxsize=4)
def dummy_hash(rounds: int = DEFAULT_ROUNDS) -> str:
    """A throwaway hash to compare against when the email is unknown.

    Login does the same bcrypt work whether or not the account exists,
    so response timing doesn't reveal which emails are registered.
    """
    return hash_password("pagevault-dummy-password", rounds)
