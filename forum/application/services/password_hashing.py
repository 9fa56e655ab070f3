"""Password hashing strategies."""

from __future__ import annotations

import base64
import secrets
import string

from argon2 import PasswordHasher, Type
from argon2.exceptions import HashingError as Argon2HashingError
from argon2.exceptions import InvalidHashError, VerificationError as Argon2VerificationError
from argon2.exceptions import VerifyMismatchError

from forum.domain.users.entities import StoredCredential
from forum.domain.users.exceptions import HashingError, VerificationError
from forum.domain.users.repositories import CredentialHasher
from forum.shared.logging import logger

SALT_ALPHABET = string.ascii_letters + string.digits
MIN_SALT_LENGTH = 10


def generate_salt(length: int) -> str:
    if length < MIN_SALT_LENGTH:
        raise ValueError(f"salt length must be at least {MIN_SALT_LENGTH}")
    return "".join(secrets.choice(SALT_ALPHABET) for _ in range(length))


def _embedded_salt(encoded_hash: str) -> bytes:
    # $argon2id$v=19$m=65536,t=3,p=4$<salt>$<digest>
    parts = encoded_hash.split("$")
    if len(parts) != 6 or not parts[1].startswith("argon2"):
        raise VerificationError("unparseable_hash")
    raw = parts[4]
    try:
        return base64.b64decode(raw + "=" * (-len(raw) % 4), validate=True)
    except ValueError as exc:
        raise VerificationError("unparseable_salt") from exc


class Argon2CredentialManager(CredentialHasher):
    """Derives and verifies Argon2id credentials with a fresh random salt per call."""

    def __init__(
        self,
        *,
        salt_length: int = 16,
        time_cost: int = 3,
        memory_cost: int = 65536,
        parallelism: int = 4,
    ) -> None:
        if salt_length < MIN_SALT_LENGTH:
            raise ValueError(f"salt_length must be at least {MIN_SALT_LENGTH}")
        self._salt_length = salt_length
        self._hasher = PasswordHasher(
            time_cost=time_cost,
            memory_cost=memory_cost,
            parallelism=parallelism,
            type=Type.ID,
        )

    def derive_credential(self, plaintext_password: str) -> StoredCredential:
        salt = generate_salt(self._salt_length)
        try:
            encoded = self._hasher.hash(plaintext_password, salt=salt.encode("ascii"))
        except Argon2HashingError as exc:
            logger.exception("credentials.derive: argon2 failure")
            raise HashingError() from exc
        except UnicodeEncodeError as exc:
            logger.warning("credentials.derive: password is not encodable as UTF-8")
            raise HashingError() from exc
        return StoredCredential(password_hash=encoded, salt=salt)

    def verify_credential(
        self, plaintext_password: str, stored_credential: StoredCredential
    ) -> bool:
        try:
            stored_salt = stored_credential.salt.encode("ascii")
        except UnicodeEncodeError as exc:
            raise VerificationError("invalid_salt") from exc
        if _embedded_salt(stored_credential.password_hash) != stored_salt:
            raise VerificationError("salt_mismatch")
        try:
            return self._hasher.verify(stored_credential.password_hash, plaintext_password)
        except VerifyMismatchError:
            return False
        except UnicodeEncodeError:
            # No stored hash can come from a password that does not encode.
            return False
        except InvalidHashError as exc:
            raise VerificationError("invalid_hash") from exc
        except Argon2VerificationError as exc:
            raise VerificationError("verification_failed") from exc
