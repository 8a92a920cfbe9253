import bcrypt

from backend.core import config

# bcrypt only looks at the first 72 bytes; newer releases raise instead of truncating.
_BCRYPT_MAX_BYTES = 72


def _encode(plaintext: str) -> bytes:
    return plaintext.encode("utf-8")[:_BCRYPT_MAX_BYTES]


class PasswordHasher:
    def __init__(self, rounds: int | None = None):
        self.rounds = rounds or config.BCRYPT_ROUNDS

    def hash(self, plaintext: str) -> str:
        digest = bcrypt.hashpw(_encode(plaintext), bcrypt.gensalt(rounds=self.rounds))
        return digest.decode("ascii")

    def verify(self, plaintext: str, digest: str) -> bool:
        if not digest:
            return False
        try:
            return bcrypt.checkpw(_encode(plaintext), digest.encode("ascii"))
        except ValueError:
            # Stored value is not a bcrypt hash.
            return False
