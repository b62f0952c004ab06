"""Login Digest — pure secret generation and hashing for magic-link login.

Invariants:
    - Digest is SHA-256 over UTF-8(secret + str(entropy)): always DIGEST_SIZE bytes
    - Digest is deterministic for a (secret, entropy) pair
    - Comparison is constant-time and byte-for-byte

Design Decisions:
    - Entropy is a UUID stored beside the hash; the secret itself is never stored
    - secrets/uuid4 draw from os.urandom: no seeded PRNG anywhere in the login path
"""

import hashlib
import hmac
import secrets
import uuid

DIGEST_SIZE = hashlib.sha256().digest_size
SECRET_BYTES = 32


def generate_secret() -> str:
    """URL-safe random secret delivered out-of-band inside the magic link."""
    return secrets.token_urlsafe(SECRET_BYTES)


def generate_entropy() -> uuid.UUID:
    return uuid.uuid4()


def compute_secret_hash(secret: str, entropy: uuid.UUID) -> bytes:
    return hashlib.sha256((secret + str(entropy)).encode("utf-8")).digest()


def secret_matches(secret: str, entropy: uuid.UUID, stored_hash: bytes) -> bool:
    """Recompute the digest and compare it to the stored one."""
    if len(stored_hash) != DIGEST_SIZE:
        return False
    return hmac.compare_digest(compute_secret_hash(secret, entropy), stored_hash)


def build_complete_link(base_url: str, request_id: uuid.UUID, secret: str) -> str:
    return f"{base_url.rstrip('/')}/auth/complete/{request_id}/{secret}"
