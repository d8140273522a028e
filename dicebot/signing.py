"""Ed25519 signing for the platform's HTTP callback transport.

The key pair is derived from the bot secret: the secret is repeated until it
is at least 32 bytes long, and its first 32 bytes are the private key seed.
The platform signs each callback over ``timestamp + body``, and the bot proves
ownership of its callback URL by signing ``event_ts + plain_token``.
"""

from __future__ import annotations

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey

_SEED_SIZE = 32


def signing_key(secret: str) -> Ed25519PrivateKey:
    """Derive the bot's private key from its secret.

    Raises:
        ValueError: If secret is empty.
    """
    if not secret:
        raise ValueError("bot secret is empty")
    seed = secret.encode("utf-8")
    while len(seed) < _SEED_SIZE:
        seed += seed
    return Ed25519PrivateKey.from_private_bytes(seed[:_SEED_SIZE])


def sign_callback_validation(secret: str, event_ts: str, plain_token: str) -> str:
    """Return the hex signature answering an op 13 validation request."""
    message = (event_ts + plain_token).encode("utf-8")
    return signing_key(secret).sign(message).hex()


def verify_signature(secret: str, timestamp: str, body: bytes, signature_hex: str) -> bool:
    """Check the ``X-Signature-Ed25519`` header of a callback request."""
    try:
        signature = bytes.fromhex(signature_hex)
    except ValueError:
        return False
    public_key = signing_key(secret).public_key()
    try:
        public_key.verify(signature, timestamp.encode("utf-8") + body)
    except InvalidSignature:
        return False
    return True
