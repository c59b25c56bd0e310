"""Computes and verifies GitHub webhook signatures."""

import hashlib
import hmac

SIGNATURE_PREFIX = "sha1="


def sign_request_body(secret: str, body: bytes) -> str:
    """Sign a raw request body the way GitHub signs the X-Hub-Signature header."""
    digest = hmac.new(secret.encode("utf-8"), body, hashlib.sha1).hexdigest()
    return f"{SIGNATURE_PREFIX}{digest}"


def signature_matches(secret: str, body: bytes, signature: str) -> bool:
    """Check a provided signature against the signature of the raw body.

    Signatures are compared as bytes, so a header holding non-ASCII
    characters is a mismatch rather than a comparison error.
    """
    expected = sign_request_body(secret, body).encode("ascii")
    return hmac.compare_digest(expected, signature.encode("utf-8", "surrogateescape"))
