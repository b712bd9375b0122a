"""
gateway.auth
~~~~~~~~~~~~
HTTP Basic credentials for ACL entries.  The configuration carries the
plaintext ``user:password`` pair; we store it already encoded so the HTTP
layer can compare it against the ``Authorization: Basic`` header as-is.
"""

from __future__ import annotations

import base64


def encode_credential(plaintext: str) -> str:
    """Return the single-line base64 form of *plaintext*."""
    # lone surrogates (valid JSON escapes) are kept as their raw bytes
    raw = plaintext.encode("utf-8", errors="surrogatepass")
    encoded = base64.b64encode(raw).decode("ascii")
    # header values must stay on a single line
    return encoded.replace("\r", "").replace("\n", "")
