"""
Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
SPDX-License-Identifier: Apache-2.0
"""

import hashlib
import hmac
import logging
from typing import Final

logger: Final = logging.getLogger(__name__)


def sha256_digest(text: str) -> bytes | None:
    """Return the SHA-256 digest of the UTF-8 encoding of ``text``.

    Returns ``None`` when the digest can't be produced, e.g. when ``text``
    contains code points that have no UTF-8 encoding. Callers must treat a
    ``None`` digest as fatal.
    """
    try:
        data = text.encode("utf-8")
    except UnicodeEncodeError as e:
        logger.debug("Unable to encode text for SHA-256: %s", e)
        return None
    return hashlib.sha256(data).digest()


def hmac_sha256(key: bytes, text: str) -> bytes:
    msg = text.encode("utf-8")
    return hmac.new(key=key, msg=msg, digestmod=hashlib.sha256).digest()


def to_hex(data: bytes) -> str:
    # Two lowercase digits per byte, no separators.
    return "".join(f"{b:02x}" for b in data)
