"""
Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
SPDX-License-Identifier: Apache-2.0

AWS SQS Signers computes Signature Version 4 signatures for form-encoded POST
requests sent to Amazon SQS style endpoints.
"""

from __future__ import annotations

from ._crypto import sha256_digest, to_hex
from ._version import __version__
from .signers import (
    SigV4Signer,
    SigV4SigningConfig,
    canonical_uri,
    format_amz_date,
    format_date_stamp,
    signed_headers,
)

__license__ = "Apache-2.0"
__version__ = __version__

__all__ = (
    "SigV4Signer",
    "SigV4SigningConfig",
    "canonical_uri",
    "format_amz_date",
    "format_date_stamp",
    "sha256_digest",
    "signed_headers",
    "to_hex",
)
