"""
Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
SPDX-License-Identifier: Apache-2.0
"""


class SQSSignerWarning(UserWarning): ...


class BaseSQSSignerException(Exception):
    """Top-level exception to capture signer-related errors."""

    ...


class MissingExpectedParameterException(BaseSQSSignerException, ValueError):
    """A signing configuration value required for this operation is unset."""

    ...


class InvalidEndpointException(BaseSQSSignerException, ValueError):
    """The configured host does not appear in the endpoint URL."""

    ...


class SigningException(BaseSQSSignerException):
    """Hashing or HMAC computation failed, so no signature was produced."""

    ...
