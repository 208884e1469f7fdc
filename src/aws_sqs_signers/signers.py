"""
Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
SPDX-License-Identifier: Apache-2.0
"""

import logging
import sys
import warnings
from dataclasses import KW_ONLY, dataclass, field, replace
from datetime import datetime
from typing import Final

from ._crypto import hmac_sha256, sha256_digest, to_hex
from .exceptions import (
    InvalidEndpointException,
    MissingExpectedParameterException,
    SigningException,
    SQSSignerWarning,
)

if sys.version_info < (3, 12):
    from datetime import timezone

    UTC = timezone.utc
else:
    from datetime import UTC

logger: Final = logging.getLogger(__name__)

SIGV4_ALGORITHM: str = "AWS4-HMAC-SHA256"
HTTP_METHOD: str = "POST"
CANONICAL_QUERY_STRING: str = ""
CONTENT_TYPE: str = "application/x-www-form-urlencoded"
# Order matters: canonical headers and the signed headers list share it.
SIGNED_HEADERS: tuple[str, ...] = ("content-type", "host", "x-amz-date")
SCOPE_TERMINATOR: str = "aws4_request"

DEFAULT_REGION: str = "sa-east-1"
SERVICE_NOT_PROVIDED: str = "not provided"

DATE_STAMP_FORMAT: str = "%Y%m%d"
EMPTY_SHA256_HASH = "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"


def _to_utc(date: datetime) -> datetime:
    if date.tzinfo is None:
        return date.replace(tzinfo=UTC)
    return date.astimezone(UTC)


def format_date_stamp(date: datetime) -> str:
    """Format ``date`` as the 8 digit ``YYYYMMDD`` date used in the scope."""
    return _to_utc(date).strftime(DATE_STAMP_FORMAT)


def format_amz_date(date: datetime) -> str:
    """Format ``date`` for the ``x-amz-date`` header and the string to sign.

    The value is rendered from the pattern ``yyyyMMdd'T'HHMMSS'Z'`` where
    ``HH`` is the hour of day, ``MM`` the month and ``SS`` the first two digits
    of the fraction of a second. For example, 2011-09-09 23:36:00.120 UTC
    renders as ``20110909T230912Z``.
    """
    date = _to_utc(date)
    return f"{date:%Y%m%dT%H%m}{date.microsecond // 10000:02d}Z"


def canonical_uri(url: str, host: str) -> str:
    """Return the absolute path of ``url``, i.e. everything after ``host``.

    ``host`` is searched for after the scheme separator. The remainder is used
    verbatim, without decoding or normalization. An empty remainder is
    returned as ``/``.

    :raises InvalidEndpointException: ``host`` does not occur in ``url``, or
        is followed by something other than a path (e.g. a ``:port`` that
        ``host`` doesn't include).
    """
    scheme_end = url.find("://")
    offset = scheme_end + len("://") if scheme_end != -1 else 0
    start = url.find(host, offset) if host else -1
    if start == -1:
        raise InvalidEndpointException(
            f"Host {host!r} was not found in endpoint {url!r}. The host must "
            "appear verbatim in the endpoint URL."
        )
    path = url[start + len(host) :]
    if path and not path.startswith("/"):
        raise InvalidEndpointException(
            f"Endpoint {url!r} continues with {path!r} after host {host!r}. "
            "Include the port in the host if the endpoint has one."
        )
    return path or "/"


def signed_headers() -> str:
    return ";".join(SIGNED_HEADERS)


@dataclass(frozen=True)
class SigV4SigningConfig:
    """Values a single signature is computed from.

    Instances are immutable. The ``with_*`` methods return an updated copy so
    calls can be chained::

        config = (
            SigV4SigningConfig(endpoint, date=now)
            .with_host("sqs.sa-east-1.amazonaws.com")
            .with_region("sa-east-1")
            .with_service("sqs")
            .with_secret_key(secret)
        )

    ``date`` is the capture instant every derived value (headers, date stamp,
    credential scope) is built from. It is converted to UTC; naive values are
    taken to already be in UTC.
    """

    endpoint: str
    _: KW_ONLY
    date: datetime
    host: str | None = None
    secret_key: str | None = field(default=None, repr=False)
    region: str = DEFAULT_REGION
    service: str = SERVICE_NOT_PROVIDED
    payload: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "date", _to_utc(self.date))
        if self.payload is None:
            object.__setattr__(self, "payload", "")

    @classmethod
    def for_endpoint(
        cls, endpoint: str, *, date: datetime | None = None
    ) -> "SigV4SigningConfig":
        """Create a config for ``endpoint``, capturing the current time if
        ``date`` isn't provided."""
        if date is None:
            date = datetime.now(UTC)
        return cls(endpoint, date=date)

    def with_host(self, host: str) -> "SigV4SigningConfig":
        return replace(self, host=host)

    def with_secret_key(self, secret_key: str) -> "SigV4SigningConfig":
        return replace(self, secret_key=secret_key)

    def with_payload(self, payload: str | None) -> "SigV4SigningConfig":
        return replace(self, payload="" if payload is None else payload)

    def with_region(self, region: str) -> "SigV4SigningConfig":
        return replace(self, region=region)

    def with_service(self, service: str) -> "SigV4SigningConfig":
        return replace(self, service=service)


class SigV4Signer:
    """
    Request signer applying the AWS Signature Version 4 algorithm to
    form-encoded POST requests.
    """

    def sign(
        self, *, config: SigV4SigningConfig, access_key_id: str
    ) -> dict[str, str]:
        """Compute the signature for ``config`` and return the headers to send
        with the request."""
        host = self._require(value=config.host, name="host")
        signature = self.signature(config=config)
        credential = f"{access_key_id}/{self.credential_scope(config=config)}"
        return {
            "Content-Type": CONTENT_TYPE,
            "Host": host,
            "X-Amz-Date": format_amz_date(config.date),
            "Authorization": self.generate_authorization_field(
                credential=credential, signature=signature
            ),
        }

    def generate_authorization_field(self, *, credential: str, signature: str) -> str:
        """Generate the `Authorization` field value"""
        return (
            f"{SIGV4_ALGORITHM} Credential={credential}, "
            f"SignedHeaders={signed_headers()}, Signature={signature}"
        )

    def signature(self, *, config: SigV4SigningConfig) -> str:
        """Sign the string to sign built from ``config``.

        The signing key is derived from the secret key and scoped to the date,
        region and service of ``config`` (see :py:meth:`signing_key`). The
        HMAC-SHA256 of the string to sign under that key, hex encoded, is the
        signature.
        """
        secret_key = self._require(value=config.secret_key, name="secret_key")
        if config.service == SERVICE_NOT_PROVIDED:
            warnings.warn(
                "No service name was configured for this signature. Use "
                "with_service() to set the service the request is sent to.",
                SQSSignerWarning,
            )
        string_to_sign = self.string_to_sign(config=config)
        k_signing = self.signing_key(
            secret_key=secret_key,
            date_stamp=self.date_stamp(config=config),
            region=config.region,
            service=config.service,
        )
        return to_hex(self._hash(key=k_signing, value=string_to_sign))

    def signing_key(
        self, *, secret_key: str, date_stamp: str, region: str, service: str
    ) -> bytes:
        """Derive the signing key scoped to a date, region and service.

        DateKey              = HMAC-SHA256("AWS4"+"<SecretAccessKey>", "<YYYYMMDD>")
        DateRegionKey        = HMAC-SHA256(<DateKey>, "<aws-region>")
        DateRegionServiceKey = HMAC-SHA256(<DateRegionKey>, "<aws-service>")
        SigningKey           = HMAC-SHA256(<DateRegionServiceKey>, "aws4_request")
        """
        try:
            k_secret = f"AWS4{secret_key}".encode("utf-8")
        except UnicodeEncodeError as e:
            raise SigningException(f"Signature not generated: {e}") from e
        k_date = self._hash(key=k_secret, value=date_stamp)
        k_region = self._hash(key=k_date, value=region)
        k_service = self._hash(key=k_region, value=service)
        return self._hash(key=k_service, value=SCOPE_TERMINATOR)

    def _hash(self, key: bytes, value: str) -> bytes:
        try:
            return hmac_sha256(key, value)
        except (TypeError, ValueError) as e:
            raise SigningException(f"Signature not generated: {e}") from e

    def string_to_sign(self, *, config: SigV4SigningConfig) -> str:
        string_to_sign = (
            f"{SIGV4_ALGORITHM}\n"
            f"{format_amz_date(config.date)}\n"
            f"{self.credential_scope(config=config)}\n"
            f"{self.hashed_canonical_request(config=config)}"
        )
        logger.debug("String to sign:\n%s", string_to_sign)
        return string_to_sign

    def credential_scope(self, *, config: SigV4SigningConfig) -> str:
        date_stamp = self.date_stamp(config=config)
        # Scope format: <YYYYMMDD>/<AWS Region>/<AWS Service>/aws4_request
        return f"{date_stamp}/{config.region}/{config.service}/{SCOPE_TERMINATOR}"

    def date_stamp(self, *, config: SigV4SigningConfig) -> str:
        return format_date_stamp(config.date)

    def hashed_canonical_request(self, *, config: SigV4SigningConfig) -> str:
        return self._hex_sha256(self.canonical_request(config=config))

    def canonical_request(self, *, config: SigV4SigningConfig) -> str:
        host = self._require(value=config.host, name="host")
        canonical_path = canonical_uri(config.endpoint, host)
        canonical_headers = self.canonical_headers(config=config)
        if config.payload:
            payload_hash = self._hex_sha256(config.payload)
        else:
            payload_hash = EMPTY_SHA256_HASH
        canonical_request = (
            f"{HTTP_METHOD}\n"
            f"{canonical_path}\n"
            f"{CANONICAL_QUERY_STRING}\n"
            f"{canonical_headers}\n"
            f"{signed_headers()}\n"
            f"{payload_hash}"
        )
        logger.debug("Canonical request:\n%s", canonical_request)
        return canonical_request

    def canonical_headers(self, *, config: SigV4SigningConfig) -> str:
        """Format the fixed header set, one newline-terminated line each."""
        host = self._require(value=config.host, name="host")
        values = (CONTENT_TYPE, host, format_amz_date(config.date))
        return "".join(
            f"{name}:{value}\n" for name, value in zip(SIGNED_HEADERS, values)
        )

    def _hex_sha256(self, text: str) -> str:
        digest = sha256_digest(text)
        if digest is None:
            raise SigningException(
                "Signature not generated: unable to compute the SHA-256 digest "
                "of the request content."
            )
        return to_hex(digest)

    def _require(self, *, value: str | None, name: str) -> str:
        if not value:
            raise MissingExpectedParameterException(
                f"Cannot sign the request without a {name}. Current value: {value!r}"
            )
        return value
