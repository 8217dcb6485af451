"""Authentication header builders for AfterShip requests.

Two schemes are supported:
- api_key: the key is sent in the 'as-api-key' header.
- aes: the key is sent as well, and the request is signed with
  HMAC-SHA256 using the account's API secret.
"""

import abc
import base64
import hashlib
import hmac
import logging
from email.utils import formatdate
from typing import Callable, Dict, Mapping, Optional
from urllib.parse import urlencode

from aftership.domain.models.errors import ConfigurationError

logger = logging.getLogger(__name__)

HEADER_API_KEY = "as-api-key"
HEADER_SIGNATURE = "as-signature-hmac-sha256"
HEADER_DATE = "date"


class Authenticator(abc.ABC):
    """Abstract Base Class for request authentication."""

    @abc.abstractmethod
    def auth_headers(
        self,
        method: str,
        path: str,
        query: Mapping[str, str],
        body: Optional[bytes],
        headers: Mapping[str, str],
    ) -> Dict[str, str]:
        """Returns the headers to add to a request.

        Args:
            method: HTTP method in upper case.
            path: Absolute URL path, including the API version prefix.
            query: Serialized query parameters.
            body: Encoded request body, None when the request has no body.
            headers: Headers already set on the request.
        """
        pass


class ApiKeyAuthenticator(Authenticator):
    """Sends the API key as a header."""

    def __init__(self, api_key: str):
        if not api_key:
            raise ConfigurationError("AfterShip API key is empty.")
        self.api_key = api_key

    def auth_headers(self, method, path, query, body, headers) -> Dict[str, str]:
        return {HEADER_API_KEY: self.api_key}


def canonical_resource(path: str, query: Mapping[str, str]) -> str:
    """Path plus the query string with keys sorted alphabetically."""
    if not query:
        return path
    return f"{path}?{urlencode(sorted(query.items()))}"


def canonical_as_headers(headers: Mapping[str, str]) -> str:
    """All 'as-' headers except the signature, lowercased and sorted."""
    as_headers = sorted(
        (key.lower().strip(), str(value).strip())
        for key, value in headers.items()
        if key.lower().startswith("as-") and key.lower() != HEADER_SIGNATURE
    )
    return "\n".join(f"{key}:{value}" for key, value in as_headers)


def build_sign_string(
    method: str,
    body: Optional[bytes],
    content_type: str,
    date: str,
    as_headers: str,
    resource: str,
) -> str:
    """Assembles the string that is signed for AES authentication."""
    body_md5 = hashlib.md5(body).hexdigest().upper() if body else ""
    return "\n".join([method.upper(), body_md5, content_type if body else "", date, as_headers, resource])


def sign(secret: str, sign_string: str) -> str:
    """Base64 encoded HMAC-SHA256 of the sign string."""
    digest = hmac.new(secret.encode("utf-8"), sign_string.encode("utf-8"), hashlib.sha256).digest()
    return base64.b64encode(digest).decode("ascii")


class AesAuthenticator(ApiKeyAuthenticator):
    """Signs each request with the account's API secret."""

    def __init__(self, api_key: str, api_secret: str, clock: Callable[[], str] = lambda: formatdate(usegmt=True)):
        super().__init__(api_key)
        if not api_secret:
            raise ConfigurationError("AES authentication requires an API secret.")
        self.api_secret = api_secret
        self._clock = clock

    def auth_headers(self, method, path, query, body, headers) -> Dict[str, str]:
        date = self._clock()
        signed_headers = dict(headers)
        signed_headers[HEADER_API_KEY] = self.api_key
        sign_string = build_sign_string(
            method=method,
            body=body,
            content_type=headers.get("Content-Type", ""),
            date=date,
            as_headers=canonical_as_headers(signed_headers),
            resource=canonical_resource(path, query),
        )
        logger.debug(f"Signing request {method} {path}")
        return {
            HEADER_API_KEY: self.api_key,
            HEADER_DATE: date,
            HEADER_SIGNATURE: sign(self.api_secret, sign_string),
        }


def create_authenticator(auth_type: str, api_key: str, api_secret: Optional[str] = None) -> Authenticator:
    """Builds the authenticator for an auth type ('api_key' or 'aes')."""
    if auth_type == "api_key":
        return ApiKeyAuthenticator(api_key)
    if auth_type == "aes":
        return AesAuthenticator(api_key, api_secret or "")
    raise ConfigurationError(f"Unknown auth type '{auth_type}'.")
