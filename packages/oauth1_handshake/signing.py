"""OAuth 1.0a request signing (RFC 5849)."""

import hashlib
import hmac
import secrets
import time
import typing as t
from base64 import b64encode
from urllib.parse import parse_qsl, quote, urlsplit, urlunsplit

from oauth1_handshake.exceptions import ConfigurationError
from oauth1_handshake.models import ConsumerCredential

HMAC_SHA1 = 'HMAC-SHA1'
PLAINTEXT = 'PLAINTEXT'
SIGNATURE_METHODS = (HMAC_SHA1, PLAINTEXT)

OAUTH_VERSION = '1.0'

_DEFAULT_PORTS = {'http': 80, 'https': 443}

Params = t.Union[t.Mapping[str, str], t.Sequence[t.Tuple[str, str]]]


def validate_signature_method(signature_method: str) -> None:
    """Raise :class:`ConfigurationError` unless the signature method is supported."""
    if signature_method not in SIGNATURE_METHODS:
        raise ConfigurationError(
            f'Unsupported signature method {signature_method!r}. Use one of: {", ".join(SIGNATURE_METHODS)}'
        )


def percent_encode(value: str) -> str:
    """Percent-encode a value as required by RFC 5849 section 3.6."""
    return quote(value.encode('utf-8'), safe='-._~')


def normalize_url(url: str) -> str:
    """Build the base string URI: lowercase scheme and host, no default port, no query.

    Args:
        url: Request URL.

    Returns:
        Normalized URL as used in the signature base string.
    """
    parts = urlsplit(url)
    scheme = parts.scheme.lower()
    host = (parts.hostname or '').lower()
    if parts.port and parts.port != _DEFAULT_PORTS.get(scheme):
        host = f'{host}:{parts.port}'
    return urlunsplit((scheme, host, parts.path or '/', '', ''))


def normalize_parameters(params: t.Iterable[t.Tuple[str, str]]) -> str:
    """Encode, sort, and join request parameters (RFC 5849 section 3.4.1.3.2)."""
    encoded = sorted((percent_encode(name), percent_encode(value)) for name, value in params)
    return '&'.join(f'{name}={value}' for name, value in encoded)


def signature_base_string(method: str, url: str, params: t.Iterable[t.Tuple[str, str]]) -> str:
    """Build the signature base string.

    Args:
        method: HTTP method.
        url: Request URL; its query parameters are included in the base string.
        params: Body and protocol parameters, excluding ``oauth_signature`` and ``realm``.

    Returns:
        Signature base string.
    """
    query_params = parse_qsl(urlsplit(url).query, keep_blank_values=True)
    all_params = [*query_params, *params]
    return '&'.join(
        [
            percent_encode(method.upper()),
            percent_encode(normalize_url(url)),
            percent_encode(normalize_parameters(all_params)),
        ]
    )


class OAuth1Signer:
    """Computes OAuth 1.0a protocol parameters and signatures.

    One signer is bound to the consumer credentials and, optionally, a token
    secret: the request token secret during the access-token exchange, the
    access token secret for resource requests.
    """

    def __init__(
        self,
        consumer: ConsumerCredential,
        token: t.Optional[str] = None,
        token_secret: str = '',
        signature_method: str = HMAC_SHA1,
    ) -> None:
        validate_signature_method(signature_method)

        self.consumer = consumer
        self.token = token
        self.token_secret = token_secret
        self.signature_method = signature_method

    @property
    def _signing_key(self) -> str:
        return f'{percent_encode(self.consumer.secret)}&{percent_encode(self.token_secret)}'

    def signature(self, base_string: str) -> str:
        if self.signature_method == PLAINTEXT:
            return self._signing_key

        digest = hmac.new(self._signing_key.encode('utf-8'), base_string.encode('utf-8'), hashlib.sha1).digest()
        return b64encode(digest).decode('ascii')

    def sign(
        self,
        method: str,
        url: str,
        params: t.Optional[Params] = None,
        extra_oauth: t.Optional[t.Mapping[str, str]] = None,
        nonce: t.Optional[str] = None,
        timestamp: t.Optional[int] = None,
    ) -> t.Dict[str, str]:
        """Compute protocol parameters for a request.

        Args:
            method: HTTP method.
            url: Full request URL, including any query string.
            params: Form-encoded body parameters, if any.
            extra_oauth: Additional ``oauth_*`` parameters such as
                ``oauth_callback`` or ``oauth_verifier``.
            nonce: Fixed nonce; random when omitted.
            timestamp: Fixed timestamp; current time when omitted.

        Returns:
            Protocol parameters including ``oauth_signature``.
        """
        oauth_params = {
            'oauth_consumer_key': self.consumer.key,
            'oauth_nonce': nonce or secrets.token_hex(16),
            'oauth_signature_method': self.signature_method,
            'oauth_timestamp': str(timestamp if timestamp is not None else int(time.time())),
            'oauth_version': OAUTH_VERSION,
        }
        if self.token:
            oauth_params['oauth_token'] = self.token
        if extra_oauth:
            oauth_params.update(extra_oauth)

        body_params = list(params.items()) if isinstance(params, t.Mapping) else list(params or [])
        base_string = signature_base_string(method, url, [*body_params, *oauth_params.items()])
        oauth_params['oauth_signature'] = self.signature(base_string)
        return oauth_params

    def authorization_header(self, method: str, url: str, params: t.Optional[Params] = None, **kwargs: t.Any) -> str:
        """Build an ``Authorization`` header value for a request.

        Accepts the same arguments as :meth:`sign`.
        """
        oauth_params = self.sign(method, url, params, **kwargs)
        fields = ', '.join(f'{percent_encode(k)}="{percent_encode(v)}"' for k, v in sorted(oauth_params.items()))
        return f'OAuth realm="", {fields}'
