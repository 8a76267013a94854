"""OAuth 1.0a three-legged handshake implementation."""

from oauth1_handshake.client import OAuth1Client
from oauth1_handshake.codec import StateTokenCodec
from oauth1_handshake.exceptions import (
    AccessDeniedError,
    AuthError,
    ConfigurationError,
    OAuth1Error,
    ProviderError,
    ResourceRequestError,
    StateCorruptedError,
)
from oauth1_handshake.models import (
    STATE_TIMEOUT,
    AccessToken,
    Authenticated,
    AuthResult,
    ConsumerCredential,
    OAuth1AuthInfo,
    Redirect,
    RequestToken,
    ServiceEndpoints,
)
from oauth1_handshake.provider import OAuth1AuthProvider
from oauth1_handshake.settings import OAuth1Settings, SettingKeys
from oauth1_handshake.signing import OAuth1Signer

__all__ = [
    'STATE_TIMEOUT',
    'AccessDeniedError',
    'AccessToken',
    'AuthError',
    'AuthResult',
    'Authenticated',
    'ConfigurationError',
    'ConsumerCredential',
    'OAuth1AuthInfo',
    'OAuth1AuthProvider',
    'OAuth1Client',
    'OAuth1Error',
    'OAuth1Settings',
    'OAuth1Signer',
    'ProviderError',
    'Redirect',
    'RequestToken',
    'ResourceRequestError',
    'ServiceEndpoints',
    'SettingKeys',
    'StateCorruptedError',
    'StateTokenCodec',
]
