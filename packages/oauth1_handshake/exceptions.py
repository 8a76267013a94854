"""Exceptions raised during the OAuth 1.0a handshake."""

import typing as t


class OAuth1Error(Exception):
    """Base class for all OAuth 1.0a errors."""


class ConfigurationError(OAuth1Error, ValueError):
    """Provider settings are missing or invalid."""


class AuthError(OAuth1Error):
    """The provider reported a protocol error or the handshake cannot continue."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class AccessDeniedError(AuthError):
    """The user declined consent at the provider."""

    def __init__(self, provider_key: str) -> None:
        super().__init__(f'Access denied by user for provider {provider_key!r}')
        self.provider_key = provider_key


class StateCorruptedError(OAuth1Error):
    """Pending handshake state could not be decoded or decrypted.

    The current attempt must be abandoned and the flow restarted from scratch.
    """


class ProviderError(OAuth1Error):
    """A request-token or access-token call to the provider failed."""

    def __init__(self, message: str, status_code: t.Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class ResourceRequestError(OAuth1Error):
    """A signed request against a protected provider resource failed."""

    def __init__(self, message: str, status_code: t.Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
