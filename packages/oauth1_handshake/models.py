"""Data models for the OAuth 1.0a handshake."""

import typing as t
from dataclasses import dataclass, field
from datetime import timedelta

#: How long a pending request token may wait for the provider callback.
STATE_TIMEOUT = timedelta(minutes=15)

IdentityT = t.TypeVar('IdentityT')


@dataclass(frozen=True)
class RequestToken:
    """Temporary credentials issued by the provider to start the handshake.

    Lives only for the duration of one handshake. The secret must only leave the
    process in encrypted form.
    """

    token: str
    secret: str = field(repr=False)


@dataclass(frozen=True)
class AccessToken:
    """Token credentials issued by the provider once the user has consented.

    Ownership passes to the caller; this package never persists it.
    """

    token: str
    secret: str = field(repr=False)


@dataclass(frozen=True)
class ConsumerCredential:
    """The application's own key/secret pair registered with the provider."""

    key: str
    secret: str = field(repr=False)


@dataclass(frozen=True)
class ServiceEndpoints:
    """Static per-provider endpoint configuration."""

    request_token_url: str
    authorization_url: str
    access_token_url: str


@dataclass
class OAuth1AuthInfo:
    """Provider-specific payload built from an access token.

    Concrete providers subclass this to carry extra fields, e.g. the provider's
    own user id returned alongside the access token.
    """

    access_token: str
    access_token_secret: str = field(repr=False)

    def as_access_token(self) -> AccessToken:
        return AccessToken(token=self.access_token, secret=self.access_token_secret)


@dataclass(frozen=True)
class Redirect:
    """Flow started: the caller must redirect the user's browser to ``url``."""

    url: str


@dataclass(frozen=True)
class Authenticated(t.Generic[IdentityT]):
    """Flow completed: ``identity`` is the mapped user identity."""

    identity: IdentityT


AuthResult = t.Union[Redirect, Authenticated]
