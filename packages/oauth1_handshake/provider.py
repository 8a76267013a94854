"""OAuth 1.0a three-legged handshake for external identity providers."""

import logging
import typing as t
from abc import ABC, abstractmethod
from urllib.parse import urlsplit, urlunsplit

import httpx

from oauth1_handshake.client import OAUTH_PROBLEM, OAUTH_TOKEN, OAUTH_VERIFIER, OAuth1Client
from oauth1_handshake.codec import StateTokenCodec
from oauth1_handshake.exceptions import AccessDeniedError, AuthError, ProviderError
from oauth1_handshake.models import (
    STATE_TIMEOUT,
    AccessToken,
    Authenticated,
    AuthResult,
    OAuth1AuthInfo,
    Redirect,
)
from oauth1_handshake.settings import OAuth1Settings
from oauth1_handshake.stores.base import StateStore

logger = logging.getLogger(__name__)

OAUTH_ACCESS_DENIED = 'access_denied'

InfoT = t.TypeVar('InfoT', bound=OAuth1AuthInfo)
IdentityT = t.TypeVar('IdentityT')


class OAuth1AuthProvider(ABC, t.Generic[InfoT, IdentityT]):
    """Drives the OAuth 1.0a handshake for one provider.

    Call :meth:`authenticate` once per inbound request to the login route. The
    first call returns a :class:`Redirect` to the provider; the call made when
    the provider sends the user back returns :class:`Authenticated`.

    Subclasses set :attr:`key` and implement :meth:`build_info` and
    :meth:`transform`. The request token is kept between the two legs in the
    injected :class:`StateStore`, encrypted by the injected codec.

    Example:
        >>> class ExampleProvider(OAuth1AuthProvider[OAuth1AuthInfo, dict]):
        ...     key = 'example'
        ...     def build_info(self, access_token):
        ...         return OAuth1AuthInfo(access_token.token, access_token.secret)
        ...     def transform(self, info):
        ...         return self.signed_oauth_get('https://api.example.com/me', info)
    """

    #: Provider identifier, e.g. ``'twitter'``.
    key: t.ClassVar[str]

    def __init__(
        self,
        config: t.Mapping[str, t.Any],
        state_store: StateStore,
        codec: StateTokenCodec,
        transport: t.Optional[httpx.BaseTransport] = None,
    ) -> None:
        """Initialize the provider.

        Args:
            config: Provider settings, see :class:`~oauth1_handshake.settings.SettingKeys`.
            state_store: Where the pending request token is kept between legs.
            codec: Encrypts the pending request token.
            transport: Custom httpx transport for the provider client.

        Raises:
            ConfigurationError: If required settings are missing or invalid.
        """
        self.settings = OAuth1Settings.from_mapping(config)
        self.state_store = state_store
        self.codec = codec
        self.client = OAuth1Client(
            self.settings.endpoints,
            self.settings.consumer,
            timeout=self.settings.timeout,
            signature_method=self.settings.signature_method,
            transport=transport,
        )

    @property
    def state_key(self) -> str:
        """Store key of the pending request token for this provider."""
        return f'oauth1.{self.key}.rtoken'

    @abstractmethod
    def build_info(self, access_token: AccessToken) -> InfoT:
        """Build provider-specific auth info from a fresh access token.

        Raises:
            AuthError: If the info cannot be built.
        """

    @abstractmethod
    def transform(self, info: InfoT) -> IdentityT:
        """Map provider auth info to the application's user identity.

        Raises:
            AuthError: If the identity cannot be built.
        """

    def get_redirect_url(self, request_url: str) -> str:
        """Return the callback URL handed to the provider.

        Defaults to the current request URL without its query string, so the
        provider returns the user to the same route.
        """
        parts = urlsplit(request_url)
        return urlunsplit((parts.scheme, parts.netloc, parts.path, '', ''))

    def check_error(self, params: httpx.QueryParams) -> None:
        """Raise if the provider reported an error on the callback.

        Raises:
            AccessDeniedError: If the user declined consent.
            AuthError: For any other provider error code.
        """
        error = params.get(OAUTH_PROBLEM)
        if error is None:
            return

        if error == OAUTH_ACCESS_DENIED:
            raise AccessDeniedError(self.key)
        raise AuthError(error)

    def authenticate(self, request_url: str, context: t.Any) -> AuthResult:
        """Run one step of the handshake.

        Args:
            request_url: Full URL of the current request, including the query string.
            context: Session context passed to the state store.

        Returns:
            :class:`Redirect` on flow start, :class:`Authenticated` on completion.

        Raises:
            AccessDeniedError: If the user declined consent.
            AuthError: If the provider rejected a step or no request token is pending.
            StateCorruptedError: If the pending state could not be decrypted.
        """
        logger.debug('Returned with URL: %r', request_url)
        params = httpx.URL(request_url).params

        self.check_error(params)

        if OAUTH_VERIFIER in params:
            return self._complete(params, context)
        return self._start(request_url, context)

    def _start(self, request_url: str, context: t.Any) -> Redirect:
        callback_url = self.get_redirect_url(request_url)
        try:
            request_token = self.client.request_token(callback_url)
        except ProviderError as e:
            logger.warning('Request token call to %s failed: %s', self.key, e.message)
            raise AuthError(e.message) from e

        self.state_store.put(context, self.state_key, self.codec.encode(request_token), STATE_TIMEOUT)
        logger.debug('Stored pending request token for %s', self.key)
        return Redirect(self.client.authorization_url(request_token))

    def _complete(self, params: httpx.QueryParams, context: t.Any) -> Authenticated:
        raw = self.state_store.get(context, self.state_key)
        self.state_store.delete(context, self.state_key)
        request_token = self.codec.decode(raw, max_age=STATE_TIMEOUT)

        if request_token is None:
            logger.warning('Callback for %s arrived without a pending request token', self.key)
            raise AuthError('No pending authorization request. It may have expired, please start over.')

        returned_token = params.get(OAUTH_TOKEN)
        if returned_token is not None and returned_token != request_token.token:
            logger.warning('Callback for %s carried an unexpected oauth_token', self.key)
            raise AuthError('Callback does not match the pending authorization request.')

        try:
            access_token = self.client.access_token(request_token, params[OAUTH_VERIFIER])
        except ProviderError as e:
            logger.warning('Access token call to %s failed: %s', self.key, e.message)
            raise AuthError(e.message) from e

        info = self.build_info(access_token)
        return Authenticated(self.transform(info))

    def signed_oauth_get(self, url: str, info: OAuth1AuthInfo, params: t.Optional[t.Mapping[str, str]] = None) -> t.Any:
        """Fetch a protected provider resource as JSON, signed with the user's access token.

        Raises:
            ResourceRequestError: If the request fails or the reply is not JSON.
        """
        return self.client.signed_get(url, info.as_access_token(), params)

    def close(self) -> None:
        """Release the provider client's connections."""
        self.client.close()
