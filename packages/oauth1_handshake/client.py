"""OAuth 1.0a client for the provider's token and resource endpoints."""

import logging
import typing as t
from urllib.parse import parse_qsl, urlencode

import httpx

from oauth1_handshake.exceptions import ProviderError, ResourceRequestError
from oauth1_handshake.models import AccessToken, ConsumerCredential, RequestToken, ServiceEndpoints
from oauth1_handshake.settings import DEFAULT_SIGNATURE_METHOD, DEFAULT_TIMEOUT
from oauth1_handshake.signing import OAuth1Signer, Params, validate_signature_method

logger = logging.getLogger(__name__)

OAUTH_TOKEN = 'oauth_token'
OAUTH_TOKEN_SECRET = 'oauth_token_secret'
OAUTH_CALLBACK = 'oauth_callback'
OAUTH_CALLBACK_CONFIRMED = 'oauth_callback_confirmed'
OAUTH_VERIFIER = 'oauth_verifier'
OAUTH_PROBLEM = 'oauth_problem'


class OAuth1Client:
    """Talks to one provider's OAuth 1.0a endpoints.

    All calls block until the provider responds or the timeout elapses.
    There are no retries.

    Example:
        >>> with OAuth1Client(endpoints, consumer) as client:
        ...     request_token = client.request_token('https://app.example.com/callback')
        ...     url = client.authorization_url(request_token)
    """

    def __init__(
        self,
        endpoints: ServiceEndpoints,
        consumer: ConsumerCredential,
        timeout: float = DEFAULT_TIMEOUT,
        signature_method: str = DEFAULT_SIGNATURE_METHOD,
        transport: t.Optional[httpx.BaseTransport] = None,
    ) -> None:
        """Initialize the client.

        Args:
            endpoints: Provider endpoints.
            consumer: Application credentials.
            timeout: Timeout in seconds for every provider call.
            signature_method: ``HMAC-SHA1`` or ``PLAINTEXT``.
            transport: Custom httpx transport, e.g. ``httpx.MockTransport`` in tests.
        """
        self.endpoints = endpoints
        self.consumer = consumer
        self.signature_method = signature_method
        validate_signature_method(signature_method)
        self._http = httpx.Client(timeout=timeout, transport=transport)

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> 'OAuth1Client':
        return self

    def __exit__(self, *exc_info: t.Any) -> None:
        self.close()

    def _signer(self, token: t.Optional[str] = None, token_secret: str = '') -> OAuth1Signer:
        return OAuth1Signer(self.consumer, token, token_secret, self.signature_method)

    def _token_request(self, url: str, signer: OAuth1Signer, extra_oauth: t.Mapping[str, str]) -> t.Dict[str, str]:
        """Make a signed POST to a token endpoint and parse the form-encoded reply.

        Raises:
            ProviderError: On network failure, error status, or a reply without token credentials.
        """
        headers = {'Authorization': signer.authorization_header('POST', url, extra_oauth=extra_oauth)}
        try:
            response = self._http.post(url, headers=headers)
        except httpx.HTTPError as e:
            raise ProviderError(f'Request to {url} failed: {e}') from e

        body = dict(parse_qsl(response.text, keep_blank_values=True))
        if response.is_error:
            message = body.get(OAUTH_PROBLEM) or response.text.strip() or response.reason_phrase
            raise ProviderError(message, status_code=response.status_code)

        if not body.get(OAUTH_TOKEN) or OAUTH_TOKEN_SECRET not in body:
            raise ProviderError(f'Malformed token response from {url}', status_code=response.status_code)

        return body

    def request_token(self, callback_url: str) -> RequestToken:
        """Obtain temporary credentials.

        Args:
            callback_url: Where the provider sends the user back to.

        Returns:
            The request token.

        Raises:
            ProviderError: If the provider call fails or is rejected.
        """
        body = self._token_request(
            self.endpoints.request_token_url,
            self._signer(),
            {OAUTH_CALLBACK: callback_url},
        )
        if body.get(OAUTH_CALLBACK_CONFIRMED) != 'true':
            logger.warning('Provider at %s did not confirm the callback URL', self.endpoints.request_token_url)

        return RequestToken(token=body[OAUTH_TOKEN], secret=body[OAUTH_TOKEN_SECRET])

    def authorization_url(self, request_token: RequestToken) -> str:
        """Build the URL the user is sent to for consent."""
        url = self.endpoints.authorization_url
        separator = '&' if '?' in url else '?'
        return f'{url}{separator}{urlencode({OAUTH_TOKEN: request_token.token})}'

    def access_token(self, request_token: RequestToken, verifier: str) -> AccessToken:
        """Exchange an authorized request token for an access token.

        Args:
            request_token: Token obtained by :meth:`request_token`.
            verifier: ``oauth_verifier`` from the provider callback.

        Returns:
            The access token.

        Raises:
            ProviderError: If the provider call fails or the verifier is rejected.
        """
        body = self._token_request(
            self.endpoints.access_token_url,
            self._signer(request_token.token, request_token.secret),
            {OAUTH_VERIFIER: verifier},
        )
        return AccessToken(token=body[OAUTH_TOKEN], secret=body[OAUTH_TOKEN_SECRET])

    def signed_get(self, url: str, access_token: AccessToken, params: t.Optional[Params] = None) -> t.Any:
        """Make a signed GET against a protected resource and parse the JSON reply.

        Args:
            url: Resource URL.
            access_token: Token credentials to sign with.
            params: Extra query parameters.

        Returns:
            Parsed JSON body.

        Raises:
            ResourceRequestError: On network failure, timeout, error status, or invalid JSON.
        """
        request_url = str(httpx.URL(url, params=params)) if params else url
        signer = self._signer(access_token.token, access_token.secret)
        headers = {'Authorization': signer.authorization_header('GET', request_url)}

        try:
            response = self._http.get(request_url, headers=headers)
        except httpx.TimeoutException as e:
            raise ResourceRequestError(f'Request to {url} timed out') from e
        except httpx.HTTPError as e:
            raise ResourceRequestError(f'Request to {url} failed: {e}') from e

        if not response.is_success:
            raise ResourceRequestError(
                f'Request to {url} returned HTTP {response.status_code}', status_code=response.status_code
            )

        try:
            return response.json()
        except ValueError as e:
            raise ResourceRequestError(f'Response from {url} is not valid JSON', status_code=response.status_code) from e
