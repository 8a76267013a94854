"""Per-provider OAuth 1.0a settings."""

import typing as t
from dataclasses import dataclass

from oauth1_handshake.exceptions import ConfigurationError
from oauth1_handshake.models import ConsumerCredential, ServiceEndpoints


class SettingKeys:
    """Configuration keys read by :meth:`OAuth1Settings.from_mapping`."""

    REQUEST_TOKEN_URL = 'requestTokenUrl'
    AUTHORIZATION_URL = 'authorizationUrl'
    ACCESS_TOKEN_URL = 'accessTokenUrl'
    CONSUMER_KEY = 'consumerKey'
    CONSUMER_SECRET = 'consumerSecret'
    TIMEOUT = 'timeout'
    SIGNATURE_METHOD = 'signatureMethod'

    REQUIRED = (
        REQUEST_TOKEN_URL,
        AUTHORIZATION_URL,
        ACCESS_TOKEN_URL,
        CONSUMER_KEY,
        CONSUMER_SECRET,
    )


DEFAULT_TIMEOUT = 10.0
DEFAULT_SIGNATURE_METHOD = 'HMAC-SHA1'


@dataclass(frozen=True)
class OAuth1Settings:
    """Validated provider settings."""

    endpoints: ServiceEndpoints
    consumer: ConsumerCredential
    timeout: float = DEFAULT_TIMEOUT
    signature_method: str = DEFAULT_SIGNATURE_METHOD

    @classmethod
    def from_mapping(cls, config: t.Mapping[str, t.Any]) -> 'OAuth1Settings':
        """Build settings from a provider configuration mapping.

        Args:
            config: Provider configuration, keyed by :class:`SettingKeys` names.

        Returns:
            Validated settings.

        Raises:
            ConfigurationError: If any required key is missing or empty, or the
                timeout is not a positive number.
        """
        missing = [key for key in SettingKeys.REQUIRED if not config.get(key)]
        if missing:
            raise ConfigurationError(f'OAuth1 provider not configured. Missing settings: {", ".join(missing)}')

        raw_timeout = config.get(SettingKeys.TIMEOUT, DEFAULT_TIMEOUT)
        try:
            timeout = float(raw_timeout)
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f'Invalid {SettingKeys.TIMEOUT} setting: {raw_timeout!r}') from e
        if timeout <= 0:
            raise ConfigurationError(f'{SettingKeys.TIMEOUT} must be positive, got {timeout}')

        return cls(
            endpoints=ServiceEndpoints(
                request_token_url=config[SettingKeys.REQUEST_TOKEN_URL],
                authorization_url=config[SettingKeys.AUTHORIZATION_URL],
                access_token_url=config[SettingKeys.ACCESS_TOKEN_URL],
            ),
            consumer=ConsumerCredential(
                key=config[SettingKeys.CONSUMER_KEY],
                secret=config[SettingKeys.CONSUMER_SECRET],
            ),
            timeout=timeout,
            signature_method=config.get(SettingKeys.SIGNATURE_METHOD) or DEFAULT_SIGNATURE_METHOD,
        )
