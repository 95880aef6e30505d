import os
from dataclasses import dataclass, fields
from typing import Any, Mapping, Optional, Union

from dotenv import load_dotenv

from pinup.exceptions import ConfigError

# Load environment variables from .env file
load_dotenv()

PLACEHOLDER_SECRETS = ('CHANGE_THIS_SECRET', 'your-secret-here')


def _env_bool(name: str, default: str) -> bool:
    return os.environ.get(name, default).lower() in ('1', 'true', 'yes', 'on')


class Config:
    """Base configuration class."""
    PINUP_PORT = int(os.environ.get('PINUP_PORT', '3000'))

    # Request logging (configurable via environment variables)
    PINUP_LOGGER = _env_bool('PINUP_LOGGER', 'true')
    PINUP_LOGGER_FILE = os.environ.get('PINUP_LOGGER_FILE') or None

    # JWT settings; auth decorators are disabled while the secret is unset
    PINUP_AUTH_SECRET = os.environ.get('PINUP_AUTH_SECRET') or None
    PINUP_AUTH_EXPIRES_IN = os.environ.get('PINUP_AUTH_EXPIRES_IN', '1h')

    # Comma separated list, '*' allows every origin
    PINUP_CORS_ORIGINS = os.environ.get('PINUP_CORS_ORIGINS', '*')

    DEBUG = False
    TESTING = False


class DevelopmentConfig(Config):
    """Development configuration."""
    DEBUG = True


class TestingConfig(Config):
    """Testing configuration."""
    TESTING = True
    PINUP_LOGGER_FILE = None
    PINUP_AUTH_SECRET = 'test-secret-do-not-use-in-production'


class ProductionConfig(Config):
    """Production configuration."""
    # Explicitly disable debug mode in production
    DEBUG = False


# Configuration dictionary
config = {
    'development': DevelopmentConfig,
    'testing': TestingConfig,
    'production': ProductionConfig,
    'default': DevelopmentConfig
}


@dataclass
class PinupConfig:
    """Settings consumed by the Pinup router."""
    port: int = 3000
    logger: bool = True
    logger_file: Optional[str] = None
    auth_secret: Optional[str] = None
    auth_expires_in: Union[str, int] = '1h'
    cors_origins: Union[str, list] = '*'

    def __post_init__(self):
        if self.auth_secret in PLACEHOLDER_SECRETS:
            raise ConfigError("Auth secret must be changed from the default placeholder value")

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> 'PinupConfig':
        """
        Build a config from a dict, filling unset fields with defaults.

        A nested 'auth' dict ({'secret': ..., 'expires_in': ...}) is accepted
        in place of the auth_* keys.

        Raises:
            ConfigError: on unknown keys
        """
        values = dict(values)
        auth = values.pop('auth', None) or {}
        if 'secret' in auth:
            values.setdefault('auth_secret', auth['secret'])
        if 'expires_in' in auth:
            values.setdefault('auth_expires_in', auth['expires_in'])

        known = {f.name for f in fields(cls)}
        unknown = sorted(set(values) - known)
        if unknown:
            raise ConfigError(f"Unknown Pinup config keys: {', '.join(unknown)}")
        return cls(**values)

    @classmethod
    def from_object(cls, obj: Any) -> 'PinupConfig':
        """Build a config from one of the Config classes (or a Flask app.config)."""
        def get(key, default):
            if isinstance(obj, Mapping):
                return obj.get(key, default)
            return getattr(obj, key, default)

        origins = get('PINUP_CORS_ORIGINS', '*')
        if isinstance(origins, str) and origins != '*':
            origins = [origin.strip() for origin in origins.split(',') if origin.strip()]

        return cls(
            port=int(get('PINUP_PORT', 3000)),
            logger=bool(get('PINUP_LOGGER', True)),
            logger_file=get('PINUP_LOGGER_FILE', None),
            auth_secret=get('PINUP_AUTH_SECRET', None),
            auth_expires_in=get('PINUP_AUTH_EXPIRES_IN', '1h'),
            cors_origins=origins
        )
