from pinup.config import PinupConfig
from pinup.controller import PinupController, ControllerType, pin, provider
from pinup.decorators import pins, need, auth
from pinup.exceptions import PinupError, ConfigError, ControllerError, AuthDisabledError
from pinup.options import AuthContext, MethodOptions, MethodType
from pinup.response import Reply, reply
from pinup.router import Pinup

__all__ = [
    'Pinup',
    'PinupConfig',
    'PinupController',
    'ControllerType',
    'pin',
    'provider',
    'pins',
    'need',
    'auth',
    'Reply',
    'reply',
    'AuthContext',
    'MethodOptions',
    'MethodType',
    'PinupError',
    'ConfigError',
    'ControllerError',
    'AuthDisabledError'
]
