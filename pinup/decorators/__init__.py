"""
Decorators for Pinup controller handlers.

Provides the route, required field and JWT auth decorators.
"""

from pinup.decorators.routing import pins, route, PINS_METHODS
from pinup.decorators.required import need, require_fields
from pinup.decorators.jwt_auth import auth

__all__ = ['pins', 'route', 'PINS_METHODS', 'need', 'require_fields', 'auth']
