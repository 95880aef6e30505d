import jwt
import pytest
from flask import Flask

from pinup import Pinup

SECRET = 'unit-test-secret-that-is-long-enough-for-hs256'


@pytest.fixture
def make_pinup():
    """Build a Flask app with Pinup and the given controllers pinned and set up."""
    def _make(*controllers, **config):
        config.setdefault('auth_secret', SECRET)
        app = Flask(__name__)
        app.config['TESTING'] = True
        pinup = Pinup(app, config)
        for controller in controllers:
            pinup.pin(controller)
        pinup.setup()
        return pinup
    return _make


@pytest.fixture
def make_client(make_pinup):
    def _make(*controllers, **config):
        return make_pinup(*controllers, **config).app.test_client()
    return _make


@pytest.fixture
def token():
    def _token(claims=None, secret=SECRET):
        return jwt.encode(claims or {'sub': 'alice'}, secret, algorithm='HS256')
    return _token
