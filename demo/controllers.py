import logging
import os
from datetime import datetime, timezone

from pinup import PinupController, pin, pins, need, auth, reply

logger = logging.getLogger('demo.controllers')

STATIC_DIR = os.path.join(os.path.dirname(__file__), 'static')

# In-memory user store for the demo
USERS = {
    'alice': {'name': 'alice', 'password': 'wonderland', 'role': 'admin'},
    'bob': {'name': 'bob', 'password': 'builder', 'role': 'user'},
}


class RootController(PinupController):
    """Root of the demo API"""

    def init(self):
        self.path = '/'
        self.files(STATIC_DIR, 'static')
        self.pin(UsersController)

    @pins.get('health')
    def health(self, rec, options):
        """Health check endpoint for load balancers"""
        return reply('healthy').data({'timestamp': datetime.now(timezone.utc).isoformat()})


class UsersController(PinupController):

    def init(self):
        self.path = 'users'

    @pins.post('login')
    @need.body(['name', 'password'])
    def login(self, rec, options):
        user = USERS.get(options.body['name'])
        if not user or user['password'] != options.body['password']:
            logger.warning(f"Failed login for {options.body['name']}")
            return options.pin.res(reply('Invalid credentials').status(401).error(True))

        token = options.auth.sign({'sub': user['name'], 'role': user['role']})
        return reply('Logged in').data({'token': token})

    @pins.get('me')
    @auth()
    def me(self, rec, options):
        return reply().data(options.auth.payload)

    @pins.get('greeting')
    @need.query(['?name'])
    @auth(error=False)
    def greeting(self, rec, options):
        if options.auth.passed:
            name = options.auth.payload['sub']
        else:
            name = options.query.get('name') or 'stranger'
        return reply(f'Hello, {name}!').type('text')

    @pins.get(':name')
    @need.params(['name'])
    def show(self, rec, options):
        user = USERS.get(options.params['name'])
        if not user:
            return options.pin.res(reply('User not found').status(404).error(True))
        return reply().data({'name': user['name'], 'role': user['role']})


# Declared as a child of UsersController: served under /users/admin
@pin('admin', parent=UsersController)
class AdminController(PinupController):

    def init(self):
        self.path = 'admin'

    @pins.post('echo')
    @pins.put('echo')
    @need.headers(['x-request-id'])
    @auth()
    def echo(self, rec, options):
        if options.auth.payload.get('role') != 'admin':
            return options.pin.res(reply('Admin role required').status(403).error(True))
        return reply('echo').data({
            'request_id': options.headers['x-request-id'],
            'body': rec.get_json(silent=True)
        })

    @pins.delete('crash')
    def crash(self, rec, options):
        raise RuntimeError('demo failure')
