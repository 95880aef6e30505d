"""
Tests for the Pinup router: registration, the request pipeline, static
directories, logging and JWT helpers.
"""

import logging
from datetime import timedelta

import jwt
import pytest
from flask import Flask, abort

from pinup import Pinup, PinupController, pins, need, reply
from pinup.exceptions import AuthDisabledError, ConfigError
from pinup.options import AuthContext, parse_expires_in
from tests.conftest import SECRET


class Api(PinupController):
    def init(self):
        self.path = 'api'
        self.pin(Items)

    @pins.get('')
    def index(self, rec, options):
        return options.pin.res(reply('api root'))

    @pins.option('')
    def options_index(self, rec, options):
        return reply('options')


class Items(PinupController):
    def init(self):
        self.path = 'items'

    @pins.get(':item_id')
    @need.params(['item_id'])
    def show(self, rec, options):
        return reply().data({'id': options.params['item_id'], 'route': options.route.name})

    @pins.put(':item_id', '<item_id>/replace')
    def replace(self, rec, options):
        return reply('replaced')

    @pins.post('boom')
    def boom(self, rec, options):
        raise RuntimeError('boom')

    @pins.delete(':item_id')
    def remove(self, rec, options):
        return None

    @pins.get('gone/:item_id')
    def gone(self, rec, options):
        abort(404)

    @pins.patch('raw')
    def raw(self, rec, options):
        return {'raw': True}, 202


class TestRegistration:
    """Tests for turning route descriptors into Flask URL rules"""

    def test_rules_registered(self, make_pinup):
        """Test each descriptor becomes a rule for its full path and method"""
        pinup = make_pinup(Api)
        rules = {(rule.rule, method) for rule in pinup.app.url_map.iter_rules()
                 for method in rule.methods}

        assert ('/api', 'GET') in rules
        assert ('/api', 'OPTIONS') in rules
        assert ('/api/items/<item_id>', 'GET') in rules
        assert ('/api/items/<item_id>', 'PUT') in rules
        assert ('/api/items/<item_id>/replace', 'PUT') in rules
        assert ('/api/items/boom', 'POST') in rules
        assert ('/api/items/raw', 'PATCH') in rules

    def test_children_collected(self, make_pinup):
        pinup = make_pinup(Api)
        assert [c.name for c in pinup.controllers] == ['Api', 'Items']

    def test_setup_idempotent(self, make_pinup):
        pinup = make_pinup(Api)
        count = len(list(pinup.app.url_map.iter_rules()))
        pinup.setup()
        assert len(list(pinup.app.url_map.iter_rules())) == count

    def test_same_controller_twice(self, make_pinup):
        """Test unique endpoint names let a controller class be pinned under two parents"""
        class Other(PinupController):
            def init(self):
                self.path = 'other'
                self.pin(Items)

        pinup = make_pinup(Api, Other)
        rules = {rule.rule for rule in pinup.app.url_map.iter_rules()}
        assert '/api/items/boom' in rules
        assert '/other/items/boom' in rules


class TestPipeline:
    """Tests for the per-request pipeline"""

    @pytest.fixture
    def client(self, make_client):
        return make_client(Api)

    def test_reply_gets_route_path(self, client):
        """Test replies are stamped with the route's full path"""
        response = client.get('/api/items/7')
        assert response.status_code == 200
        result = response.get_json()
        assert result['data'] == {'id': '7', 'route': 'show'}
        assert result['path'] == '/api/items/:item_id'

    def test_pin_res(self, client):
        result = client.get('/api').get_json()
        assert result['msg'] == 'api root'
        assert result['path'] == '/api'

    def test_option_method(self, client):
        response = client.options('/api')
        assert response.get_json()['msg'] == 'options'

    def test_handler_exception_becomes_500(self, client):
        """Test an exception in a handler is answered with a JSON 500"""
        response = client.post('/api/items/boom')
        assert response.status_code == 500
        result = response.get_json()
        assert result['error'] is True
        assert result['msg'] == 'Pinup Error: boom'
        assert result['path'] == '/api/items/boom'

    def test_http_exception_keeps_status(self, client):
        """Test Flask's abort() answers with its own status, not a 500"""
        response = client.get('/api/items/gone/7')
        assert response.status_code == 404

    def test_none_is_no_content(self, client):
        response = client.delete('/api/items/7')
        assert response.status_code == 204

    def test_plain_flask_return(self, client):
        response = client.patch('/api/items/raw')
        assert response.status_code == 202
        assert response.get_json() == {'raw': True}

    def test_multiple_paths(self, client):
        assert client.put('/api/items/1').status_code == 200
        assert client.put('/api/items/1/replace').status_code == 200

    def test_wrong_method(self, client):
        assert client.post('/api').status_code == 405

    def test_cors_header(self, client):
        response = client.get('/api', headers={'Origin': 'http://example.com'})
        assert response.headers.get('Access-Control-Allow-Origin') == '*'


class TestStaticDirs:
    """Tests for static directories mounted with files()"""

    def test_files_served(self, make_client, tmp_path):
        (tmp_path / 'hello.txt').write_text('hi there')
        static_root = str(tmp_path)

        class Site(PinupController):
            def init(self):
                self.path = 'site'
                self.files(static_root, 'assets')

        client = make_client(Site)
        response = client.get('/site/assets/hello.txt')
        assert response.status_code == 200
        assert response.get_data(as_text=True) == 'hi there'
        assert client.get('/site/assets/missing.txt').status_code == 404

    def test_static_endpoints_table(self, make_pinup, tmp_path):
        static_root = str(tmp_path)

        class Site(PinupController):
            def init(self):
                self.files(static_root)

        rows = make_pinup(Site).static_endpoints()
        assert rows[0]['controller'] == 'Site'
        assert rows[0]['mapped endpoint'] == '/'


class TestEndpointsTable:
    """Tests for the setup tables printed by run()"""

    def test_rows(self, make_pinup):
        rows = make_pinup(Api).endpoints()
        show = next(row for row in rows if row['name'] == 'show')
        assert show['method'] == 'get'
        assert show['component'] == 'Items <- Api'
        assert show['path'] == '/api/items/:item_id'

    def test_print_setup_config(self, make_pinup, caplog):
        caplog.set_level(logging.INFO, logger='pinup.router')
        make_pinup(Api).print_setup_config()
        assert 'HTTP Endpoints' in caplog.text
        assert '/api/items/boom' in caplog.text

    def test_run_sets_up_and_starts_server(self, make_pinup, monkeypatch):
        """Test run registers routes and hands the configured port to Flask"""
        pinup = make_pinup(port=4321)
        calls = {}
        monkeypatch.setattr(pinup.app, 'run', lambda **kwargs: calls.update(kwargs))

        pinup.run(print_setup_config=True)

        assert calls == {'host': '0.0.0.0', 'port': 4321}


class TestRequestLogging:
    """Tests for request log lines"""

    def test_log_line(self, make_client, caplog):
        caplog.set_level(logging.INFO, logger='pinup.request')
        make_client(Api).get('/api/items/7')

        line = next(r.getMessage() for r in caplog.records if r.name == 'pinup.request')
        assert 'Items' in line
        assert 'show' in line
        assert 'params' in line
        assert '/api/items/<item_id>' in line
        assert 'LOG +' in line

    def test_logger_disabled(self, make_client, caplog):
        caplog.set_level(logging.INFO, logger='pinup.request')
        make_client(Api, logger=False).get('/api')
        assert not [r for r in caplog.records if r.name == 'pinup.request']

    def test_log_file_without_colors(self, make_client, tmp_path):
        """Test request lines are appended to the log file with ANSI codes stripped"""
        log_file = tmp_path / 'requests.log'
        make_client(Api, logger_file=str(log_file)).get('/api')

        content = log_file.read_text()
        assert 'LOG +' in content
        assert '{GET - , /api}' in content
        assert '\x1b' not in content


class TestConfigMerge:
    """Tests for config handling in the Pinup constructor"""

    def test_defaults(self):
        pinup = Pinup(Flask(__name__))
        assert pinup.config.port == 3000
        assert pinup.config.logger is True
        assert pinup.config.auth_secret is None

    def test_nested_auth_mapping(self):
        pinup = Pinup(Flask(__name__), {'port': 8080, 'auth': {'secret': SECRET, 'expires_in': '2h'}})
        assert pinup.config.port == 8080
        assert pinup.config.auth_secret == SECRET
        assert pinup.config.auth_expires_in == '2h'

    def test_unknown_key(self):
        with pytest.raises(ConfigError, match='static_path'):
            Pinup(Flask(__name__), {'static_path': '/'})


class TestAuthContext:
    """Tests for signing and verifying tokens"""

    def test_sign_and_verify(self):
        context = AuthContext(secret=SECRET)
        token = context.sign({'sub': 'alice'})
        payload = context.verify(token)
        assert payload['sub'] == 'alice'
        assert 'exp' in payload

    def test_sign_keeps_explicit_exp(self):
        context = AuthContext(secret=SECRET)
        token = context.sign({'sub': 'alice', 'exp': 4102444800})
        assert jwt.decode(token, SECRET, algorithms=['HS256'])['exp'] == 4102444800

    def test_sign_with_own_secret(self):
        other = 'another-secret-that-is-long-enough-for-hs256'
        token = AuthContext().sign({'sub': 'bob'}, other)
        assert jwt.decode(token, other, algorithms=['HS256'])['sub'] == 'bob'

    def test_sign_without_secret(self):
        with pytest.raises(AuthDisabledError):
            AuthContext().sign({'sub': 'alice'})

    def test_expires_in_option(self):
        context = AuthContext(secret=SECRET)
        token = context.sign({'sub': 'alice'}, expires_in=-10)
        with pytest.raises(jwt.ExpiredSignatureError):
            context.verify(token)

    @pytest.mark.parametrize('value, expected', [
        ('1h', timedelta(hours=1)),
        ('30m', timedelta(minutes=30)),
        ('2 days', timedelta(days=2)),
        ('90', timedelta(seconds=90)),
        (120, timedelta(seconds=120)),
    ])
    def test_parse_expires_in(self, value, expected):
        assert parse_expires_in(value) == expected

    def test_parse_expires_in_invalid(self):
        with pytest.raises(ValueError):
            parse_expires_in('soon')
