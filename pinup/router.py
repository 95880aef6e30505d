"""
The Pinup application wrapper.

Pinup collects controllers, then replays their route descriptors onto a
Flask app as URL rules. Dispatch, request parsing and the server itself are
Flask's; CORS is Flask-Cors'.

    app = Flask(__name__)
    pinup = Pinup(app, {'port': 8080, 'auth': {'secret': 's3cret'}})
    pinup.pin(Api)
    pinup.run(print_setup_config=True)
"""

import itertools
import logging
import math
import os
import time
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from flask import Flask, request, send_from_directory
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

from pinup.config import PinupConfig
from pinup.controller import PinupController
from pinup.logging_setup import configure_request_logging, format_request_line, write_request_line
from pinup.options import AuthContext, MethodOptions, MethodType, PinExtensions
from pinup.response import Reply, error_reply, to_response
from pinup.utils.formatting import ColorCode, colorize, format_table
from pinup.utils.paths import normalize_path, to_flask_rule

logger = logging.getLogger(__name__)

_endpoint_ids = itertools.count()


class Pinup:
    """Registers controllers on a Flask app."""

    def __init__(self, app: Flask, config: Union[PinupConfig, Mapping[str, Any], None] = None):
        self.app = app
        if config is None:
            config = PinupConfig()
        elif not isinstance(config, PinupConfig):
            config = PinupConfig.from_mapping(config)
        self.config = config

        self._controllers: List[PinupController] = []
        self.static_dirs: List[Tuple[str, str]] = []
        self._mounted_static = 0
        self._is_setup = False

        CORS(self.app, origins=self.config.cors_origins, send_wildcard=self.config.cors_origins == '*')
        configure_request_logging(self.config.logger_file)
        logger.info(f"Pinup attached to Flask app '{app.name}'")

    @property
    def controllers(self) -> List[PinupController]:
        return list(self._controllers)

    def pin(self, controller_cls) -> 'Pinup':
        """
        Add a controller and, recursively, all of its children.

        init() is called on each controller before its children are walked,
        so children pinned inside init() are included.

        Returns:
            self, so pins can be chained
        """
        module = controller_cls()
        self._add_controller(module)
        self.add_static_dirs()
        return self

    def _add_controller(self, controller: PinupController):
        controller.init()
        self.static_dirs.extend(controller.static_dirs)
        self._controllers.append(controller)
        for child in controller.children:
            self._add_controller(child)

    def add_static_dirs(self):
        """Mount every static directory not mounted yet."""
        for url_path, local_dir in self.static_dirs[self._mounted_static:]:
            directory = os.path.abspath(local_dir)
            prefix = url_path.rstrip('/')

            def serve(filename, _directory=directory):
                return send_from_directory(_directory, filename)

            self.app.add_url_rule(
                f"{prefix}/<path:filename>",
                endpoint=f"pinup_static_{next(_endpoint_ids)}",
                view_func=serve,
                methods=['GET']
            )
            logger.debug(f"Static directory {directory} mounted at {url_path}")
        self._mounted_static = len(self.static_dirs)

    def authorization_jwt(self) -> AuthContext:
        """Fresh JWT context for one request."""
        return AuthContext(
            secret=self.config.auth_secret,
            expires_in=self.config.auth_expires_in or '1h'
        )

    def setup(self):
        """Register a URL rule for every route of every pinned controller."""
        if self._is_setup:
            return
        methods = [method for module in self._controllers for method in module.methods]
        # Rules with an explicit OPTIONS handler must not get Flask's automatic one
        explicit_options = {_rule_for(method) for method in methods if method.method == 'option'}
        for method in methods:
            self._register(method, _rule_for(method) not in explicit_options)
        self._is_setup = True

    def _register(self, method: MethodType, automatic_options: bool = True):
        http_method = 'OPTIONS' if method.method == 'option' else method.method.upper()
        rule = _rule_for(method)

        def view(**_view_args):
            return self._endpoint_callback(method)

        self.app.add_url_rule(
            rule,
            endpoint=f"{method.parent.name}.{method.name}.{next(_endpoint_ids)}",
            view_func=view,
            methods=[http_method],
            provide_automatic_options=automatic_options and http_method != 'OPTIONS'
        )
        logger.debug(f"Registered {http_method} {rule} -> {method.parent.name}.{method.name}")

    def _endpoint_callback(self, method: MethodType):
        options = MethodOptions(
            route=method,
            pin=self.pin_method_extensions(method),
            auth=self.authorization_jwt()
        )
        start = time.perf_counter()
        try:
            result = method.action(request, options)
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Handler {method.parent.name}.{method.name} failed: {e}", exc_info=True)
            result = options.pin.res(error_reply(f"Pinup Error: {e}", status=500))
        finally:
            elapsed = (time.perf_counter() - start) * 1000
            if self.config.logger:
                options.pin.log(f"LOG +{elapsed:.3g}ms", bool(self.config.logger_file))

        if isinstance(result, Reply):
            return options.pin.res(result)
        if result is None:
            return '', 204
        return result

    def pin_method_extensions(self, method: MethodType) -> PinExtensions:
        def res(content: Reply):
            return to_response(content.path(method.full_path))

        def log(message: str, to_file: bool = False) -> str:
            url_rule = request.url_rule
            line = format_request_line(
                controller=method.parent.name,
                handler=method.name,
                method=method.method,
                rule=url_rule.rule if url_rule is not None else request.path,
                data_sources=method.data.keys(),
                message=message,
                has_auth=bool(request.headers.get('Authorization'))
            )
            return write_request_line(line, to_file=to_file and bool(self.config.logger_file))

        return PinExtensions(res=res, log=log)

    def endpoints(self) -> List[Dict[str, str]]:
        """Rows describing every HTTP route, as printed by run()."""
        rows = []
        for module in self._controllers:
            for method in module.methods:
                path = method.full_path
                rows.append({
                    'method': method.method,
                    'component': ' <- '.join(_lineage(module)[:4]),
                    'name': method.name,
                    'auth': 'yes' if method.auth else '',
                    'path': path if len(path) <= 70 else '...' + path[-70:],
                })
        return rows

    def static_endpoints(self) -> List[Dict[str, str]]:
        rows = []
        for module in self._controllers:
            for url_path, local_dir in module.static_dirs:
                rows.append({
                    'controller': module.name,
                    'local static': './' + local_dir,
                    'mapped endpoint': url_path,
                })
        return rows

    def run(self, print_setup_config: bool = False, host: str = '0.0.0.0', **kwargs):
        """
        Register all routes and start Flask's server on the configured port.

        Args:
            print_setup_config: Also log the endpoint and static dir tables
            host: Interface to bind
            **kwargs: Passed through to Flask.run (e.g. debug)
        """
        start = time.perf_counter()
        self.setup()
        build_ms = math.ceil((time.perf_counter() - start) * 1000)

        port = self.config.port
        secret = self.config.auth_secret or ''
        logger.info(f"Pinup build in {colorize(f'{build_ms}ms', ColorCode.GREEN)}")
        logger.info(f"Server is running on {colorize(str(port), ColorCode.GREEN)}")
        logger.info(f"Try to open {colorize(f'http://localhost:{port}', ColorCode.CYAN)}")
        logger.info(
            f"Authentication JWT {'enabled with' if secret else 'disabled'} "
            f"{colorize('*' * len(secret), ColorCode.RED)}"
        )

        if print_setup_config:
            self.print_setup_config()

        self.app.run(host=host, port=port, **kwargs)

    def print_setup_config(self):
        endpoints = self.endpoints()
        if endpoints:
            logger.info(colorize('HTTP Endpoints', ColorCode.BLUE) + '\n' + format_table(endpoints))
        static = self.static_endpoints()
        if static:
            logger.info(colorize('Static Endpoints', ColorCode.BLUE) + '\n' + format_table(static))


def _lineage(controller: Optional[PinupController]) -> List[str]:
    names = []
    while controller is not None:
        names.append(controller.name)
        controller = controller.parent
    return names


def _rule_for(method: MethodType) -> str:
    return to_flask_rule(normalize_path(method.parent.full_path, *method.path) or '/')
