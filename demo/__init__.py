from flask import Flask
import logging
import os

from pinup import Pinup, PinupConfig

logger = logging.getLogger(__name__)


def create_app(config_name=None):
    logging.basicConfig(level=logging.INFO)
    app = Flask(__name__, static_folder=None)
    logger.info("Logger initialized at INFO level")

    # Load configuration from pinup.config
    from pinup.config import config

    # Determine config name from environment or parameter
    if config_name is None:
        config_name = os.environ.get('PINUP_ENV', 'development')

    # Load the appropriate configuration
    config_class = config.get(config_name, config['development'])
    app.config.from_object(config_class)

    # Add security headers and rate limiting (production only)
    if config_name == 'production':
        from flask_talisman import Talisman
        from flask_limiter import Limiter
        from flask_limiter.util import get_remote_address

        Talisman(
            app,
            force_https=True,
            strict_transport_security=True,
            strict_transport_security_max_age=31536000,  # 1 year
            content_security_policy={'default-src': "'self'"},
            referrer_policy='strict-origin-when-cross-origin'
        )
        logger.info("Security headers configured with Flask-Talisman")

        limiter = Limiter(
            key_func=get_remote_address,
            app=app,
            default_limits=["200 per hour", "50 per minute"],
            storage_uri="memory://",
            strategy="fixed-window"
        )
        app.limiter = limiter
        logger.info("Rate limiting configured with Flask-Limiter")

    pinup = Pinup(app, PinupConfig.from_object(config_class))

    from demo.controllers import RootController
    pinup.pin(RootController)
    pinup.setup()

    app.pinup = pinup
    return app
