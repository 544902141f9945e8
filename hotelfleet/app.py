"""
App
-----
"""

import sentry_sdk
import uvloop
from aiohttp import web

from hotelfleet import logger
from hotelfleet.config import api_root, server_mode, database_url, token_secret, sentry_dsn
from hotelfleet.middleware import validate_token_middleware, service_error_middleware
from hotelfleet.service.manager.rental_manager import RentalManager
from hotelfleet.service.verify_token import JWTVerifier, DummyVerifier
from hotelfleet.signals import register_signals
from hotelfleet.version import __version__, name
from hotelfleet.views import register_views


def build_app(db_uri=None):
    """Sets up the app and installs uvloop."""
    app = web.Application(middlewares=[validate_token_middleware, service_error_middleware])
    uvloop.install()

    app['rental_manager'] = RentalManager()
    app['database_uri'] = db_uri if db_uri is not None else database_url

    if server_mode in ("development", "testing"):
        verifier = DummyVerifier()
    else:
        verifier = JWTVerifier(token_secret)

    app['token_verifier'] = verifier

    register_signals(app)
    register_views(app, api_root)

    # set up sentry exception tracking
    if server_mode != "development" and sentry_dsn:
        logger.info("Starting Sentry Logging")
        sentry_sdk.init(
            dsn=sentry_dsn,
            environment=server_mode,
            release=f"{name}@{__version__}"
        )

    return app
