"""
The entry point for the CLI tool
"""

from aiohttp import web

from hotelfleet import logger
from hotelfleet.app import build_app
from hotelfleet.version import __version__, name


def run():
    """Builds and runs the app."""
    logger.info(f'Starting {name} %s!', __version__)
    web.run_app(build_app())


if __name__ == '__main__':
    run()
