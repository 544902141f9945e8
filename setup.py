import os

from setuptools import setup, find_packages

with open(os.path.join(os.path.dirname(__file__), "readme.md"), "r") as fh:
    long_description = fh.read()

setup(
    name='hotelfleet',
    version='1.0.0',
    license='MIT',
    description='Bike rentals for hotel front desks.',
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=("tests", "tests.*")),
    python_requires='>=3.8',
    install_requires=[
        'aiohttp',
        'aiohttp-cors',
        'tortoise-orm',
        'marshmallow>=3.13,<4',
        'marshmallow-jsonschema',
        'python-jose',
        'uvloop',
        'sentry-sdk',
    ],
    extras_require={
        'test': [
            'pytest',
            'pytest-asyncio',
            'pytest-aiohttp',
            'faker',
        ],
    },
    entry_points={
        'console_scripts': ['hotelfleet=hotelfleet.cli:run'],
    },
)
