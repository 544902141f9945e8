"""
Base
------------------------

The view every route of the API extends. It carries the shared rental
manager, CORS, and the registration logic.
"""

from typing import Optional

from aiohttp.abc import Application
from aiohttp.web import View, AbstractRoute
from aiohttp_cors import CorsConfig, CorsViewMixin, ResourceOptions

from hotelfleet.service.manager.rental_manager import RentalManager


class ViewConfigurationError(Exception):
    """
    Raised if the view doesn't provide a URL.
    """


class BaseView(View, CorsViewMixin):
    """
    The base view that all other views extend.

    Ids in the url are matched as digits only (eg. ``{id:[0-9]+}``), so
    :meth:`match_id` never has to deal with anything else.
    """

    url: str
    name: Optional[str]
    route: AbstractRoute
    rental_manager: RentalManager

    cors_config = {
        "*": ResourceOptions(
            allow_credentials=True,
            expose_headers="*",
            allow_headers="*",
            allow_methods="*",
        )
    }

    def match_id(self, key: str = "id") -> int:
        """Gets a numeric id out of the url."""
        return int(self.request.match_info[key])

    @classmethod
    def register_route(cls, app: Application, base: Optional[str] = None):
        """
        Registers the view with the app's router, under ``base`` if given,
        and hands it the app's rental manager.

        :raises ViewConfigurationError: If the URL hasn't been set on the given view.
        """
        try:
            url = base + cls.url if base is not None else cls.url
        except AttributeError:
            raise ViewConfigurationError("No URL provided!")

        name = getattr(cls, "name", None)
        cls.route = app.router.add_view(url, cls, name=name)
        cls.rental_manager = app["rental_manager"]

    @classmethod
    def enable_cors(cls, cors: CorsConfig):
        """Enables CORS on the view."""
        try:
            cors.add(cls.route)
        except AttributeError as error:
            raise ViewConfigurationError("No route assigned. Please register the route first.") from error
