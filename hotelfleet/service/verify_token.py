"""
Verify Token
------------

The token verification strategies used to work out which hotel is making a
request. Tokens are issued elsewhere; the server only checks them.
"""
from abc import ABC, abstractmethod

from aiohttp.web_request import Request
from jose import jwt, ExpiredSignatureError, JWTError


class TokenVerificationError(Exception):
    pass


class TokenVerifier(ABC):

    @abstractmethod
    def verify_token(self, token) -> int:
        """
        Given a token, verifies it, returning the id of the hotel it was issued to.

        :raises TokenVerificationError: When the provided token is invalid.
        """


class JWTVerifier(TokenVerifier):
    """
    Verifies a HS256 signed JWT carrying a ``hotel_id`` claim.
    """

    def __init__(self, secret: str):
        if not secret:
            raise ValueError("A token secret is required.")
        self._secret = secret

    def verify_token(self, token, verify_exp=True) -> int:
        if not isinstance(token, str):
            raise TypeError(f"Token must be of type string, not {type(token)}")

        try:
            claims = jwt.decode(token, self._secret, algorithms="HS256", options={"verify_exp": verify_exp})
        except ExpiredSignatureError as e:
            raise TokenVerificationError("Token is expired.") from e
        except JWTError as e:
            raise TokenVerificationError("Token is invalid.") from e

        try:
            return int(claims["hotel_id"])
        except (KeyError, TypeError, ValueError) as e:
            raise TokenVerificationError("Token does not identify a hotel.") from e


class DummyVerifier(TokenVerifier):
    """
    Verifies a dummy token, which is simply the hotel id.
    """

    def verify_token(self, token: str) -> int:
        try:
            hotel_id = int(token)
        except (ValueError, TypeError):
            raise TokenVerificationError("Not a valid hotel id.")

        if hotel_id <= 0:
            raise TokenVerificationError("Not a valid hotel id.")

        return hotel_id


def verify_token(request: Request) -> int:
    """
    Checks a request for a valid Authorization header.

    :param request: The request to check.
    :return: The id of the hotel the token belongs to.
    :raises TokenVerificationError: When the Authorization header is missing or invalid.
    """
    if "Authorization" not in request.headers:
        raise TokenVerificationError("You must supply your hotel token.")

    if not request.headers["Authorization"].startswith("Bearer "):
        raise TokenVerificationError("The Authorization header must be of the format \"Bearer $TOKEN\".")

    return request.app["token_verifier"].verify_token(request.headers["Authorization"][7:])
