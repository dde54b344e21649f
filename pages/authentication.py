import logging

from rest_framework import exceptions
from rest_framework_simplejwt.authentication import JWTAuthentication
from rest_framework_simplejwt.exceptions import InvalidToken, TokenError
from rest_framework_simplejwt.tokens import AccessToken

logger = logging.getLogger(__name__)


def issue_token(user) -> str:
    token = AccessToken.for_user(user)
    token["username"] = user.username
    return str(token)


class BearerAuthentication(JWTAuthentication):
    """``Authorization: Bearer <jwt>``; a bad token is a 401."""


class OptionalBearerAuthentication(BearerAuthentication):
    """Same token format, but any token problem degrades to an anonymous request."""

    def authenticate(self, request):
        try:
            return super().authenticate(request)
        except (InvalidToken, TokenError, exceptions.AuthenticationFailed) as exc:
            logger.debug("Ignoring unusable bearer token: %s", exc)
            return None
