"""
Bearer token service.

Tokens are HS256 JWTs signed with a single shared key (supplied
base64-encoded) and carry a ``roles`` claim, a list of strings.
"""

import base64
import binascii
import logging
from abc import ABC, abstractmethod
from typing import Iterable, List

import jwt

from errors import AuthError, ErrorMessage

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"


class TokenAuthority(ABC):
    """Abstract base class for token verification and issuing."""

    @abstractmethod
    def has_role(self, token: str, role: str) -> bool:
        """
        Verify a token and check it carries a role.

        Returns:
            True if the role is present, False if the token is valid but
            the role is not

        Raises:
            AuthError: token is malformed, badly signed or uses another
            algorithm
        """
        pass

    @abstractmethod
    def issue(self, roles: Iterable[str]) -> str:
        pass


class JWTAuth(TokenAuthority):
    """HS256 token authority backed by PyJWT."""

    def __init__(self, key: str):
        try:
            self.key = base64.b64decode(key, validate=True)
        except (binascii.Error, ValueError) as e:
            raise ValueError(f"Invalid {ALGORITHM} key: {e}") from e
        if not self.key:
            raise ValueError(f"Invalid {ALGORITHM} key: empty")

    def issue(self, roles: Iterable[str]) -> str:
        return jwt.encode({"roles": list(roles)}, self.key, algorithm=ALGORITHM)

    def has_role(self, token: str, role: str) -> bool:
        roles = self._roles(token)
        return role in roles

    def _roles(self, token: str) -> List[str]:
        try:
            header = jwt.get_unverified_header(token)
        except jwt.InvalidTokenError as e:
            raise AuthError(ErrorMessage.JWT_INVALID, f"malformed token: {e}") from e
        if header.get("alg") != ALGORITHM:
            raise AuthError(
                ErrorMessage.JWT_INVALID_METHOD,
                f"unexpected signing method {header.get('alg')!r}",
            )

        try:
            claims = jwt.decode(token, self.key, algorithms=[ALGORITHM])
        except jwt.InvalidTokenError as e:
            raise AuthError(ErrorMessage.JWT_INVALID, str(e)) from e

        roles = claims.get("roles")
        if roles is None:
            return []
        if not isinstance(roles, list) or not all(isinstance(r, str) for r in roles):
            raise AuthError(ErrorMessage.JWT_INVALID, "roles claim is not a list of strings")
        return roles
