"""JWT session tokens.

Stateless bearer tokens: the username travels in the `sub` claim and the
HS256 signature is the only thing that makes a token valid. There is no
server-side session table.

Tokens carry no `exp` claim, so a leaked token stays valid until the
signing secret is rotated.

TODO: add an `exp` claim and a revocation list before exposing this
beyond a trusted deployment.
"""

from datetime import datetime, timezone

import jwt

from messagely.errors import UnauthorizedError


class SessionIssuer:
    """Issues and verifies signed tokens for a single secret."""

    def __init__(self, secret: str, algorithm: str = "HS256"):
        self.secret = secret
        self.algorithm = algorithm

    def issue(self, username: str) -> str:
        """Create a signed token naming `username`."""
        payload = {
            "sub": username,
            "iat": datetime.now(timezone.utc),
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def verify(self, token: str | None) -> str:
        """Verify a token and return the username it was issued for.

        Raises UnauthorizedError on an absent, malformed, or forged token.
        """
        if not token:
            raise UnauthorizedError()
        try:
            payload = jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                options={"require": ["sub"]},
            )
        except jwt.InvalidTokenError:
            raise UnauthorizedError()

        username = payload.get("sub")
        if not isinstance(username, str) or not username:
            raise UnauthorizedError()
        return username
