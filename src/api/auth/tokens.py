"""
Signed bearer tokens for staff accounts (PyJWT, HS256 by default).

A token names the staff account in `sub` and nothing else about it; the
account is looked up on every request, so a deactivated clerk loses access
as soon as their current token is next presented.
"""
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import jwt

TOKEN_ISSUER = "depot-sales-api"
ACCESS = "access"
REFRESH = "refresh"


class StaffTokens:
    """Issues and checks access/refresh token pairs."""

    def __init__(self, secret: str, algorithm: str = "HS256",
                 access_minutes: int = 30, refresh_days: int = 7):
        if not secret:
            raise ValueError("API_JWT_SECRET must be set to run the API")
        self.secret = secret
        self.algorithm = algorithm
        self.lifetimes = {
            ACCESS: timedelta(minutes=access_minutes),
            REFRESH: timedelta(days=refresh_days),
        }

    def _sign(self, staff_id: str, token_type: str) -> str:
        now = datetime.now(timezone.utc)
        return jwt.encode(
            {
                "sub": staff_id,
                "type": token_type,
                "iss": TOKEN_ISSUER,
                "iat": now,
                "exp": now + self.lifetimes[token_type],
                "jti": uuid.uuid4().hex,
            },
            self.secret,
            algorithm=self.algorithm,
        )

    def issue(self, staff_id: str) -> Dict[str, Any]:
        return {
            "access_token": self._sign(staff_id, ACCESS),
            "refresh_token": self._sign(staff_id, REFRESH),
            "token_type": "bearer",
            "expires_in": int(self.lifetimes[ACCESS].total_seconds()),
        }

    def staff_id(self, token: str, token_type: str = ACCESS) -> Optional[str]:
        """
        Returns:
            The staff account id, or None for a bad, expired, foreign or
            wrong-type token.
        """
        try:
            claims = jwt.decode(token, self.secret, algorithms=[self.algorithm],
                                issuer=TOKEN_ISSUER, options={"require": ["sub", "exp"]})
        except jwt.InvalidTokenError:
            return None
        if claims.get("type") != token_type:
            return None
        return claims["sub"]
