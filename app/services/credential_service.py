"""
DevMatch — Credential Service

Password hashing (bcrypt) and stateless session tokens (HS256 JWT via
python-jose).  Tokens carry ``{_id, iat, exp}``; nothing is persisted
server-side, so a token stays valid until it expires even after logout.

Expiry is checked here against an explicit clock rather than inside
``jwt.decode`` so callers (and tests) can verify a token "as of" a given
moment.
"""

from __future__ import annotations

import time
import uuid
from functools import cached_property

import bcrypt
import structlog
from jose import JWTError, jwt

from app.config import get_settings
from app.errors import InvalidToken

logger = structlog.get_logger("devmatch.services.credentials")


class CredentialService:
    """Hash/verify passwords and issue/verify session tokens."""

    def __init__(self) -> None:
        settings = get_settings()
        self.rounds = settings.BCRYPT_ROUNDS
        self.secret = settings.JWT_SECRET
        self.algorithm = settings.JWT_ALGORITHM
        self.default_ttl = settings.TOKEN_TTL_SECONDS

    # ------------------------------------------------------------------ #
    # Passwords
    # ------------------------------------------------------------------ #

    def hash_password(self, password: str) -> str:
        hashed = bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=self.rounds))
        return hashed.decode("utf-8")

    def verify_password(self, password: str, hashed_password: str | None) -> bool:
        if not password or not hashed_password:
            return False
        try:
            return bcrypt.checkpw(password.encode("utf-8"), hashed_password.encode("utf-8"))
        except ValueError:
            # Stored value is not a bcrypt hash.
            logger.warning("verify_password_malformed_hash")
            return False

    @cached_property
    def _decoy_hash(self) -> str:
        return self.hash_password(uuid.uuid4().hex)

    def verify_against_decoy(self, password: str) -> bool:
        """Spend one bcrypt comparison on a throwaway hash.

        Used when no account matches so a failed login costs the same
        whether or not the email is registered.  Always False.
        """
        self.verify_password(password or "-", self._decoy_hash)
        return False

    # ------------------------------------------------------------------ #
    # Session tokens
    # ------------------------------------------------------------------ #

    def issue_token(
        self,
        user_id: uuid.UUID,
        ttl_seconds: int | None = None,
        issued_at: int | None = None,
    ) -> str:
        """Sign a token for ``user_id`` valid for ``ttl_seconds`` (default 1h)."""
        iat = int(issued_at if issued_at is not None else time.time())
        ttl = ttl_seconds if ttl_seconds is not None else self.default_ttl
        claims = {
            "_id": str(user_id),
            "iat": iat,
            "exp": iat + int(ttl),
        }
        return jwt.encode(claims, self.secret, algorithm=self.algorithm)

    def verify_token(self, token: str | None, now: float | None = None) -> uuid.UUID:
        """Return the user id carried by ``token`` or raise ``InvalidToken``."""
        if not token:
            raise InvalidToken("Missing session token")

        try:
            payload = jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                options={"verify_exp": False, "verify_iat": False},
            )
        except JWTError as exc:
            raise InvalidToken("Invalid session token") from exc

        exp = payload.get("exp")
        current = now if now is not None else time.time()
        if not isinstance(exp, (int, float)) or current >= exp:
            raise InvalidToken("Session token expired")

        try:
            return uuid.UUID(str(payload.get("_id", "")))
        except ValueError as exc:
            raise InvalidToken("Session token missing user id") from exc
