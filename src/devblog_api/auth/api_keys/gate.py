"""The API gate: bearer key authentication and quota enforcement."""

from datetime import UTC, datetime
from typing import NoReturn

import structlog
from starlette.responses import Response

from devblog_api.auth.api_keys.hashing import hash_key
from devblog_api.auth.api_keys.models import AuthResult, RateLimitDecision
from devblog_api.auth.api_keys.quota import QuotaPolicy
from devblog_api.db.repositories import ApiKeyRepository
from devblog_api.exceptions import (
    InvalidAPIKeyError,
    MissingAPIKeyError,
    RateLimitExceededError,
)
from devblog_api.services.guard import DataStoreGuard


logger = structlog.get_logger(__name__)

BEARER_PREFIX = "Bearer "

RATE_LIMIT_HEADER = "X-RateLimit-Limit"
RATE_REMAINING_HEADER = "X-RateLimit-Remaining"
RATE_USED_HEADER = "X-RateLimit-Used"


def extract_bearer_token(auth_header: str | None) -> str | None:
    """Return the token of a `Bearer <token>` header, else None.

    The prefix match is literal and case-sensitive.
    """
    if not auth_header or not auth_header.startswith(BEARER_PREFIX):
        return None
    token = auth_header[len(BEARER_PREFIX) :]
    return token or None


class APIGate:
    """Authenticates requests by API key and charges them against the key's quota.

    The charge is made before the handler runs, so a request whose query
    later fails still counts.
    """

    def __init__(
        self,
        repository: ApiKeyRepository,
        guard: DataStoreGuard,
        quota: QuotaPolicy | None = None,
    ) -> None:
        self.repository = repository
        self.guard = guard
        self.quota = quota or QuotaPolicy()

    async def authenticate(self, auth_header: str | None) -> AuthResult:
        """Validate the Authorization header value and charge one request.

        Raises:
            MissingAPIKeyError: No header, or not a `Bearer ` credential
            InvalidAPIKeyError: No active key has this digest
            RateLimitExceededError: The key has no quota left
            DataStoreError: The key store failed
            DataStoreTimeoutError: The key store did not answer in time
        """
        token = extract_bearer_token(auth_header)
        if token is None:
            raise MissingAPIKeyError()

        key_hash = hash_key(token)
        api_key = await self.guard.run(
            lambda: self.repository.get_active_by_hash(key_hash),
            name="api_key_lookup",
        )
        if api_key is None:
            logger.warning("api_gate_invalid_key")
            raise InvalidAPIKeyError()

        now = datetime.now(UTC)
        period_start = self.quota.period_start(now)
        if period_start is None:
            decision = RateLimitDecision.evaluate(
                api_key.usage_count, api_key.rate_limit
            )
            if not decision.allowed:
                self._reject(api_key.id, decision, now)
        else:
            # The looked-up count may predate another request's rollover, so
            # only the conditional increment below decides
            rolled_over = await self.guard.run(
                lambda: self.repository.start_usage_period(api_key.id, period_start),
                name="api_key_period_rollover",
            )
            if rolled_over:
                logger.info(
                    "api_gate_quota_period_started",
                    key_id=api_key.id,
                    period_start=period_start.isoformat(),
                )

        new_count = await self.guard.run(
            lambda: self.repository.consume(api_key.id),
            name="api_key_consume",
        )
        if new_count is None:
            await self._reject_unconsumed(api_key.id, now)

        result = AuthResult(
            user_id=api_key.user_id,
            key_id=api_key.id,
            rate_limit=api_key.rate_limit,
            usage_before=new_count - 1,
        )
        logger.debug(
            "api_gate_accepted",
            key_id=result.key_id,
            user_id=result.user_id,
            used=result.used,
            limit=result.rate_limit,
        )
        return result

    async def _reject_unconsumed(self, key_id: str, now: datetime) -> NoReturn:
        """Explain a failed increment: revoked since the lookup, or out of quota."""
        current = await self.guard.run(
            lambda: self.repository.get(key_id),
            name="api_key_recheck",
        )
        if current is None or not current.is_active:
            logger.warning("api_gate_key_revoked", key_id=key_id)
            raise InvalidAPIKeyError()
        self._reject(
            key_id,
            RateLimitDecision.evaluate(current.usage_count, current.rate_limit),
            now,
        )

    def _reject(
        self, key_id: str, decision: RateLimitDecision, now: datetime
    ) -> NoReturn:
        retry_after = self.quota.retry_after(now)
        logger.warning(
            "api_gate_rate_limited",
            key_id=key_id,
            usage_count=decision.usage_count,
            rate_limit=decision.rate_limit,
            retry_after=retry_after,
        )
        raise RateLimitExceededError(retry_after)

    @staticmethod
    def decorate_response(response: Response, auth_result: AuthResult) -> Response:
        """Attach the X-RateLimit-* headers for an accepted request."""
        response.headers[RATE_LIMIT_HEADER] = str(auth_result.rate_limit)
        response.headers[RATE_REMAINING_HEADER] = str(auth_result.remaining)
        response.headers[RATE_USED_HEADER] = str(auth_result.used)
        return response
