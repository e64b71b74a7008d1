"""Rate limiter for faucet disbursements.

Features:
- Per-user cooldown measured from the most recent grant
- Check-and-record under a per-user lock
- Append-only grant history held in memory
"""

import asyncio
import logging
import time
from dataclasses import dataclass

logger = logging.getLogger(__name__)

SECONDS_PER_HOUR = 3600


def default_cooldown_message(cooldown_hours: float) -> str:
    """Build the reply sent when a user is still cooling down."""
    return (
        f"Sorry please wait for {cooldown_hours:g} hours, "
        "between token requests from the same account!"
    )


@dataclass
class RateLimitResult:
    """Result of a grant attempt."""

    allowed: bool
    granted_at: float | None  # Recorded grant timestamp when allowed
    cooldown_seconds: int | None  # Seconds until next request allowed
    reason: str | None  # Rejection message if not allowed


class RateLimiter:
    """Per-user cooldown gate for token requests.

    Grants are recorded in the same critical section as the check, so two
    concurrent requests from one user cannot both pass. The lock covers only
    the record mutation; the transfer that follows runs outside it.

    History is kept for the life of the process and never pruned.

    Parameters
    ----------
    cooldown_hours : float
        Minimum interval between two grants to the same user.
    cooldown_message : str | None
        Reply used on denial. Defaults to ``default_cooldown_message``.
    """

    def __init__(self, cooldown_hours: float = 24.0, cooldown_message: str | None = None):
        self._cooldown_hours = cooldown_hours
        self._cooldown_message = cooldown_message or default_cooldown_message(cooldown_hours)
        self._grants: dict[str, list[float]] = {}
        self._locks: dict[str, asyncio.Lock] = {}

    @property
    def cooldown_hours(self) -> float:
        return self._cooldown_hours

    @property
    def cooldown_message(self) -> str:
        return self._cooldown_message

    def _lock_for(self, user_id: str) -> asyncio.Lock:
        lock = self._locks.get(user_id)
        if lock is None:
            lock = self._locks[user_id] = asyncio.Lock()
        return lock

    async def try_grant(
        self,
        user_id: str,
        now: float | None = None,
        cooldown_hours: float | None = None,
    ) -> RateLimitResult:
        """Check the cooldown and record a grant if it has elapsed.

        Parameters
        ----------
        user_id : str
            Chat user identifier.
        now : float | None
            Request time in seconds since the epoch. Defaults to the clock.
        cooldown_hours : float | None
            Override of the configured cooldown.

        Returns
        -------
        RateLimitResult
            Allowed with the recorded timestamp, or denied with the wait.
        """
        now = time.time() if now is None else now
        hours = self._cooldown_hours if cooldown_hours is None else cooldown_hours
        cooldown_seconds = hours * SECONDS_PER_HOUR

        async with self._lock_for(user_id):
            grants = self._grants.setdefault(user_id, [])
            if grants:
                elapsed = now - grants[-1]
                if elapsed <= cooldown_seconds:
                    remaining = max(0, int(cooldown_seconds - elapsed))
                    logger.info(
                        "Request denied by cooldown",
                        extra={"user_id": user_id, "cooldown_seconds": remaining},
                    )
                    return RateLimitResult(
                        allowed=False,
                        granted_at=None,
                        cooldown_seconds=remaining,
                        reason=self._cooldown_message,
                    )
            grants.append(now)

        logger.debug("Grant recorded", extra={"user_id": user_id, "grant_count": len(grants)})
        return RateLimitResult(allowed=True, granted_at=now, cooldown_seconds=None, reason=None)

    async def release(self, user_id: str, granted_at: float) -> bool:
        """Withdraw a grant whose transfer never reached the node.

        Only the most recent grant can be withdrawn, and only if it is the
        one recorded at ``granted_at``.

        Returns
        -------
        bool
            True if the grant was removed.
        """
        async with self._lock_for(user_id):
            grants = self._grants.get(user_id)
            if grants and grants[-1] == granted_at:
                grants.pop()
                logger.info("Grant released", extra={"user_id": user_id})
                return True
        return False

    def last_grant(self, user_id: str) -> float | None:
        """Timestamp of the user's most recent grant, if any."""
        grants = self._grants.get(user_id)
        return grants[-1] if grants else None

    def grant_count(self, user_id: str) -> int:
        return len(self._grants.get(user_id, ()))

    def reset_user(self, user_id: str) -> None:
        """Reset a user's grant history (admin function).

        Parameters
        ----------
        user_id : str
            User identifier.
        """
        self._grants.pop(user_id, None)
        logger.info("Rate limit reset for user", extra={"user_id": user_id})
