"""Per-client quotas for the public submission and upload endpoints.

Every identity gets two independent fixed windows per namespace: an hourly and
a daily counter. A window resets to zero the moment ``now`` reaches its reset
time, and the next reset is scheduled one full window after that moment.

The default store lives in process memory, so counts are per worker and are
forgotten on restart. Set ``RATE_LIMIT_BACKEND=redis`` to share counters across
workers without changing the ``check``/``status`` contract.
"""

from __future__ import annotations

import logging
import math
import time
from collections.abc import Callable, Mapping
from dataclasses import dataclass, replace
from functools import lru_cache
from threading import Lock
from typing import Any, Final, Protocol, TypeVar

import redis
from redis.exceptions import LockError

from moments_archive.core.errors import RateLimitUnavailable
from moments_archive.core.settings import Settings, settings

logger = logging.getLogger(__name__)

HOUR_SECONDS: Final[int] = 60 * 60
DAY_SECONDS: Final[int] = 24 * 60 * 60
DEFAULT_NAMESPACE: Final[str] = "default"

T = TypeVar("T")


@dataclass(frozen=True)
class RateLimitPolicy:
    """Independent hourly and daily ceilings for one namespace."""

    hourly_limit: int
    daily_limit: int


@dataclass
class RateLimitRecord:
    """Counters for one identity within one namespace."""

    hour_count: int
    hour_reset_at: float
    day_count: int
    day_reset_at: float

    @classmethod
    def fresh(cls, now: float) -> RateLimitRecord:
        return cls(
            hour_count=0,
            hour_reset_at=now + HOUR_SECONDS,
            day_count=0,
            day_reset_at=now + DAY_SECONDS,
        )

    def rolled(self, now: float) -> RateLimitRecord:
        """Return a copy with every expired window reset."""
        record = replace(self)
        if now >= record.hour_reset_at:
            record.hour_count = 0
            record.hour_reset_at = now + HOUR_SECONDS
        if now >= record.day_reset_at:
            record.day_count = 0
            record.day_reset_at = now + DAY_SECONDS
        return record


@dataclass(frozen=True)
class RateLimitResult:
    """Outcome of a quota check, including back-off hints for the client."""

    allowed: bool
    remaining_hour: int
    remaining_day: int
    reset_in_hour: int
    reset_in_day: int
    reason: str | None = None


class CounterStore(Protocol):
    """Storage for rate-limit records.

    ``update`` must run ``mutate`` and persist its record as one atomic step
    per key, so two concurrent callers never both see the last free slot.
    """

    def get(self, key: str) -> RateLimitRecord | None: ...

    def update(
        self,
        key: str,
        mutate: Callable[[RateLimitRecord | None], tuple[RateLimitRecord, T]],
    ) -> T: ...

    def delete(self, key: str) -> None: ...


class InMemoryCounterStore:
    """Process-local store guarded by a single lock.

    Records whose daily window has passed are swept at most once per
    `sweep_interval` seconds, so idle identities do not accumulate.
    """

    def __init__(
        self,
        *,
        clock: Callable[[], float] = time.time,
        sweep_interval: float = HOUR_SECONDS,
    ) -> None:
        self._records: dict[str, RateLimitRecord] = {}
        self._lock = Lock()
        self._clock = clock
        self._sweep_interval = sweep_interval
        self._next_sweep = 0.0

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def _sweep(self) -> None:
        now = self._clock()
        if now < self._next_sweep:
            return
        self._records = {
            key: record for key, record in self._records.items() if record.day_reset_at > now
        }
        self._next_sweep = now + self._sweep_interval

    def get(self, key: str) -> RateLimitRecord | None:
        with self._lock:
            record = self._records.get(key)
            return replace(record) if record is not None else None

    def update(
        self,
        key: str,
        mutate: Callable[[RateLimitRecord | None], tuple[RateLimitRecord, T]],
    ) -> T:
        with self._lock:
            self._sweep()
            current = self._records.get(key)
            record, outcome = mutate(replace(current) if current is not None else None)
            self._records[key] = record
            return outcome

    def delete(self, key: str) -> None:
        with self._lock:
            self._records.pop(key, None)


class RedisCounterStore:
    """Shared store for multi-worker deployments.

    Records are Redis hashes; updates are serialized with a per-key Redis lock.
    """

    _FIELDS: Final[tuple[str, ...]] = ("hour_count", "hour_reset_at", "day_count", "day_reset_at")

    def __init__(
        self,
        client: Any,
        *,
        prefix: str = "ratelimit:",
        lock_timeout: float = 5.0,
    ) -> None:
        self._redis = client
        self._prefix = prefix
        self._lock_timeout = lock_timeout

    @classmethod
    def from_url(cls, url: str) -> RedisCounterStore:
        return cls(redis.Redis.from_url(url, decode_responses=True))

    def _decode(self, raw: Mapping[str, Any]) -> RateLimitRecord | None:
        if not raw or any(name not in raw for name in self._FIELDS):
            return None
        return RateLimitRecord(
            hour_count=int(raw["hour_count"]),
            hour_reset_at=float(raw["hour_reset_at"]),
            day_count=int(raw["day_count"]),
            day_reset_at=float(raw["day_reset_at"]),
        )

    def get(self, key: str) -> RateLimitRecord | None:
        return self._decode(self._redis.hgetall(self._prefix + key))

    def update(
        self,
        key: str,
        mutate: Callable[[RateLimitRecord | None], tuple[RateLimitRecord, T]],
    ) -> T:
        redis_key = self._prefix + key
        try:
            with self._redis.lock(
                f"{self._prefix}lock:{key}",
                timeout=self._lock_timeout,
                blocking_timeout=self._lock_timeout,
            ):
                record, outcome = mutate(self._decode(self._redis.hgetall(redis_key)))
                pipe = self._redis.pipeline()
                pipe.hset(
                    redis_key,
                    mapping={
                        "hour_count": record.hour_count,
                        "hour_reset_at": record.hour_reset_at,
                        "day_count": record.day_count,
                        "day_reset_at": record.day_reset_at,
                    },
                )
                pipe.expire(redis_key, DAY_SECONDS)
                pipe.execute()
                return outcome
        except LockError as exc:
            logger.warning("Rate-limit lock for %s not acquired: %s", key, exc)
            raise RateLimitUnavailable("Rate limiting is temporarily unavailable") from exc

    def delete(self, key: str) -> None:
        self._redis.delete(self._prefix + key)


class RateLimiter:
    """Check-and-increment quota gate keyed by caller identity and namespace."""

    def __init__(
        self,
        store: CounterStore | None = None,
        *,
        policies: Mapping[str, RateLimitPolicy] | None = None,
        default_policy: RateLimitPolicy = RateLimitPolicy(hourly_limit=3, daily_limit=10),
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._store: CounterStore = store or InMemoryCounterStore(clock=clock)
        self._policies = dict(policies or {})
        self._default_policy = default_policy
        self._clock = clock

    def policy_for(self, namespace: str) -> RateLimitPolicy:
        """Return the ceilings that apply to `namespace`."""
        return self._policies.get(namespace, self._default_policy)

    @staticmethod
    def _key(identity: str, namespace: str) -> str:
        return f"{namespace}:{identity}"

    def check(self, identity: str, namespace: str = DEFAULT_NAMESPACE) -> RateLimitResult:
        """Decide whether `identity` may act now and consume one slot if so.

        When both ceilings are exhausted the hourly violation is reported.
        """
        policy = self.policy_for(namespace)
        now = self._clock()

        def decide(current: RateLimitRecord | None) -> tuple[RateLimitRecord, RateLimitResult]:
            record = RateLimitRecord.fresh(now) if current is None else current.rolled(now)
            reset_in_hour = math.ceil(record.hour_reset_at - now)
            reset_in_day = math.ceil(record.day_reset_at - now)
            remaining_day = max(0, policy.daily_limit - record.day_count)
            remaining_hour = max(0, policy.hourly_limit - record.hour_count)

            if record.hour_count >= policy.hourly_limit:
                return record, RateLimitResult(
                    allowed=False,
                    remaining_hour=0,
                    remaining_day=remaining_day,
                    reset_in_hour=reset_in_hour,
                    reset_in_day=reset_in_day,
                    reason=(
                        f"Hourly limit of {policy.hourly_limit} {namespace} requests reached. "
                        "Please try again later."
                    ),
                )
            if record.day_count >= policy.daily_limit:
                return record, RateLimitResult(
                    allowed=False,
                    remaining_hour=remaining_hour,
                    remaining_day=0,
                    reset_in_hour=reset_in_hour,
                    reset_in_day=reset_in_day,
                    reason=(
                        f"Daily limit of {policy.daily_limit} {namespace} requests reached. "
                        "Please try again tomorrow."
                    ),
                )

            record.hour_count += 1
            record.day_count += 1
            return record, RateLimitResult(
                allowed=True,
                remaining_hour=max(0, policy.hourly_limit - record.hour_count),
                remaining_day=max(0, policy.daily_limit - record.day_count),
                reset_in_hour=reset_in_hour,
                reset_in_day=reset_in_day,
            )

        return self._store.update(self._key(identity, namespace), decide)

    def status(self, identity: str, namespace: str = DEFAULT_NAMESPACE) -> RateLimitResult:
        """Report the quota without consuming it."""
        policy = self.policy_for(namespace)
        now = self._clock()
        record = self._store.get(self._key(identity, namespace))
        if record is None:
            return RateLimitResult(
                allowed=True,
                remaining_hour=policy.hourly_limit,
                remaining_day=policy.daily_limit,
                reset_in_hour=HOUR_SECONDS,
                reset_in_day=DAY_SECONDS,
            )

        # Evaluated on a copy; the stored record is only rolled by `check`.
        record = record.rolled(now)
        return RateLimitResult(
            allowed=(
                record.hour_count < policy.hourly_limit
                and record.day_count < policy.daily_limit
            ),
            remaining_hour=max(0, policy.hourly_limit - record.hour_count),
            remaining_day=max(0, policy.daily_limit - record.day_count),
            reset_in_hour=math.ceil(record.hour_reset_at - now),
            reset_in_day=math.ceil(record.day_reset_at - now),
        )

    def clear(self, identity: str, namespace: str = DEFAULT_NAMESPACE) -> None:
        """Forget all history for `identity` in `namespace`."""
        self._store.delete(self._key(identity, namespace))


def build_rate_limiter(config: Settings) -> RateLimiter:
    """Construct a limiter from application settings."""
    store: CounterStore
    if config.rate_limit_backend == "redis":
        store = RedisCounterStore.from_url(config.redis_url)
    else:
        store = InMemoryCounterStore()
    policies = {
        namespace: RateLimitPolicy(hourly_limit=hourly, daily_limit=daily)
        for namespace, (hourly, daily) in config.rate_limit_policies.items()
    }
    return RateLimiter(
        store,
        policies=policies,
        default_policy=RateLimitPolicy(
            hourly_limit=config.rate_limit_hourly_default,
            daily_limit=config.rate_limit_daily_default,
        ),
    )


@lru_cache(maxsize=1)
def get_rate_limiter() -> RateLimiter:
    """Return the process-wide rate limiter."""
    return build_rate_limiter(settings)
