# services/rate_budget.py
"""
Persistent two-tier (per-minute, per-day) request budget for the price provider.
"""

import json
import logging
import math
import threading
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from constants import (
    DEFAULT_DAILY_LIMIT, DEFAULT_MINUTE_LIMIT,
    MINUTE_WINDOW_SECONDS, DAILY_WINDOW_SECONDS, USAGE_STORAGE_KEY
)

logger = logging.getLogger(__name__)


class BudgetStore(ABC):
    """Durable string key-value store."""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        pass

    @abstractmethod
    def delete(self, key: str) -> None:
        pass


class InMemoryBudgetStore(BudgetStore):
    """Process-local store. Used by tests and single-process demos."""

    def __init__(self):
        self._data: Dict[str, str] = {}

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)


class DatabaseBudgetStore(BudgetStore):
    """
    Store backed by the app_settings table.
    Each operation runs in its own app context so it is safe to call from
    worker threads that were not started by Flask.
    """

    def __init__(self, app):
        self.app = app

    def get(self, key: str) -> Optional[str]:
        from models import AppSetting
        with self.app.app_context():
            return AppSetting.get_value(key)

    def set(self, key: str, value: str) -> None:
        from models import AppSetting
        with self.app.app_context():
            AppSetting.set_value(key, value)

    def delete(self, key: str) -> None:
        from models import AppSetting
        with self.app.app_context():
            AppSetting.delete_value(key)


@dataclass(frozen=True)
class BudgetDecision:
    allowed: bool
    reason: Optional[str] = None
    reset_in: Optional[int] = None
    charged_at: Optional[float] = None  # timestamp recorded by reserve()


class RateBudgetTracker:
    """
    Gates outbound provider calls against a daily and a sliding per-minute limit.

    State is one JSON blob in the store:
        daily_count        accepted billable requests in the current daily window
        daily_reset_time   epoch seconds when the daily window ends
        minute_requests    epoch seconds of requests in the trailing minute

    Every mutation is written back immediately. All state transitions happen
    under one lock so check-and-record cannot interleave between threads.
    """

    def __init__(self, store: BudgetStore, daily_limit: int = DEFAULT_DAILY_LIMIT,
                 minute_limit: int = DEFAULT_MINUTE_LIMIT,
                 clock: Callable[[], float] = time.time,
                 storage_key: str = USAGE_STORAGE_KEY):
        if daily_limit <= 0 or minute_limit <= 0:
            raise ValueError("daily_limit and minute_limit must be positive")
        self.store = store
        self.daily_limit = daily_limit
        self.minute_limit = minute_limit
        self.clock = clock
        self.storage_key = storage_key
        self._lock = threading.RLock()

    # ========================================
    # PERSISTENCE
    # ========================================

    def _fresh_usage(self, now: float) -> Dict:
        return {
            'daily_count': 0,
            'daily_reset_time': now + DAILY_WINDOW_SECONDS,
            'minute_requests': [],
        }

    def _save(self, usage: Dict) -> None:
        self.store.set(self.storage_key, json.dumps(usage))

    def _load(self, now: float) -> Dict:
        """Read usage, applying the daily rollover and lazy minute pruning."""
        raw = self.store.get(self.storage_key)
        usage = None
        if raw:
            try:
                usage = json.loads(raw)
                usage = {
                    'daily_count': int(usage['daily_count']),
                    'daily_reset_time': float(usage['daily_reset_time']),
                    'minute_requests': [float(t) for t in usage['minute_requests']],
                }
            except (ValueError, KeyError, TypeError) as e:
                logger.warning(f"Discarding unreadable usage state: {e}")
                usage = None

        if usage is None:
            usage = self._fresh_usage(now)
            self._save(usage)
            return usage

        if now > usage['daily_reset_time']:
            logger.info("Daily window expired, resetting API usage counters")
            usage = self._fresh_usage(now)
            self._save(usage)
            return usage

        pruned = self._prune(usage['minute_requests'], now)
        if len(pruned) != len(usage['minute_requests']):
            usage['minute_requests'] = pruned
            self._save(usage)

        return usage

    @staticmethod
    def _prune(timestamps, now: float):
        cutoff = now - MINUTE_WINDOW_SECONDS
        return [t for t in timestamps if t > cutoff]

    # ========================================
    # PUBLIC API
    # ========================================

    def _decide(self, usage: Dict, now: float) -> BudgetDecision:
        if usage['daily_count'] >= self.daily_limit:
            return BudgetDecision(
                allowed=False,
                reason=f"Daily limit of {self.daily_limit} requests reached",
                reset_in=max(0, math.ceil(usage['daily_reset_time'] - now)),
            )
        if len(usage['minute_requests']) >= self.minute_limit:
            return BudgetDecision(
                allowed=False,
                reason=f"Rate limit of {self.minute_limit} requests per minute reached",
                reset_in=MINUTE_WINDOW_SECONDS,
            )
        return BudgetDecision(allowed=True)

    def can_make_request(self) -> BudgetDecision:
        """Check (without recording) whether one more request fits the budget."""
        with self._lock:
            now = self.clock()
            return self._decide(self._load(now), now)

    def record_api_request(self) -> None:
        """Charge one billable request."""
        with self._lock:
            now = self.clock()
            usage = self._load(now)
            usage['daily_count'] += 1
            usage['minute_requests'].append(now)
            usage['minute_requests'] = self._prune(usage['minute_requests'], now)
            self._save(usage)

    def undo_api_request(self, charged_at: Optional[float] = None) -> None:
        """
        Refund a charge (request turned out not to be billable).

        With charged_at (from a reserve() decision) exactly that minute entry
        is removed; without it the most recent one is.
        """
        with self._lock:
            usage = self._load(self.clock())
            minute_requests = usage['minute_requests']
            if charged_at is None:
                in_window = True
                if minute_requests:
                    minute_requests.pop()
            else:
                in_window = charged_at >= usage['daily_reset_time'] - DAILY_WINDOW_SECONDS
                if charged_at in minute_requests:
                    minute_requests.remove(charged_at)
            if in_window and usage['daily_count'] > 0:
                usage['daily_count'] -= 1
            self._save(usage)

    def reserve(self) -> BudgetDecision:
        """
        Atomically check and, when allowed, charge one request.
        Callers must undo_api_request(decision.charged_at) if the call turns
        out not to be billable.
        """
        with self._lock:
            now = self.clock()
            usage = self._load(now)
            decision = self._decide(usage, now)
            if decision.allowed:
                usage['daily_count'] += 1
                usage['minute_requests'].append(now)
                self._save(usage)
                decision = BudgetDecision(allowed=True, charged_at=now)
            else:
                logger.warning(f"Request rejected by rate budget: {decision.reason} (reset in {decision.reset_in}s)")
            return decision

    def get_usage_stats(self) -> Dict:
        with self._lock:
            now = self.clock()
            usage = self._load(now)
            minute_used = len(usage['minute_requests'])
            return {
                'daily_used': usage['daily_count'],
                'daily_limit': self.daily_limit,
                'daily_remaining': max(0, self.daily_limit - usage['daily_count']),
                'minute_used': minute_used,
                'minute_limit': self.minute_limit,
                'minute_remaining': max(0, self.minute_limit - minute_used),
                'reset_in': max(0, math.ceil(usage['daily_reset_time'] - now)),
            }

    def reset_usage(self) -> None:
        with self._lock:
            self.store.delete(self.storage_key)
            logger.info("API usage counters cleared")
