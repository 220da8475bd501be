"""
Single-flight cache for expensive aggregate reads.

Concurrent requests for the same key wait on one computation instead of all
hitting the database. Values live in the configured Django cache for a
bounded TTL; ``clear()`` bumps a generation counter so every key of this
cache goes stale at once (writes that change the underlying rows call it).
"""

import logging
import threading

from django.core.cache import caches

logger = logging.getLogger(__name__)

_MISSING = object()


class SingleFlightCache:
    def __init__(self, ttl, key_prefix='single-flight', alias='default'):
        self.ttl = ttl
        self.key_prefix = key_prefix
        self.alias = alias
        self._locks = {}
        self._locks_guard = threading.Lock()

    @property
    def backend(self):
        return caches[self.alias]

    def _generation(self):
        return self.backend.get(f'{self.key_prefix}:generation', 0)

    def _full_key(self, key):
        return f'{self.key_prefix}:{self._generation()}:{key}'

    def _lock_for(self, full_key):
        with self._locks_guard:
            lock = self._locks.get(full_key)
            if lock is None:
                lock = self._locks[full_key] = threading.Lock()
            return lock

    def get_or_compute(self, key, compute):
        """Return the cached value for ``key``, computing it at most once per TTL."""
        full_key = self._full_key(key)
        value = self.backend.get(full_key, _MISSING)
        if value is not _MISSING:
            return value

        with self._lock_for(full_key):
            # Another caller may have filled it while we waited on the lock
            value = self.backend.get(full_key, _MISSING)
            if value is not _MISSING:
                return value

            value = compute()
            self.backend.set(full_key, value, self.ttl)
            logger.debug(f"Cached {full_key} for {self.ttl}s")

        with self._locks_guard:
            self._locks.pop(full_key, None)
        return value

    def clear(self):
        generation_key = f'{self.key_prefix}:generation'
        self.backend.set(generation_key, self._generation() + 1, None)
