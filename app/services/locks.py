# app/services/locks.py
import threading
from contextlib import contextmanager
from typing import Dict, List, Tuple

Scope = Tuple[str, str]


def entry_scopes(class_id: str, room: str) -> Tuple[Scope, Scope]:
    return ("class", class_id), ("room", room)


class ScopeLocks:
    """
    One writer at a time per class and per room.

    Locks are always taken in sorted key order, so two writers that share
    both a class and a room cannot deadlock. A scope's lock only lives while
    someone holds or waits for it.
    """

    def __init__(self):
        self._guard = threading.Lock()
        # scope -> [lock, holders + waiters]
        self._locks: Dict[Scope, List] = {}

    def __len__(self):
        with self._guard:
            return len(self._locks)

    def _checkout(self, scope: Scope) -> threading.Lock:
        with self._guard:
            slot = self._locks.setdefault(scope, [threading.Lock(), 0])
            slot[1] += 1
            return slot[0]

    def _checkin(self, scope: Scope) -> None:
        with self._guard:
            slot = self._locks[scope]
            slot[1] -= 1
            if slot[1] == 0:
                del self._locks[scope]

    @contextmanager
    def hold(self, *scopes: Scope):
        taken = []
        try:
            for scope in sorted(set(scopes)):
                lock = self._checkout(scope)
                try:
                    lock.acquire()
                except BaseException:
                    self._checkin(scope)
                    raise
                taken.append((scope, lock))
            yield
        finally:
            for scope, lock in reversed(taken):
                lock.release()
                self._checkin(scope)


# process wide registry shared by every ScheduleService
scope_locks = ScopeLocks()
