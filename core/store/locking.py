"""
EastGate Store — Reader/Writer Lock
=====================================
Many concurrent readers, one writer.

- Writer-preferring: once a writer waits, new readers queue behind it.
- Write-reentrant: the thread holding the write lock may take the
  write lock or a read lock again (façade → store → audit nesting).
- Read-reentrant: a thread already reading may read again.
- Upgrading a held read lock to a write lock is refused.
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Iterator

_NESTED_IN_WRITE = "w"
_SHARED = "r"


class ReadWriteLock:
    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer: int | None = None
        self._write_depth = 0
        self._waiting_writers = 0
        self._local = threading.local()

    def _stack(self) -> list[str]:
        stack = getattr(self._local, "stack", None)
        if stack is None:
            stack = []
            self._local.stack = stack
        return stack

    # ── read side ────────────────────────────────────────────

    def acquire_read(self) -> None:
        me = threading.get_ident()
        stack = self._stack()
        with self._cond:
            if self._writer == me:
                self._write_depth += 1
                stack.append(_NESTED_IN_WRITE)
                return
            if _SHARED not in stack:
                while self._writer is not None or self._waiting_writers:
                    self._cond.wait()
            self._readers += 1
            stack.append(_SHARED)

    def release_read(self) -> None:
        stack = self._stack()
        with self._cond:
            if not stack:
                raise RuntimeError("release_read without acquire_read.")
            tag = stack.pop()
            if tag == _NESTED_IN_WRITE:
                self._write_depth -= 1
                return
            self._readers -= 1
            if self._readers == 0:
                self._cond.notify_all()

    # ── write side ───────────────────────────────────────────

    def acquire_write(self) -> None:
        me = threading.get_ident()
        with self._cond:
            if self._writer == me:
                self._write_depth += 1
                return
            if _SHARED in self._stack():
                raise RuntimeError("Cannot upgrade a read lock to a write lock.")
            self._waiting_writers += 1
            try:
                while self._writer is not None or self._readers:
                    self._cond.wait()
            finally:
                self._waiting_writers -= 1
            self._writer = me
            self._write_depth = 1

    def release_write(self) -> None:
        with self._cond:
            if self._writer != threading.get_ident():
                raise RuntimeError("release_write by a thread that does not hold it.")
            self._write_depth -= 1
            if self._write_depth == 0:
                self._writer = None
                self._cond.notify_all()

    # ── context managers ─────────────────────────────────────

    @contextmanager
    def read_locked(self) -> Iterator[None]:
        self.acquire_read()
        try:
            yield
        finally:
            self.release_read()

    @contextmanager
    def write_locked(self) -> Iterator[None]:
        self.acquire_write()
        try:
            yield
        finally:
            self.release_write()

    @property
    def write_held_by_current_thread(self) -> bool:
        return self._writer == threading.get_ident()
