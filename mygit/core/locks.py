"""按仓库路径的并发保护

同一工作区的写操作互斥，读操作之间可并发但需排在进行中/等待中的写操作之后；
不同路径完全独立。锁在首次使用时创建，映射表本身只在取锁瞬间加短锁。
"""

from __future__ import annotations

import logging
import os
import threading
from collections.abc import Iterator
from contextlib import contextmanager

logger = logging.getLogger(__name__)


def normalize_path(path: str) -> str:
    """锁/查重使用的路径键"""
    return os.path.normcase(os.path.realpath(os.path.expanduser(path)))


class ReadWriteLock:
    """写优先的读写锁

    有写者持有或等待时，新读者阻塞，避免写操作被连续的读请求饿死。
    """

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    def acquire_read(self) -> None:
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1

    def release_read(self) -> None:
        with self._cond:
            self._readers -= 1
            if self._readers == 0:
                self._cond.notify_all()

    def acquire_write(self) -> None:
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writer = True

    def release_write(self) -> None:
        with self._cond:
            self._writer = False
            self._cond.notify_all()


class PathLockManager:
    """路径 → 读写锁 映射"""

    def __init__(self) -> None:
        self._locks: dict[str, ReadWriteLock] = {}
        self._mutex = threading.Lock()

    def lock_for(self, path: str) -> ReadWriteLock:
        """获取（必要时创建）路径对应的锁；并发首次请求拿到同一把锁"""
        key = normalize_path(path)
        with self._mutex:
            lock = self._locks.get(key)
            if lock is None:
                lock = ReadWriteLock()
                self._locks[key] = lock
            return lock

    @contextmanager
    def read(self, path: str) -> Iterator[None]:
        lock = self.lock_for(path)
        lock.acquire_read()
        try:
            yield
        finally:
            lock.release_read()

    @contextmanager
    def write(self, path: str) -> Iterator[None]:
        lock = self.lock_for(path)
        lock.acquire_write()
        try:
            yield
        finally:
            lock.release_write()

    def __len__(self) -> int:
        with self._mutex:
            return len(self._locks)
