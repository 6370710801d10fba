"""
读写锁

允许多个读者并发或一个写者独占，写者优先，不支持递归获取。
"""

import threading
from contextlib import contextmanager
from typing import Iterator, Optional


class LockRecursionError(RuntimeError):
    """当前线程已持有锁时再次获取"""


class SynchronizationLockError(RuntimeError):
    """释放当前线程未持有的锁"""


class LockDisposedError(RuntimeError):
    """锁已释放（dispose）后仍被使用"""


_READ = "read"
_WRITE = "write"


class ReaderWriterLock:
    """读写锁类"""

    def __init__(self):
        self._condition = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer: Optional[int] = None
        self._waiting_writers = 0
        self._held = threading.local()
        self._disposed = False

    @property
    def disposed(self) -> bool:
        return self._disposed

    @property
    def reader_count(self) -> int:
        """当前持有读锁的线程数"""
        with self._condition:
            return self._readers

    @property
    def is_write_locked(self) -> bool:
        with self._condition:
            return self._writer is not None

    def _held_mode(self) -> Optional[str]:
        return getattr(self._held, "mode", None)

    def _check_acquire(self) -> None:
        if self._disposed:
            raise LockDisposedError("The lock has been disposed")
        mode = self._held_mode()
        if mode is not None:
            raise LockRecursionError(f"Recursive lock acquisition is not allowed (thread holds {mode} lock)")

    def acquire_read(self) -> None:
        """获取读锁（有写者持有或等待时阻塞）"""
        self._check_acquire()
        with self._condition:
            while self._writer is not None or self._waiting_writers:
                self._condition.wait()
            self._readers += 1
        self._held.mode = _READ

    def release_read(self) -> None:
        """释放读锁"""
        if self._held_mode() != _READ:
            raise SynchronizationLockError("The current thread has not entered the lock in read mode")
        with self._condition:
            self._readers -= 1
            if self._readers == 0:
                self._condition.notify_all()
        self._held.mode = None

    def acquire_write(self) -> None:
        """获取写锁（独占）"""
        self._check_acquire()
        with self._condition:
            self._waiting_writers += 1
            try:
                while self._writer is not None or self._readers:
                    self._condition.wait()
            finally:
                self._waiting_writers -= 1
            self._writer = threading.get_ident()
        self._held.mode = _WRITE

    def release_write(self) -> None:
        """释放写锁"""
        if self._held_mode() != _WRITE:
            raise SynchronizationLockError("The current thread has not entered the lock in write mode")
        with self._condition:
            self._writer = None
            self._condition.notify_all()
        self._held.mode = None

    @contextmanager
    def read_locked(self) -> Iterator[None]:
        """读锁上下文"""
        self.acquire_read()
        try:
            yield
        finally:
            self.release_read()

    @contextmanager
    def write_locked(self) -> Iterator[None]:
        """写锁上下文"""
        self.acquire_write()
        try:
            yield
        finally:
            self.release_write()

    def dispose(self) -> None:
        """释放锁资源，重复调用不产生效果"""
        if self._disposed:
            return
        with self._condition:
            self._disposed = True
            self._condition.notify_all()
