"""公平读写锁与按数据库文件共享的锁注册表。"""

import threading
from collections.abc import Generator
from contextlib import contextmanager
from pathlib import Path

_registry: dict[Path, "FairReadWriteLock"] = {}
_registry_lock = threading.Lock()


class FairReadWriteLock:
    """公平读写锁（写优先，避免写饥饿）。

    有写请求等待时新的读请求排队。同一数据库文件上的多个词表后端
    共享同一把锁，这样 DuckDB 的只读连接与读写连接不会同时存在。
    """

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writers_waiting = 0
        self._writing = False

    @contextmanager
    def read_lock(self) -> Generator[None, None, None]:
        """获取共享读锁。"""
        with self._cond:
            while self._writing or self._writers_waiting:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if not self._readers:
                    self._cond.notify_all()

    @contextmanager
    def write_lock(self) -> Generator[None, None, None]:
        """获取独占写锁，等待所有读者退出。"""
        with self._cond:
            self._writers_waiting += 1
            while self._readers or self._writing:
                self._cond.wait()
            self._writers_waiting -= 1
            self._writing = True
        try:
            yield
        finally:
            with self._cond:
                self._writing = False
                self._cond.notify_all()


def lock_for(db_path: Path) -> FairReadWriteLock:
    """获取某个数据库文件对应的共享锁。

    Args:
        db_path: 数据库文件路径。

    Returns:
        该文件在本进程内唯一的读写锁。
    """
    key = db_path.resolve()
    with _registry_lock:
        lock = _registry.get(key)
        if lock is None:
            lock = _registry[key] = FairReadWriteLock()
        return lock
