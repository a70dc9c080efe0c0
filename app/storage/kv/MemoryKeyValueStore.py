import threading
import time
from typing import Callable, Dict, Optional, Tuple

from cachetools import TLRUCache

from app.core.exceptions import CacheError
from app.storage.kv.kv_interface import IKeyValueStore

# 带过期时间的缓存项：(字符串值, 绝对过期时间)
_Entry = Tuple[str, float]


def _entry_expires_at(_key: str, entry: _Entry, _now: float) -> float:
    return entry[1]


class MemoryKeyValueStore(IKeyValueStore):
    """
    进程内键值存储（单进程部署 / 测试用）：
    - 带 TTL 的 key 放在 cachetools.TLRUCache 里，每个 key 独立过期时间，超过 maxsize 按 LRU 淘汰
    - 不带 TTL 的 key（帖子计数）单独放在普通 dict 里，不受容量淘汰影响
    - 一把锁保护两边所有读改写，incr / decr 因此是原子的
    - timer 可注入，测试里用假时钟推进时间
    """

    def __init__(self, maxsize: int = 10000, timer: Callable[[], float] = time.monotonic):
        self._timer = timer
        self._expiring: TLRUCache = TLRUCache(maxsize=maxsize, ttu=_entry_expires_at, timer=timer)
        self._persistent: Dict[str, str] = {}
        self._lock = threading.RLock()

    def _expires_at(self, ttl: int) -> float:
        if ttl <= 0:
            raise CacheError(message=f"ttl must be positive, got {ttl}")
        return self._timer() + ttl

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            if key in self._persistent:
                return self._persistent[key]
            entry = self._expiring.get(key)
        return entry[0] if entry is not None else None

    def set(self, key: str, value: str, ttl: Optional[int] = None) -> None:
        with self._lock:
            if ttl is None:
                self._expiring.pop(key, None)
                self._persistent[key] = str(value)
            else:
                entry = (str(value), self._expires_at(ttl))
                self._persistent.pop(key, None)
                self._expiring[key] = entry

    def delete(self, key: str) -> None:
        with self._lock:
            self._persistent.pop(key, None)
            self._expiring.pop(key, None)

    @staticmethod
    def _parse_int(key: str, raw: str) -> int:
        try:
            return int(raw)
        except ValueError as e:
            raise CacheError(key, f"value of {key} is not an integer") from e

    def incr(self, key: str, amount: int = 1) -> int:
        with self._lock:
            entry = self._expiring.get(key)
            if entry is not None:
                # 已有 TTL 的 key 自增后保留原过期时间
                new_value = self._parse_int(key, entry[0]) + amount
                self._expiring[key] = (str(new_value), entry[1])
                return new_value

            new_value = self._parse_int(key, self._persistent.get(key, "0")) + amount
            self._persistent[key] = str(new_value)
            return new_value

    def decr(self, key: str, amount: int = 1) -> int:
        return self.incr(key, -amount)
