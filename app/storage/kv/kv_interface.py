# app/storage/kv/kv_interface.py

from typing import Optional, Protocol


class IKeyValueStore(Protocol):
    """
    键值存储的最小能力接口（对象缓存和计数缓存共用）：
    - 值一律是字符串，序列化由上层缓存负责
    - incr / decr 必须是原子操作，并发调用不丢更新
    - 任何后端故障统一抛 CacheError
    """

    def get(self, key: str) -> Optional[str]:
        """取值，不存在或已过期返回 None"""
        ...

    def set(self, key: str, value: str, ttl: Optional[int] = None) -> None:
        """
        写值：
        - ttl 为秒数；None 表示永不过期
        - 覆盖旧值时旧的过期时间一并作废
        """
        ...

    def delete(self, key: str) -> None:
        """删除 key，不存在时什么也不做"""
        ...

    def incr(self, key: str, amount: int = 1) -> int:
        """
        原子自增，返回新值：
        - key 不存在时按 0 起算
        - 不改变 key 已有的过期时间
        - 旧值不是整数时抛 CacheError
        """
        ...

    def decr(self, key: str, amount: int = 1) -> int:
        """原子自减，规则同 incr"""
        ...
