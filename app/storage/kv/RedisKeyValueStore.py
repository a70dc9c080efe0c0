from typing import Optional

import redis

from app.core.exceptions import CacheError
from app.storage.kv.kv_interface import IKeyValueStore
from app.core.logx import logger


def describe_client(client: redis.Redis) -> str:
    """日志用的连接描述，只带 host / port / db，不带密码"""
    kwargs = client.connection_pool.connection_kwargs
    if "path" in kwargs:
        return f"path={kwargs['path']} db={kwargs.get('db', 0)}"
    return f"host={kwargs.get('host')} port={kwargs.get('port')} db={kwargs.get('db', 0)}"


class RedisKeyValueStore(IKeyValueStore):
    """
    使用 redis-py 实现的键值存储
    - decode_responses=True，读出来直接是 str
    - INCRBY / DECRBY 由 Redis 单线程保证原子性，且不影响 key 的 TTL
    """

    def __init__(self, client: redis.Redis):
        self.client = client

    @classmethod
    def from_url(cls, url: str) -> "RedisKeyValueStore":
        client = redis.Redis.from_url(
            url,
            encoding="utf-8",
            decode_responses=True,
            socket_connect_timeout=5,
            socket_timeout=5,
            health_check_interval=30,
        )
        logger.info(f"Redis key-value store initialized {describe_client(client)}")
        return cls(client)

    def get(self, key: str) -> Optional[str]:
        try:
            return self.client.get(key)
        except redis.RedisError as e:
            raise CacheError(key, f"redis GET {key} failed: {e}") from e

    def set(self, key: str, value: str, ttl: Optional[int] = None) -> None:
        try:
            self.client.set(key, value, ex=ttl)
        except redis.RedisError as e:
            raise CacheError(key, f"redis SET {key} failed: {e}") from e

    def delete(self, key: str) -> None:
        try:
            self.client.delete(key)
        except redis.RedisError as e:
            raise CacheError(key, f"redis DEL {key} failed: {e}") from e

    def incr(self, key: str, amount: int = 1) -> int:
        try:
            return int(self.client.incrby(key, amount))
        except redis.RedisError as e:
            raise CacheError(key, f"redis INCRBY {key} failed: {e}") from e

    def decr(self, key: str, amount: int = 1) -> int:
        try:
            return int(self.client.decrby(key, amount))
        except redis.RedisError as e:
            raise CacheError(key, f"redis DECRBY {key} failed: {e}") from e
