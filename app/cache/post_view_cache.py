from typing import Optional

from pydantic import ValidationError

from app.cache.keys import POST_VIEW_TTL, post_view_key
from app.core.exceptions import CacheError
from app.schemas.post import PostOut
from app.storage.kv.kv_interface import IKeyValueStore


class PostViewCache:
    """
    帖子详情快照缓存（post-view:{pid}，10 分钟过期）：
    - 存的是写入那一刻的完整 PostOut，不是实时视图
    - 自己从不访问数据库：未命中时由业务层查库后调用 put 回填
    """

    def __init__(self, kv: IKeyValueStore):
        self.kv = kv

    def get(self, pid: str) -> Optional[PostOut]:
        key = post_view_key(pid)
        raw = self.kv.get(key)
        if raw is None:
            return None
        try:
            return PostOut.model_validate_json(raw)
        except ValidationError as e:
            raise CacheError(key, f"cached post view {key} is unreadable") from e

    def put(self, post: PostOut) -> None:
        self.kv.set(post_view_key(post.pid), post.model_dump_json(), ttl=POST_VIEW_TTL)

    def evict(self, pid: str) -> None:
        self.kv.delete(post_view_key(pid))
