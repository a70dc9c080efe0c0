from typing import Optional

from app.cache.keys import (
    COMMENT_COUNT_TTL,
    TOTAL_POST_COUNT_KEY,
    category_count_key,
    comment_count_key,
)
from app.core.exceptions import CacheError
from app.models.post import PostCategory
from app.storage.kv.kv_interface import IKeyValueStore


class PostCounterCache:
    """
    帖子相关的整数计数缓存：
    - post-count:total / post-count:category:{分类}：永不过期，只做原子增减
    - comment-count:{pid}：5 分钟过期，过期后由业务层重新从库里统计

    这里不吞异常：读写失败统一以 CacheError 抛给业务层，由业务层决定回源还是忽略。
    """

    def __init__(self, kv: IKeyValueStore):
        self.kv = kv

    def _read_int(self, key: str) -> Optional[int]:
        raw = self.kv.get(key)
        if raw is None:
            return None
        try:
            return int(raw)
        except (TypeError, ValueError) as e:
            raise CacheError(key, f"counter {key} holds non-integer value {raw!r}") from e

    # ---------- 帖子总数 / 分类数 ----------

    def get_total(self) -> Optional[int]:
        return self._read_int(TOTAL_POST_COUNT_KEY)

    def get_by_category(self, category: PostCategory) -> Optional[int]:
        return self._read_int(category_count_key(category))

    def reset_total(self, count: int) -> None:
        self.kv.set(TOTAL_POST_COUNT_KEY, str(count))

    def reset_category(self, category: PostCategory, count: int) -> None:
        self.kv.set(category_count_key(category), str(count))

    def post_created(self, category: PostCategory) -> None:
        """新帖：总数和分类数各 +1"""
        self.kv.incr(TOTAL_POST_COUNT_KEY, 1)
        self.kv.incr(category_count_key(category), 1)

    def post_deleted(self, category: PostCategory) -> None:
        """删帖：总数和分类数各 -1"""
        self.kv.decr(TOTAL_POST_COUNT_KEY, 1)
        self.kv.decr(category_count_key(category), 1)

    # ---------- 评论数 ----------

    def get_comment_count(self, pid: str) -> Optional[int]:
        return self._read_int(comment_count_key(pid))

    def set_comment_count(self, pid: str, count: int) -> None:
        self.kv.set(comment_count_key(pid), str(count), ttl=COMMENT_COUNT_TTL)

    def evict_comment_count(self, pid: str) -> None:
        self.kv.delete(comment_count_key(pid))
