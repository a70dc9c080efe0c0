from app.cache.keys import view_count_key
from app.core.exceptions import CacheError
from app.storage.kv.kv_interface import IKeyValueStore
from app.storage.view_count.view_count_interface import IViewCountSource
from app.core.logx import logger


class KVViewCountSource(IViewCountSource):
    """
    从键值存储读 view-count:{pid}
    - 浏览数只是展示用，读失败 / 值损坏都按 0 处理，不影响帖子本身的读取
    """

    def __init__(self, kv: IKeyValueStore):
        self.kv = kv

    def get_view_count(self, pid: str) -> int:
        try:
            raw = self.kv.get(view_count_key(pid))
        except CacheError as e:
            logger.warning(f"Read view count failed pid={pid}: {e}")
            return 0
        if raw is None:
            return 0
        try:
            return int(raw)
        except ValueError:
            logger.warning(f"Malformed view count pid={pid} value={raw!r}")
            return 0
