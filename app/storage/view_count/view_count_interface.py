# app/storage/view_count/view_count_interface.py

from typing import Protocol


class IViewCountSource(Protocol):
    """
    外部浏览数来源（只读）：
    - 浏览数由别的服务累加，这里只负责读
    """

    def get_view_count(self, pid: str) -> int:
        """读不到时返回 0"""
        ...
