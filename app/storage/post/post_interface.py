# app/storage/post/post_interface.py

from typing import List, Optional, Protocol

from app.models.post import PostCategory
from app.schemas.post import PostOnlyCreate, PostRecord, PostUpdate


class IPostRepository(Protocol):
    """
    帖子仓库接口协议（数据层抽象接口，帖子的唯一可信数据源）
    业务层依赖本接口，而不是具体实现，方便后续替换为不同数据源
    - 每个写操作都是一次原子持久化，失败直接抛出
    """

    def create_post(self, data: PostOnlyCreate) -> PostRecord:
        """
        创建帖子，返回落库后的快照（pid 由存储层分配）
        """
        ...

    def get_post_by_pid(self, pid: str) -> Optional[PostRecord]:
        """按 pid 查帖子，不存在返回 None"""
        ...

    def update_post(self, pid: str, data: PostUpdate) -> Optional[PostRecord]:
        """
        部分更新标题 / 正文：
        - 只写非 None 字段
        - 帖子不存在返回 None
        """
        ...

    def delete_post(self, pid: str) -> bool:
        """
        物理删除帖子（评论随之级联删除）
        - 返回是否删除成功
        """
        ...

    def list_all_posts(self) -> List[PostRecord]:
        """全表扫描，按系统主键升序返回"""
        ...

    def count_posts(self) -> int:
        """帖子总数"""
        ...

    def count_by_category(self, category: PostCategory) -> int:
        """某分类下的帖子数"""
        ...

    def count_comments_for(self, pid: str) -> int:
        """某帖子下的评论数"""
        ...
