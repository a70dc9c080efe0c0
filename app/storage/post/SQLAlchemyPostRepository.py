from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from app.models.comment import Comment
from app.models.post import Post, PostCategory
from app.schemas.post import PostOnlyCreate, PostRecord, PostUpdate
from app.storage.post.post_interface import IPostRepository
from app.core.db import transaction


class SQLAlchemyPostRepository(IPostRepository):
    """
    使用 SQLAlchemy 实现的帖子仓库
    业务层依赖 IPostRepository 抽象接口
    """

    def __init__(self, db: Session):
        self.db = db

    # ---------- 内部基础查询 ----------

    def _base_query(self):
        """带上作者（要用昵称），避免逐条懒加载"""
        return self.db.query(Post).options(joinedload(Post.author))

    def _get_orm_by_pid(self, pid: str) -> Optional[Post]:
        return self._base_query().filter(Post.pid == pid).first()

    @staticmethod
    def _to_record(post: Post) -> PostRecord:
        return PostRecord(
            pid=post.pid,
            author_id=post.author_id,
            author_nickname=post.author.nickname if post.author else "",
            category=post.category,
            title=post.title,
            content=post.content,
            created_at=post.created_at,
            updated_at=post.updated_at,
        )

    # ---------- 增 ----------

    def create_post(self, data: PostOnlyCreate) -> PostRecord:
        post = Post(**data.model_dump())

        with transaction(self.db):
            self.db.add(post)

        # 刷新以获取 pid / 时间戳
        self.db.refresh(post)
        return self._to_record(post)

    # ---------- 查 ----------

    def get_post_by_pid(self, pid: str) -> Optional[PostRecord]:
        post = self._get_orm_by_pid(pid)
        return self._to_record(post) if post else None

    def list_all_posts(self) -> List[PostRecord]:
        posts: List[Post] = self._base_query().order_by(Post._id.asc()).all()
        return [self._to_record(p) for p in posts]

    def count_posts(self) -> int:
        return self.db.query(func.count(Post._id)).scalar() or 0

    def count_by_category(self, category: PostCategory) -> int:
        return (
            self.db.query(func.count(Post._id))
            .filter(Post.category == category)
            .scalar()
        ) or 0

    def count_comments_for(self, pid: str) -> int:
        return (
            self.db.query(func.count(Comment._id))
            .filter(Comment.post_id == pid)
            .scalar()
        ) or 0

    # ---------- 改 ----------

    def update_post(self, pid: str, data: PostUpdate) -> Optional[PostRecord]:
        post = self._get_orm_by_pid(pid)
        if post is None:
            return None

        update_data = data.model_dump(exclude_none=True)
        if not update_data:
            # 没有任何需要更新的字段
            return self._to_record(post)

        with transaction(self.db):
            for field, value in update_data.items():
                setattr(post, field, value)

        self.db.refresh(post)
        return self._to_record(post)

    # ---------- 删 ----------

    def delete_post(self, pid: str) -> bool:
        post = self._get_orm_by_pid(pid)
        if post is None:
            return False

        with transaction(self.db):
            self.db.delete(post)

        return True
