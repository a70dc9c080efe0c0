from sqlalchemy import Column, Integer, String, Text, TIMESTAMP, ForeignKey, UniqueConstraint, Index
from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import relationship
import uuid
from enum import Enum
from app.models.base import Base
from app.core.time import now_utc8


# 帖子分类（固定枚举，值同时用作计数器缓存 key 的一部分）
class PostCategory(str, Enum):
    FREE = "자유"       # 自由讨论
    QUESTION = "질문"   # 提问

    @classmethod
    def parse(cls, value: "str | PostCategory") -> "PostCategory | None":
        """按值或成员名解析分类，不合法返回 None"""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return cls.__members__.get(value)


class Post(Base):
    """ 帖子表，帖子的持久化记录（唯一可信数据源）。

        CREATE TABLE IF NOT EXISTS posts (
            _id INT AUTO_INCREMENT PRIMARY KEY,           -- 系统主键ID（自增，也是全表扫描顺序）
            pid VARCHAR(36) UNIQUE,                       -- 业务主键PID（UUID）
            author_id VARCHAR(36) NOT NULL,               -- 作者 ID (Fk->users.uid)
            category VARCHAR(16) NOT NULL,                -- 分类（자유 / 질문）
            title VARCHAR(255) NOT NULL,                  -- 标题
            content TEXT NOT NULL,                        -- 正文
            created_at TIMESTAMP,                         -- 创建时间
            updated_at TIMESTAMP,                         -- 更新时间

            FOREIGN KEY (author_id) REFERENCES users(uid)
        );

        -- 分类计数在启动时按 category 全量统计
        CREATE INDEX idx_posts_category ON posts (category);
    """

    __tablename__ = "posts"

    _id = Column(Integer, primary_key=True, autoincrement=True)
    pid = Column(String(36), unique=True, nullable=False, default=lambda: str(uuid.uuid4()))

    author_id = Column(String(36), ForeignKey("users.uid"), nullable=False)
    category = Column(SAEnum(PostCategory, values_callable=lambda e: [m.value for m in e],
                             native_enum=False, length=16), nullable=False)
    title = Column(String(255), nullable=False)
    content = Column(Text, nullable=False)
    created_at = Column(TIMESTAMP(timezone=True), default=now_utc8)
    updated_at = Column(TIMESTAMP(timezone=True), default=now_utc8, onupdate=now_utc8)

    # 反向引用：该帖子的作者（详情里需要昵称）
    author = relationship("User", back_populates="posts")
    # 双向引用：该帖子的评论，删帖时一并删除
    comments = relationship("Comment", back_populates="post", cascade="all, delete-orphan")

    __table_args__ = (
        UniqueConstraint('pid', name='unique_pid'),
        Index("idx_posts_author_id", "author_id"),
        Index("idx_posts_category", "category"),
    )
