from sqlalchemy import Column, Integer, String, Text, TIMESTAMP, ForeignKey, UniqueConstraint, Index
from sqlalchemy.orm import relationship
import uuid
from app.models.base import Base
from app.core.time import now_utc8


class Comment(Base):
    """ 评论表。帖子业务只用它来统计某个帖子的评论数。

        CREATE TABLE IF NOT EXISTS comments (
            _id INT AUTO_INCREMENT PRIMARY KEY,               -- 系统主键（自增）
            cid VARCHAR(36) NOT NULL UNIQUE,                  -- 业务主键（UUID，对外使用）
            post_id VARCHAR(36) NOT NULL,                     -- 所属帖子（FK -> posts.pid）
            author_id VARCHAR(36) NOT NULL,                   -- 评论作者（FK -> users.uid）
            content TEXT NOT NULL,                            -- 评论正文
            created_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP,

            FOREIGN KEY (post_id) REFERENCES posts(pid),
            FOREIGN KEY (author_id) REFERENCES users(uid)
        );
    """

    __tablename__ = "comments"

    _id = Column(Integer, primary_key=True, autoincrement=True)
    cid = Column(String(36), unique=True, nullable=False, default=lambda: str(uuid.uuid4()))
    post_id = Column(String(36), ForeignKey("posts.pid"), nullable=False)
    author_id = Column(String(36), ForeignKey("users.uid"), nullable=False)
    content = Column(Text, nullable=False)
    created_at = Column(TIMESTAMP(timezone=True), default=now_utc8)

    author = relationship("User", back_populates="comments")
    post = relationship("Post", back_populates="comments")

    __table_args__ = (
        UniqueConstraint('cid', name='unique_cid'),
        Index("idx_comments_post", "post_id"),
    )
