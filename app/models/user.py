from sqlalchemy import Column, Integer, String, TIMESTAMP
from sqlalchemy.orm import relationship
import uuid
from app.models.base import Base
from app.core.time import now_utc8


class User(Base):
    """ 用户模型，对应数据库中的 users 表（只保留帖子业务需要的字段）。

        CREATE TABLE IF NOT EXISTS users (
            _id INT AUTO_INCREMENT PRIMARY KEY,        -- 系统主键 ID
            uid VARCHAR(36) UNIQUE,                    -- 用户的业务主键（UUID）
            nickname VARCHAR(100) NOT NULL,            -- 用户昵称（帖子详情里展示）
            email VARCHAR(100) UNIQUE,                 -- 邮箱（可为空）
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            deleted_at TIMESTAMP NULL                  -- 软删除时间戳
        );
    """

    __tablename__ = "users"
    # 系统主键：自增
    _id = Column(Integer, primary_key=True, autoincrement=True)
    # 业务主键：UUID，唯一且不自增
    uid = Column(String(36), unique=True, nullable=False, default=lambda: str(uuid.uuid4()))
    nickname = Column(String(100), nullable=False)
    email = Column(String(100), unique=True, nullable=True)
    created_at = Column(TIMESTAMP(timezone=True), default=now_utc8)
    deleted_at = Column(TIMESTAMP(timezone=True), nullable=True)

    # 反向引用：该用户的所有帖子
    posts = relationship("Post", back_populates="author")
    # 反向引用：该用户的所有评论
    comments = relationship("Comment", back_populates="author")
