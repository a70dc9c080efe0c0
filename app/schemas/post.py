from typing import Optional, List
from datetime import datetime

from pydantic import BaseModel, ConfigDict
from app.models.post import PostCategory


# 创建一篇帖子
class PostCreate(BaseModel):
    """
    创建帖子（作者身份由调用方单独传入，不放在请求体里）
    - category 先按字符串接收，业务层校验是否在固定枚举内
    """
    category: str         # 分类（자유 / 질문）
    title: str            # 标题
    content: str          # 正文内容

    model_config = ConfigDict(extra="forbid")


class PostOnlyCreate(BaseModel):
    """
    创建帖子（内部调用插入帖子表中）
    """
    author_id: str
    category: PostCategory
    title: str
    content: str


# 更新帖子
class PostUpdate(BaseModel):
    """
    作者更新帖子（部分更新）：
    - 字段为 None 表示“保持不变”，不是“清空”
    """
    title: Optional[str] = None
    content: Optional[str] = None

    model_config = ConfigDict(extra="forbid")


class PostRecord(BaseModel):
    """
    存储层返回的帖子快照（不含浏览数 / 评论数这类易变字段）
    """
    pid: str
    author_id: str
    author_nickname: str
    category: PostCategory
    title: str
    content: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


# 查看帖子
class PostOut(BaseModel):
    """
    对外返回的帖子详情（也是 post-view:{pid} 里缓存的对象）
    - view_count / comment_count 是易变字段，每次读取都要重新覆盖
    """
    pid: str                        # 帖子业务主键
    author_id: str                  # 作者 UID
    author_nickname: str            # 作者昵称
    category: PostCategory          # 分类
    title: str
    content: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    view_count: int = 0             # 浏览数（外部计数源）
    comment_count: int = 0          # 评论数（comment-count:{pid} 缓存）

    model_config = ConfigDict(from_attributes=True)


class BatchPostsOut(BaseModel):
    """
    列表返回
    - total: 帖子总数
    - count: 当前返回条数
    - items: 帖子列表
    """
    total: int
    count: int
    items: List[PostOut]

    model_config = ConfigDict(from_attributes=True)


class PostCountOut(BaseModel):
    """帖子计数（总数 / 某分类）"""
    category: Optional[str] = None
    count: int
