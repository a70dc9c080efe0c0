# domain_exceptions.py
from typing import Optional


class UserNotFound(Exception):
    """
    在需要用户存在的场景下未找到对应用户时抛出：
    - 例如创建帖子时作者 uid 不存在
    """

    def __init__(self, user_id: Optional[str] = None, message: Optional[str] = None):
        if message:
            self.message = message
        elif user_id is not None:
            self.message = f"User with id '{user_id}' not found."
        else:
            self.message = "User not found."

        super().__init__(self.message)


class PostNotFound(Exception):
    """找不到帖子"""
    def __init__(self, pid: str | None = None, message: str | None = None):
        if message:
            super().__init__(message)
        else:
            super().__init__(f"post {pid} not found")


class ForbiddenAction(Exception):
    """
    当前调用者不是帖子作者，却尝试修改 / 删除帖子时抛出
    """
    def __init__(self, user_id: str | None = None, pid: str | None = None, message: str | None = None):
        self.user_id = user_id
        self.pid = pid
        if message is None:
            if user_id is not None and pid is not None:
                message = f"user {user_id} is not the author of post {pid}"
            else:
                message = "Only the author can modify this post."
        super().__init__(message)


class InvalidCategory(Exception):
    """帖子分类不在固定枚举内"""
    def __init__(self, category: str | None = None, message: str | None = None):
        self.category = category
        super().__init__(message or f"invalid post category: {category!r}")


class Unauthenticated(Exception):
    """需要调用者身份的操作，却拿不到可信的调用者"""
    def __init__(self, message: str = "authentication required"):
        super().__init__(message)


class CacheError(Exception):
    """
    缓存层故障（连接失败 / 计数值不是整数 / 序列化异常）：
    - 只在缓存层和业务层之间流转，不应该抛给调用方
    """
    def __init__(self, key: str | None = None, message: str | None = None):
        self.key = key
        if message is None:
            message = f"cache operation failed for key {key}" if key else "cache operation failed"
        super().__init__(message)
