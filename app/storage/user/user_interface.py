# app/storage/user/user_interface.py

from typing import Optional, Protocol

from app.schemas.user import UserOut


class IUserRepository(Protocol):
    """
    用户仓库接口协议（数据层抽象接口）
    帖子业务只需要按 uid 查用户是否存在
    """

    def get_user_by_uid(self, uid: str) -> Optional[UserOut]:
        """按业务主键查用户（过滤软删除），不存在返回 None"""
        ...
