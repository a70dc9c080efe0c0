from typing import Optional
from sqlalchemy.orm import Session
from app.models.user import User
from app.schemas.user import UserOut
from app.storage.user.user_interface import IUserRepository


class SQLAlchemyUserRepository(IUserRepository):
    """
    使用 SQLAlchemy 实现的用户仓库
    业务层依赖 IUserRepository 接口，而不是这个具体实现
    """

    def __init__(self, db: Session):
        self.db = db

    def _base_query(self):
        """内部封装一个基础查询（过滤软删除）"""
        return self.db.query(User).filter(User.deleted_at.is_(None))

    def get_user_by_uid(self, uid: str) -> Optional[UserOut]:
        user = self._base_query().filter(User.uid == uid).first()
        return UserOut.model_validate(user) if user else None
