from typing import Optional
from pydantic import BaseModel, ConfigDict


class UserOut(BaseModel):
    """
    帖子业务需要的用户信息（作者校验 + 昵称展示）
    """
    uid: str                           # 业务主键（UUID 字符串）
    nickname: str                      # 昵称
    email: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)
