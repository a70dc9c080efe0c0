from typing import Optional

from fastapi import Header
from pydantic import BaseModel, ConfigDict


class CallerIdentity(BaseModel):
    """
    可信的调用者身份：
    - 由外部认证层（网关 / 会话中间件）解析后传入
    - 业务层只比较 uid，不做任何认证
    """
    uid: str

    model_config = ConfigDict(frozen=True)


def get_current_caller(x_user_id: Optional[str] = Header(default=None)) -> Optional[CallerIdentity]:
    """
    FastAPI 依赖：从 X-User-Id 头里取调用者
    - 头缺失 / 为空时返回 None，由业务层决定是否需要身份（抛 Unauthenticated）
    """
    if not x_user_id or not x_user_id.strip():
        return None
    return CallerIdentity(uid=x_user_id.strip())
