from typing import Any, Optional

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse


class BizResponse(JSONResponse):
    """
    统一响应外壳：
        {"code": <http 状态码>, "msg": "...", "data": ...}
    - HTTP 状态码和 code 保持一致，方便前端只看一个字段
    """

    def __init__(self, data: Any = None, msg: str = "ok", status_code: int = 200, headers: Optional[dict] = None):
        content = {
            "code": status_code,
            "msg": msg,
            "data": jsonable_encoder(data),
        }
        super().__init__(content=content, status_code=status_code, headers=headers)
