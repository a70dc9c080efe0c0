from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.orm import Session


@contextmanager
def transaction(db: Session) -> Iterator[Session]:
    """
    仓库层统一的事务封装：
    - 块内正常结束 -> commit
    - 块内抛异常 -> rollback 后原样抛出（存储层错误不吞掉）
    """
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
