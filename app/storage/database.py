from functools import lru_cache

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from fastapi import Depends

from app.core.config import settings
from app.storage.kv.kv_interface import IKeyValueStore
from app.storage.kv.MemoryKeyValueStore import MemoryKeyValueStore
from app.storage.kv.RedisKeyValueStore import RedisKeyValueStore
from app.storage.user.SQLAlchemyUserRepository import SQLAlchemyUserRepository
from app.storage.post.SQLAlchemyPostRepository import SQLAlchemyPostRepository
from app.storage.view_count.KVViewCountSource import KVViewCountSource
from app.cache.post_counter_cache import PostCounterCache
from app.cache.post_view_cache import PostViewCache

# ======== 配置区（见 app/core/config.py，可用 FORUM_* 环境变量覆盖） ========
DATABASE_URL = settings.sqlalchemy_url()

# SQLAlchemy 引擎
engine = create_engine(DATABASE_URL, echo=settings.sql_echo, pool_pre_ping=True)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@lru_cache(maxsize=1)
def get_kv_store() -> IKeyValueStore:
    """进程内共享一个键值存储连接（redis 客户端自带连接池，线程安全）"""
    if settings.cache_backend == "memory":
        return MemoryKeyValueStore(maxsize=settings.memory_cache_maxsize)
    return RedisKeyValueStore.from_url(settings.redis_url)


# 未来可以根据配置切换不同的实现
def get_user_repo(db: Session = Depends(get_db)) -> SQLAlchemyUserRepository:
    return SQLAlchemyUserRepository(db)
def get_post_repo(db: Session = Depends(get_db)) -> SQLAlchemyPostRepository:
    return SQLAlchemyPostRepository(db)
def get_post_view_cache(kv: IKeyValueStore = Depends(get_kv_store)) -> PostViewCache:
    return PostViewCache(kv)
def get_post_counter_cache(kv: IKeyValueStore = Depends(get_kv_store)) -> PostCounterCache:
    return PostCounterCache(kv)
def get_view_count_source(kv: IKeyValueStore = Depends(get_kv_store)) -> KVViewCountSource:
    return KVViewCountSource(kv)
