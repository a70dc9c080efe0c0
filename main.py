from contextlib import asynccontextmanager

from fastapi import FastAPI

from app.core.exceptions import CacheError
from app.core.logx import logger
from app.models.base import Base
from app.routers import posts
from app.service import post_svc
from app.storage.database import SessionLocal, engine, get_kv_store
from app.storage.post.SQLAlchemyPostRepository import SQLAlchemyPostRepository
from app.cache.post_counter_cache import PostCounterCache


def seed_post_counters() -> None:
    """启动时用库里的真实数据覆盖帖子计数缓存"""
    db = SessionLocal()
    try:
        post_svc.initialize_post_counters(
            post_repo=SQLAlchemyPostRepository(db),
            counter_cache=PostCounterCache(get_kv_store()),
        )
    except CacheError as e:
        # 计数缓存不可用时服务照常启动，计数读数为 0 直到下次初始化
        logger.error(f"Seeding post counters failed: {e}")
    finally:
        db.close()


@asynccontextmanager
async def lifespan(app: FastAPI):
    Base.metadata.create_all(bind=engine)
    seed_post_counters()
    yield


app = FastAPI(title="Forum Management System", lifespan=lifespan)

# 注册路由
app.include_router(posts.posts_router)

# uvicorn main:app
# uvicorn main:app --reload
@app.get("/")
def root():
    return {"message": "Welcome to Forum Management System"}
