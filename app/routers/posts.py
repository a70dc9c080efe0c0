from typing import Optional

from fastapi import APIRouter, Depends

from app.schemas.post import (
    PostCreate,
    PostOut,
    BatchPostsOut,
    PostUpdate,
    PostCountOut,
)
from app.core.biz_response import BizResponse
from app.core.security import CallerIdentity, get_current_caller
from app.service import post_svc

from app.storage.database import (
    get_user_repo,
    get_post_repo,
    get_post_view_cache,
    get_post_counter_cache,
    get_view_count_source,
)
from app.storage.post.post_interface import IPostRepository
from app.storage.user.user_interface import IUserRepository
from app.storage.view_count.view_count_interface import IViewCountSource
from app.cache.post_counter_cache import PostCounterCache
from app.cache.post_view_cache import PostViewCache

from app.core.exceptions import (
    PostNotFound,
    UserNotFound,
    ForbiddenAction,
    InvalidCategory,
    Unauthenticated,
)
from app.core.logx import logger

posts_router = APIRouter(prefix="/posts", tags=["posts"])

# --------------------------------- 创建帖子 ---------------------------------
@posts_router.post("/", response_model=PostOut)
def create_post(
    payload: PostCreate,
    caller: Optional[CallerIdentity] = Depends(get_current_caller),
    user_repo: IUserRepository = Depends(get_user_repo),
    post_repo: IPostRepository = Depends(get_post_repo),
    counter_cache: PostCounterCache = Depends(get_post_counter_cache),
):
    """
    创建帖子：
    - 作者取自 X-User-Id
    - 落库后总数 / 分类计数 +1
    """
    try:
        post = post_svc.create_post(
            user_repo=user_repo,
            post_repo=post_repo,
            counter_cache=counter_cache,
            caller=caller,
            data=payload,
            to_dict=True,
        )
        return BizResponse(data=post, status_code=201)
    except Unauthenticated as e:
        return BizResponse(data=None, msg=str(e), status_code=401)
    except UserNotFound as e:
        return BizResponse(data=None, msg=str(e), status_code=404)
    except InvalidCategory as e:
        return BizResponse(data=None, msg=str(e), status_code=400)
    except Exception as e:
        logger.exception(e)
        return BizResponse(data=None, msg=str(e), status_code=500)


# --------------------------------- 查询：列表 / 计数 ---------------------------------
@posts_router.get("/", response_model=BatchPostsOut)
def list_posts(
    post_repo: IPostRepository = Depends(get_post_repo),
    counter_cache: PostCounterCache = Depends(get_post_counter_cache),
    view_counts: IViewCountSource = Depends(get_view_count_source),
):
    """
    获取全部帖子（不读详情缓存）
    """
    try:
        result = post_svc.list_posts(
            post_repo=post_repo,
            counter_cache=counter_cache,
            view_counts=view_counts,
            to_dict=True,
        )
        return BizResponse(data=result)
    except Exception as e:
        logger.exception(e)
        return BizResponse(data=None, msg=str(e), status_code=500)


@posts_router.get("/sorted/views", response_model=BatchPostsOut)
def list_posts_sorted_by_views(
    post_repo: IPostRepository = Depends(get_post_repo),
    counter_cache: PostCounterCache = Depends(get_post_counter_cache),
    view_counts: IViewCountSource = Depends(get_view_count_source),
):
    """
    获取全部帖子，按浏览数倒序
    """
    try:
        result = post_svc.list_posts_sorted_by_views(
            post_repo=post_repo,
            counter_cache=counter_cache,
            view_counts=view_counts,
            to_dict=True,
        )
        return BizResponse(data=result)
    except Exception as e:
        logger.exception(e)
        return BizResponse(data=None, msg=str(e), status_code=500)


@posts_router.get("/count", response_model=PostCountOut)
def get_total_count(
    post_repo: IPostRepository = Depends(get_post_repo),
    counter_cache: PostCounterCache = Depends(get_post_counter_cache),
):
    try:
        count = post_svc.get_total_count(post_repo=post_repo, counter_cache=counter_cache)
        return BizResponse(data=PostCountOut(count=count))
    except Exception as e:
        logger.exception(e)
        return BizResponse(data=None, msg=str(e), status_code=500)


@posts_router.get("/count/{category}", response_model=PostCountOut)
def get_count_by_category(
    category: str,
    post_repo: IPostRepository = Depends(get_post_repo),
    counter_cache: PostCounterCache = Depends(get_post_counter_cache),
):
    try:
        count = post_svc.get_count_by_category(
            post_repo=post_repo,
            counter_cache=counter_cache,
            category=category,
        )
        return BizResponse(data=PostCountOut(category=category, count=count))
    except Exception as e:
        logger.exception(e)
        return BizResponse(data=None, msg=str(e), status_code=500)


# --------------------------------- 用户：查询帖子，更新帖子，删除帖子 ---------------------------------
@posts_router.get("/{pid}", response_model=PostOut)
def get_post(
    pid: str,
    post_repo: IPostRepository = Depends(get_post_repo),
    post_cache: PostViewCache = Depends(get_post_view_cache),
    counter_cache: PostCounterCache = Depends(get_post_counter_cache),
    view_counts: IViewCountSource = Depends(get_view_count_source),
):
    """
    通过帖子 ID 获取帖子详情（优先读缓存快照）
    """
    try:
        post = post_svc.get_post(
            post_repo=post_repo,
            post_cache=post_cache,
            counter_cache=counter_cache,
            view_counts=view_counts,
            pid=pid,
            to_dict=True,
        )
        return BizResponse(data=post)
    except PostNotFound as e:
        return BizResponse(data=None, msg=str(e), status_code=404)
    except Exception as e:
        logger.exception(e)
        return BizResponse(data=None, msg=str(e), status_code=500)


@posts_router.put("/{pid}", response_model=PostOut)
def update_post(
    pid: str,
    payload: PostUpdate,
    caller: Optional[CallerIdentity] = Depends(get_current_caller),
    post_repo: IPostRepository = Depends(get_post_repo),
    post_cache: PostViewCache = Depends(get_post_view_cache),
    view_counts: IViewCountSource = Depends(get_view_count_source),
):
    """
    作者更新帖子标题 / 正文（未传的字段保持不变）
    """
    try:
        post = post_svc.update_post(
            post_repo=post_repo,
            post_cache=post_cache,
            view_counts=view_counts,
            caller=caller,
            pid=pid,
            data=payload,
            to_dict=True,
        )
        return BizResponse(data=post)
    except Unauthenticated as e:
        return BizResponse(data=None, msg=str(e), status_code=401)
    except PostNotFound as e:
        return BizResponse(data=None, msg=str(e), status_code=404)
    except ForbiddenAction as e:
        return BizResponse(data=None, msg=str(e), status_code=403)
    except Exception as e:
        logger.exception(e)
        return BizResponse(data=None, msg=str(e), status_code=500)


@posts_router.delete("/{pid}")
def delete_post(
    pid: str,
    caller: Optional[CallerIdentity] = Depends(get_current_caller),
    post_repo: IPostRepository = Depends(get_post_repo),
    post_cache: PostViewCache = Depends(get_post_view_cache),
    counter_cache: PostCounterCache = Depends(get_post_counter_cache),
):
    """
    作者删除帖子
    """
    try:
        post_svc.delete_post(
            post_repo=post_repo,
            post_cache=post_cache,
            counter_cache=counter_cache,
            caller=caller,
            pid=pid,
        )
        return BizResponse(data=True)
    except Unauthenticated as e:
        return BizResponse(data=False, msg=str(e), status_code=401)
    except PostNotFound as e:
        return BizResponse(data=False, msg=str(e), status_code=404)
    except ForbiddenAction as e:
        return BizResponse(data=False, msg=str(e), status_code=403)
    except Exception as e:
        logger.exception(e)
        return BizResponse(data=False, msg=str(e), status_code=500)
