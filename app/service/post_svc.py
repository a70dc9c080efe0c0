from typing import Dict, List, Optional

from app.schemas.post import (
    PostCreate,
    PostOnlyCreate,
    PostOut,
    PostRecord,
    PostUpdate,
    BatchPostsOut,
)
from app.models.post import PostCategory

from app.storage.post.post_interface import IPostRepository
from app.storage.user.user_interface import IUserRepository
from app.storage.view_count.view_count_interface import IViewCountSource
from app.cache.post_counter_cache import PostCounterCache
from app.cache.post_view_cache import PostViewCache

from app.core.logx import logger
from app.core.security import CallerIdentity
from app.core.exceptions import (
    CacheError,
    ForbiddenAction,
    InvalidCategory,
    PostNotFound,
    Unauthenticated,
    UserNotFound,
)


#---------------------------------------- 内部工具 -----------------------------------------

def _require_caller(caller: Optional[CallerIdentity]) -> CallerIdentity:
    if caller is None or not caller.uid:
        raise Unauthenticated()
    return caller


def _check_author(record: PostRecord, caller: CallerIdentity) -> None:
    if record.author_id != caller.uid:
        raise ForbiddenAction(user_id=caller.uid, pid=record.pid)


def _to_post_out(record: PostRecord, view_count: int, comment_count: int = 0) -> PostOut:
    return PostOut(
        **record.model_dump(),
        view_count=view_count,
        comment_count=comment_count,
    )


def _comment_count_for(
    post_repo: IPostRepository,
    counter_cache: PostCounterCache,
    pid: str,
    ensure_exists: bool = False,
) -> int:
    """
    评论数读缓存，未命中 / 值损坏时从库里统计并回填（5 分钟过期）
    - ensure_exists=False 时调用方需保证帖子存在
    """
    try:
        cached = counter_cache.get_comment_count(pid)
    except CacheError as e:
        logger.warning(f"Comment count cache unreadable pid={pid}, recounting: {e}")
        cached = None
    if cached is not None:
        return cached

    if ensure_exists and not post_repo.get_post_by_pid(pid):
        raise PostNotFound(pid=pid)

    count = post_repo.count_comments_for(pid)
    try:
        counter_cache.set_comment_count(pid, count)
    except CacheError as e:
        logger.warning(f"Cache comment count failed pid={pid}: {e}")
    return count


def _build_post_outs(
    post_repo: IPostRepository,
    counter_cache: PostCounterCache,
    view_counts: IViewCountSource,
) -> List[PostOut]:
    # 列表不走详情缓存，每条都直接由库里的记录 + 实时计数拼出来
    return [
        _to_post_out(
            record,
            view_count=view_counts.get_view_count(record.pid),
            comment_count=_comment_count_for(post_repo, counter_cache, record.pid),
        )
        for record in post_repo.list_all_posts()
    ]


#---------------------------------------- 启动：计数初始化 -----------------------------------------

def initialize_post_counters(post_repo: IPostRepository, counter_cache: PostCounterCache) -> Dict[str, int]:
    """
    进程启动时用库里的真实数据覆盖计数缓存：
    1. 全表统计帖子总数，写 post-count:total
    2. 按分类逐个统计，写 post-count:category:{分类}
    之后只做增量调整；计数漂移时重新调用本函数即可校正
    """
    total = post_repo.count_posts()
    counter_cache.reset_total(total)
    summary = {"total": total}

    for category in PostCategory:
        count = post_repo.count_by_category(category)
        counter_cache.reset_category(category, count)
        summary[category.value] = count

    logger.info(f"Initialized post counters {summary}")
    return summary


#---------------------------------------- 增 -----------------------------------------

def create_post(
    user_repo: IUserRepository,
    post_repo: IPostRepository,
    counter_cache: PostCounterCache,
    caller: Optional[CallerIdentity],
    data: PostCreate,
    to_dict: bool = True,) -> Dict | PostOut:
    """
    创建帖子（业务接口）：
    1. 查看 调用者 是否存在
    2. 校验分类是否在固定枚举内
    3. 在 posts 表创建一条记录
    4. 总数 / 分类计数各 +1（失败只记日志，不回滚已落库的帖子）
    5. 返回 PostOut（浏览数、评论数均为 0；不写详情缓存，第一次读取时再填）
    """
    caller = _require_caller(caller)

    # 1. 查看 用户ID 是否存在
    user = user_repo.get_user_by_uid(caller.uid)
    if not user:
        raise UserNotFound(user_id=caller.uid)

    # 2. 分类校验
    category = PostCategory.parse(data.category)
    if category is None:
        raise InvalidCategory(data.category)

    # 3. 落库
    record = post_repo.create_post(
        PostOnlyCreate(
            author_id=caller.uid,
            category=category,
            title=data.title,
            content=data.content,
        )
    )
    logger.info(f"Created post pid={record.pid} for author={caller.uid} category={category.value}")

    # 4. 计数增量更新
    try:
        counter_cache.post_created(category)
    except CacheError as e:
        logger.warning(f"Increment post counters failed after creating pid={record.pid}: {e}")

    post_out = _to_post_out(record, view_count=0, comment_count=0)
    return post_out.model_dump() if to_dict else post_out


#------------------------------- 查：详情（读缓存），列表（不读缓存） ------------------------------------

def get_post(
    post_repo: IPostRepository,
    post_cache: PostViewCache,
    counter_cache: PostCounterCache,
    view_counts: IViewCountSource,
    pid: str,
    to_dict: bool = True,) -> Dict | PostOut:
    """
    获取单个帖子详情：
    1. 先查 post-view:{pid} 快照
    2. 未命中：查库 -> 组装 -> 回填快照（10 分钟过期）
    3. 不管是否命中，浏览数和评论数都用最新值覆盖
    """
    try:
        cached = post_cache.get(pid)
    except CacheError as e:
        logger.warning(f"Post view cache unreadable pid={pid}, falling back to store: {e}")
        cached = None

    if cached is not None:
        logger.debug(f"Post view cache hit pid={pid}")
        post_out = cached.model_copy(update={
            "view_count": view_counts.get_view_count(pid),
            "comment_count": _comment_count_for(post_repo, counter_cache, pid),
        })
        return post_out.model_dump() if to_dict else post_out

    logger.debug(f"Post view cache miss pid={pid}")
    record = post_repo.get_post_by_pid(pid)
    if not record:
        raise PostNotFound(pid=pid)

    post_out = _to_post_out(
        record,
        view_count=view_counts.get_view_count(pid),
        comment_count=_comment_count_for(post_repo, counter_cache, pid),
    )
    try:
        post_cache.put(post_out)
    except CacheError as e:
        logger.warning(f"Cache post view failed pid={pid}: {e}")

    return post_out.model_dump() if to_dict else post_out


def get_comment_count(post_repo: IPostRepository, counter_cache: PostCounterCache, pid: str) -> int:
    """
    帖子评论数：
    - 命中 comment-count:{pid} 直接返回
    - 未命中先确认帖子存在，再从库里统计并缓存 5 分钟
    """
    return _comment_count_for(post_repo, counter_cache, pid, ensure_exists=True)


def list_posts(
    post_repo: IPostRepository,
    counter_cache: PostCounterCache,
    view_counts: IViewCountSource,
    to_dict: bool = True,) -> Dict | BatchPostsOut:
    """
    获取全部帖子（全表扫描顺序）
    """
    items = _build_post_outs(post_repo, counter_cache, view_counts)
    result = BatchPostsOut(total=len(items), count=len(items), items=items)
    return result.model_dump() if to_dict else result


def list_posts_sorted_by_views(
    post_repo: IPostRepository,
    counter_cache: PostCounterCache,
    view_counts: IViewCountSource,
    to_dict: bool = True,) -> Dict | BatchPostsOut:
    """
    获取全部帖子，按浏览数倒序：
    - 浏览数相同的帖子之间不保证顺序（当前实现恰好保持全表扫描顺序）
    """
    items = sorted(
        _build_post_outs(post_repo, counter_cache, view_counts),
        key=lambda p: p.view_count,
        reverse=True,
    )
    result = BatchPostsOut(total=len(items), count=len(items), items=items)
    return result.model_dump() if to_dict else result


#------------------------------- 改：只许作者修改 ------------------------------------

def update_post(
    post_repo: IPostRepository,
    post_cache: PostViewCache,
    view_counts: IViewCountSource,
    caller: Optional[CallerIdentity],
    pid: str,
    data: PostUpdate,
    to_dict: bool = True,) -> Dict | PostOut:
    """
    作者更新帖子：
    1. 查帖子，校验调用者是否为作者
    2. 只更新传了值的字段（None 表示不变）
    3. 删除 post-view:{pid} 快照（只删不改，下次读取时重新从库里回填）
    4. 返回最新记录 + 当前浏览数（评论数不在这里刷新）
    """
    caller = _require_caller(caller)

    record = post_repo.get_post_by_pid(pid)
    if not record:
        raise PostNotFound(pid=pid)
    _check_author(record, caller)

    updated = post_repo.update_post(pid, data)
    if not updated:
        # 极端情况：上一步还能查到，更新时已被删除
        raise PostNotFound(message=f"post {pid} not found when updating")
    logger.info(f"Updated post pid={pid} with data={data.model_dump(exclude_none=True)}")

    try:
        post_cache.evict(pid)
    except CacheError as e:
        logger.error(f"Evict post view failed pid={pid}, stale snapshot may live until TTL: {e}")

    post_out = _to_post_out(updated, view_count=view_counts.get_view_count(pid))
    return post_out.model_dump() if to_dict else post_out


#------------------------------- 删：只许作者删除 ------------------------------------

def delete_post(
    post_repo: IPostRepository,
    post_cache: PostViewCache,
    counter_cache: PostCounterCache,
    caller: Optional[CallerIdentity],
    pid: str,) -> None:
    """
    作者删除帖子：
    1. 查帖子，校验调用者是否为作者
    2. 从库里物理删除
    3. 总数 / 分类计数各 -1（失败只记日志）
    4. 清掉该帖子的详情快照和评论数缓存，已删除的帖子不会再从缓存里读到
    """
    caller = _require_caller(caller)

    record = post_repo.get_post_by_pid(pid)
    if not record:
        raise PostNotFound(pid=pid)
    _check_author(record, caller)

    if not post_repo.delete_post(pid):
        raise PostNotFound(message=f"post {pid} not found when deleting")
    logger.info(f"Deleted post pid={pid} by author={caller.uid}")

    try:
        counter_cache.post_deleted(record.category)
    except CacheError as e:
        logger.warning(f"Decrement post counters failed after deleting pid={pid}: {e}")

    try:
        post_cache.evict(pid)
    except CacheError as e:
        logger.warning(f"Evict post view failed for deleted pid={pid}: {e}")

    try:
        counter_cache.evict_comment_count(pid)
    except CacheError as e:
        logger.warning(f"Evict comment count failed for deleted pid={pid}: {e}")


#------------------------------- 计数 ------------------------------------

def get_total_count(post_repo: IPostRepository, counter_cache: PostCounterCache) -> int:
    """
    帖子总数（读计数缓存）：
    - 从未初始化过返回 0
    - 值损坏时从库里重新统计并覆盖
    """
    try:
        total = counter_cache.get_total()
    except CacheError as e:
        logger.warning(f"Total post counter unreadable, recounting: {e}")
        total = post_repo.count_posts()
        try:
            counter_cache.reset_total(total)
        except CacheError as reset_err:
            logger.warning(f"Reset total post counter failed: {reset_err}")
    return total if total is not None else 0


def get_count_by_category(post_repo: IPostRepository, counter_cache: PostCounterCache, category: str) -> int:
    """
    某分类帖子数（读计数缓存）：
    - 分类不存在 / 从未初始化过都返回 0
    - 值损坏时从库里重新统计并覆盖
    """
    parsed = PostCategory.parse(category)
    if parsed is None:
        logger.debug(f"Unknown post category {category!r}, count is 0")
        return 0

    try:
        count = counter_cache.get_by_category(parsed)
    except CacheError as e:
        logger.warning(f"Category post counter unreadable category={parsed.value}, recounting: {e}")
        count = post_repo.count_by_category(parsed)
        try:
            counter_cache.reset_category(parsed, count)
        except CacheError as reset_err:
            logger.warning(f"Reset category post counter failed category={parsed.value}: {reset_err}")
    return count if count is not None else 0
