# app/cache/keys.py
# 缓存 key 布局对外是固定协议，其他服务也会按这个格式读写，不要随意改动

from app.models.post import PostCategory

# -- TTL（秒） -----------------------------------------
POST_VIEW_TTL = 600         # 10 min: 帖子详情快照
COMMENT_COUNT_TTL = 300     # 5 min: 帖子评论数

# -- Key Builders --------------------------------------
TOTAL_POST_COUNT_KEY = "post-count:total"


def category_count_key(category: PostCategory | str) -> str:
    name = category.value if isinstance(category, PostCategory) else category
    return f"post-count:category:{name}"


def post_view_key(pid: str) -> str:
    return f"post-view:{pid}"


def comment_count_key(pid: str) -> str:
    return f"comment-count:{pid}"


def view_count_key(pid: str) -> str:
    return f"view-count:{pid}"
