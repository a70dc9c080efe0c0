from datetime import datetime, timezone, timedelta

# 东八区时区，所有 created_at / updated_at 默认值统一走这里
CN_TZ = timezone(timedelta(hours=8))


def now_utc8() -> datetime:
    """返回东八区的当前时间"""
    return datetime.now(CN_TZ)
