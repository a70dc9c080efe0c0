"""
Shared fixtures for the post caching tests.

- In-memory SQLite (StaticPool, one connection shared across threads)
- MemoryKeyValueStore driven by a fake clock so TTL expiry is deterministic
"""
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.models.base import Base
from app.models.user import User
from app.models.post import Post  # noqa: F401  (registers the table)
from app.models.comment import Comment
from app.storage.kv.MemoryKeyValueStore import MemoryKeyValueStore
from app.storage.post.SQLAlchemyPostRepository import SQLAlchemyPostRepository
from app.storage.user.SQLAlchemyUserRepository import SQLAlchemyUserRepository
from app.storage.view_count.KVViewCountSource import KVViewCountSource
from app.cache.post_counter_cache import PostCounterCache
from app.cache.post_view_cache import PostViewCache
from app.core.security import CallerIdentity


class FakeClock:
    """Monotonic clock stand-in; tests move time forward explicitly."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(bind=engine, autocommit=False, autoflush=False)()
    yield session
    session.close()


@pytest.fixture
def users(db):
    """Two registered users: u1 (alice) and u2 (bob)."""
    alice = User(uid="u1", nickname="alice", email="alice@example.com")
    bob = User(uid="u2", nickname="bob", email="bob@example.com")
    db.add_all([alice, bob])
    db.commit()
    return {"u1": CallerIdentity(uid="u1"), "u2": CallerIdentity(uid="u2")}


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def kv(clock):
    return MemoryKeyValueStore(maxsize=1000, timer=clock)


@pytest.fixture
def post_repo(db):
    return SQLAlchemyPostRepository(db)


@pytest.fixture
def user_repo(db):
    return SQLAlchemyUserRepository(db)


@pytest.fixture
def post_cache(kv):
    return PostViewCache(kv)


@pytest.fixture
def counter_cache(kv):
    return PostCounterCache(kv)


@pytest.fixture
def view_counts(kv):
    return KVViewCountSource(kv)


@pytest.fixture
def add_comment(db):
    """Insert a comment row directly; comment CRUD lives outside this service."""

    def _add(pid: str, author_id: str = "u2", content: str = "nice post") -> None:
        db.add(Comment(post_id=pid, author_id=author_id, content=content))
        db.commit()

    return _add
