import logging
from collections.abc import Awaitable, Callable

from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.orm import DeclarativeBase

from app.config import settings
from app.middleware import install_query_counter

logger = logging.getLogger(__name__)

CommitHook = Callable[[], Awaitable[None]]

_HOOKS_KEY = "after_commit_hooks"


class ArticleSession(AsyncSession):
    """
    AsyncSession that runs registered coroutines once its transaction commits.

    Cache invalidation must not happen before the rows it describes are
    visible to other connections; a reader arriving between an early
    invalidation and the commit would repopulate the cache with the old
    state.  Hooks are dropped on rollback, and a failing hook is logged
    without undoing the commit.
    """

    def after_commit(self, hook: CommitHook) -> None:
        hooks = self.info.setdefault(_HOOKS_KEY, [])
        if hook not in hooks:
            hooks.append(hook)

    async def commit(self) -> None:
        await super().commit()
        for hook in self.info.pop(_HOOKS_KEY, []):
            try:
                await hook()
            except Exception as exc:
                logger.warning("After-commit hook %r failed: %s", hook, exc)

    async def rollback(self) -> None:
        self.info.pop(_HOOKS_KEY, None)
        await super().rollback()


# Module-level engine; tests swap in their own engine through get_db overrides.
engine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DEBUG,
    pool_pre_ping=True,
)

install_query_counter(engine)

async_session = async_sessionmaker(
    engine,
    class_=ArticleSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    pass


async def get_db():
    """Yield a session whose transaction commits when the request succeeds."""
    async with async_session() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
