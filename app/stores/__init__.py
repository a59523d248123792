# Store adapters.
#
# The article service only talks to the ``ArticleStore`` protocol defined
# in ``base``.  Two implementations ship with the project:
#
#   sql     : SQLAlchemy async session (PostgreSQL in production,
#             SQLite in tests)
#   memory  : process-local store for ephemeral hosting and unit tests
#
# Every implementation raises ``app.errors.StorageError`` for failures of
# the underlying backend.
from app.stores.base import ArticleStore
from app.stores.memory import InMemoryArticleStore
from app.stores.sql import SqlArticleStore

__all__ = ["ArticleStore", "InMemoryArticleStore", "SqlArticleStore"]
