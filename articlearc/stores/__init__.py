from articlearc.stores.articles import ArticleStore
from articlearc.stores.database import create_client, ensure_indexes, get_database
from articlearc.stores.interactions import InteractionStore, build_interaction_filter
from articlearc.stores.users import UserStore

__all__ = [
    "ArticleStore",
    "InteractionStore",
    "UserStore",
    "build_interaction_filter",
    "create_client",
    "ensure_indexes",
    "get_database",
]
