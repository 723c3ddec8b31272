from .database import Database
from .social_post_repository import SqlAlchemySocialPostRepository

__all__ = [
    "Database",
    "SqlAlchemySocialPostRepository",
]
