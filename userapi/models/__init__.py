"""ORM models. Importing this package registers every table on Base.metadata."""

from userapi.models.user import User

__all__ = ["User"]
