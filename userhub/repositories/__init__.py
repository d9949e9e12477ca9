"""Persistence layer."""

from userhub.repositories.users import SqlUserStore, UserStore

__all__ = ["SqlUserStore", "UserStore"]
