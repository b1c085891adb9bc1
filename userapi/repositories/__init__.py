"""
User API — Repositories Layer
===============================

What:  Data access layer sitting between routes (HTTP) and the database.
How:   Each repository receives a Database handle at construction and owns
       all SQL for its table.

Repository Inventory:
    - UserRepository: CRUD and partial update over the `users` table
"""

from userapi.repositories.user_repository import UserRepository

__all__ = ["UserRepository"]
