"""Todo service — CRUD scoped to a single owner.

Learn: Every read goes through the owner. Listing filters by user_id;
single-record access fetches by id and then runs the ownership check,
which answers 404 for both "missing" and "someone else's".
"""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from tasklist.auth.ownership import authorize_ownership
from tasklist.db.models import Todo, User
from tasklist.errors import TodoValidationError

BLANK = "can't be blank"

# Largest value an INTEGER primary key column holds (PostgreSQL int4).
MAX_ID = 2**31 - 1


def _clean_title(title: str) -> str:
    title = title.strip()
    if not title:
        raise TodoValidationError({"title": [BLANK]})
    return title


class TodoService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_todos(self, user: User, completed: Optional[bool] = None) -> list[Todo]:
        q = select(Todo).where(Todo.user_id == user.id)
        if completed is not None:
            q = q.where(Todo.completed == completed)
        result = await self.db.execute(q.order_by(Todo.id))
        return list(result.scalars().all())

    async def create_todo(self, user: User, title: str, completed: bool = False) -> Todo:
        todo = Todo(user_id=user.id, title=_clean_title(title), completed=completed)
        self.db.add(todo)
        await self.db.commit()
        await self.db.refresh(todo)
        return todo

    async def get_todo(self, user: User, todo_id: int) -> Todo:
        """Fetch one of the user's todos (404 if missing or not theirs)."""
        if not 1 <= todo_id <= MAX_ID:
            return authorize_ownership(user, None)
        return authorize_ownership(user, await self.db.get(Todo, todo_id))

    async def update_todo(
        self,
        user: User,
        todo_id: int,
        title: Optional[str] = None,
        completed: Optional[bool] = None,
    ) -> Todo:
        todo = await self.get_todo(user, todo_id)
        if title is not None:
            todo.title = _clean_title(title)
        if completed is not None:
            todo.completed = completed
        await self.db.commit()
        await self.db.refresh(todo)
        return todo

    async def delete_todo(self, user: User, todo_id: int) -> None:
        todo = await self.get_todo(user, todo_id)
        await self.db.delete(todo)
        await self.db.commit()
