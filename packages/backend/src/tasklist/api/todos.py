"""Todo API routes.

Learn: Every route runs behind get_current_user, and the service scopes
each query to that user. Asking for someone else's todo by id gives the
same 404 as asking for one that never existed.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from tasklist.auth.dependencies import get_current_user
from tasklist.db.engine import get_db
from tasklist.db.models import User
from tasklist.schemas.todo import TodoCreate, TodoRead, TodoUpdate
from tasklist.services.todo_service import TodoService

router = APIRouter(prefix="/todos")


def _todo_svc(db: AsyncSession = Depends(get_db)) -> TodoService:
    return TodoService(db)


@router.get("", response_model=list[TodoRead])
async def list_todos(
    completed: Optional[bool] = Query(None, description="Filter by completion"),
    user: User = Depends(get_current_user),
    svc: TodoService = Depends(_todo_svc),
):
    """List the caller's todos."""
    return await svc.list_todos(user, completed=completed)


@router.post("", response_model=TodoRead, status_code=201)
async def create_todo(
    body: TodoCreate,
    user: User = Depends(get_current_user),
    svc: TodoService = Depends(_todo_svc),
):
    return await svc.create_todo(user, body.todo.title, body.todo.completed)


@router.get("/{todo_id}", response_model=TodoRead)
async def get_todo(
    todo_id: int,
    user: User = Depends(get_current_user),
    svc: TodoService = Depends(_todo_svc),
):
    return await svc.get_todo(user, todo_id)


@router.patch("/{todo_id}", response_model=TodoRead)
async def update_todo(
    todo_id: int,
    body: TodoUpdate,
    user: User = Depends(get_current_user),
    svc: TodoService = Depends(_todo_svc),
):
    """Partially update a todo (title, completed)."""
    return await svc.update_todo(
        user,
        todo_id,
        title=body.todo.title,
        completed=body.todo.completed,
    )


@router.delete("/{todo_id}", status_code=204, response_class=Response)
async def delete_todo(
    todo_id: int,
    user: User = Depends(get_current_user),
    svc: TodoService = Depends(_todo_svc),
):
    await svc.delete_todo(user, todo_id)
    return Response(status_code=204)
