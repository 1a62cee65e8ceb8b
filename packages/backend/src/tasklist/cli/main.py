"""Tasklist CLI — a terminal client for the Tasklist API.

Usage:
    tasklist serve                                # Run the API with uvicorn
    tasklist register you@example.com             # Create an account, print token
    tasklist login you@example.com                # Print a fresh token
    export TASKLIST_TOKEN=...                     # Use it for the commands below
    tasklist whoami                               # Show the signed-in account
    tasklist todos list                           # Your todos
    tasklist todos add "buy milk"                 # New todo
    tasklist todos done 3                         # Mark todo #3 completed
    tasklist todos rm 3                           # Delete todo #3
"""

from __future__ import annotations

import asyncio
import json
import os
import sys
from typing import Optional

import click
import httpx

# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------

DEFAULT_API_URL = "http://localhost:8000"


def _api_url() -> str:
    return os.environ.get("TASKLIST_API_URL", DEFAULT_API_URL).rstrip("/")


def _client(token: Optional[str] = None) -> httpx.AsyncClient:
    """Build an async HTTP client pointed at the Tasklist API."""
    headers = {"Authorization": f"Bearer {token}"} if token else {}
    return httpx.AsyncClient(
        base_url=f"{_api_url()}/api/v1", timeout=30.0, headers=headers
    )


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _run(coro):
    """Run an async coroutine from a synchronous Click handler."""
    return asyncio.run(coro)


def _require_token(token: Optional[str]) -> str:
    tok = token or os.environ.get("TASKLIST_TOKEN")
    if not tok:
        click.secho(
            "Error: --token required (or set TASKLIST_TOKEN env var)",
            fg="red",
            err=True,
        )
        sys.exit(1)
    return tok


def _fail(r: httpx.Response) -> None:
    """Print the API's error body and exit non-zero."""
    try:
        body = r.json()
    except ValueError:
        body = {"error": r.text}
    if "errors" in body:
        for field, messages in body["errors"].items():
            for msg in messages:
                click.secho(f"{field} {msg}", fg="red", err=True)
    else:
        click.secho(f"Error ({r.status_code}): {body.get('error')}", fg="red", err=True)
    sys.exit(1)


def _print_todo(todo: dict) -> None:
    mark = click.style("✓", fg="green") if todo["completed"] else " "
    click.echo(f"[{mark}] #{todo['id']:<5} {todo['title']}")


token_option = click.option(
    "--token", envvar="TASKLIST_TOKEN", help="Bearer token (or set TASKLIST_TOKEN)"
)


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(version="0.1.0", prog_name="tasklist")
def main():
    """Tasklist — manage your todos from the terminal."""


@main.command()
@click.option("--host", default=None, help="Bind address (default from settings)")
@click.option("--port", default=None, type=int, help="Port (default from settings)")
@click.option("--reload", is_flag=True, help="Auto-reload on code changes")
def serve(host: Optional[str], port: Optional[int], reload: bool):
    """Run the API server."""
    import uvicorn

    from tasklist.config import settings

    uvicorn.run(
        "tasklist.main:app",
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
    )


# ---------------------------------------------------------------------------
# Accounts
# ---------------------------------------------------------------------------


@main.command()
@click.argument("email")
@click.password_option()
def register(email: str, password: str):
    """Create an account and print its token."""
    _run(_register_impl(email, password))


async def _register_impl(email: str, password: str):
    async with _client() as c:
        r = await c.post("/users", json={
            "user": {"email": email, "password": password},
        })
    if r.status_code != 201:
        _fail(r)
    data = r.json()
    click.secho(f"Registered {data['user']['email']} (id {data['user']['id']})", fg="green", err=True)
    click.echo(data["token"])


@main.command()
@click.argument("email")
@click.option("--password", prompt=True, hide_input=True)
def login(email: str, password: str):
    """Log in and print a bearer token."""
    _run(_login_impl(email, password))


async def _login_impl(email: str, password: str):
    async with _client() as c:
        r = await c.post("/login", json={"email": email, "password": password})
    if r.status_code != 200:
        _fail(r)
    click.echo(r.json()["token"])


@main.command()
def logout():
    """Forget the token (tokens are stateless; just unset TASKLIST_TOKEN)."""
    _run(_logout_impl())


async def _logout_impl():
    async with _client() as c:
        r = await c.delete("/logout")
    click.echo(r.json()["message"])
    click.echo("Run: unset TASKLIST_TOKEN")


@main.command()
@token_option
@click.option("--json", "as_json", is_flag=True, help="Print raw JSON")
def whoami(token: Optional[str], as_json: bool):
    """Show the account the token belongs to."""
    _run(_whoami_impl(_require_token(token), as_json))


async def _whoami_impl(token: str, as_json: bool):
    async with _client(token) as c:
        r = await c.get("/profile")
    if r.status_code != 200:
        _fail(r)
    user = r.json()
    if as_json:
        click.echo(json.dumps(user, indent=2))
    else:
        click.echo(f"{user['email']} (id {user['id']})")


@main.command("delete-account")
@token_option
@click.confirmation_option(prompt="Delete your account and all of its todos?")
def delete_account(token: Optional[str]):
    """Delete your account and all of its todos."""
    _run(_delete_account_impl(_require_token(token)))


async def _delete_account_impl(token: str):
    async with _client(token) as c:
        r = await c.get("/profile")
        if r.status_code != 200:
            _fail(r)
        r = await c.delete(f"/users/{r.json()['id']}")
    if r.status_code != 200:
        _fail(r)
    click.secho(r.json()["message"], fg="green")


# ---------------------------------------------------------------------------
# Todos
# ---------------------------------------------------------------------------


@main.group()
def todos():
    """List and edit your todos."""


@todos.command("list")
@token_option
@click.option("--done/--open", "completed", default=None, help="Filter by completion")
def list_todos(token: Optional[str], completed: Optional[bool]):
    """List your todos."""
    _run(_list_impl(_require_token(token), completed))


async def _list_impl(token: str, completed: Optional[bool]):
    params = {} if completed is None else {"completed": str(completed).lower()}
    async with _client(token) as c:
        r = await c.get("/todos", params=params)
    if r.status_code != 200:
        _fail(r)
    items = r.json()
    if not items:
        click.echo("No todos.")
    for todo in items:
        _print_todo(todo)


@todos.command("add")
@click.argument("title")
@token_option
def add_todo(title: str, token: Optional[str]):
    """Create a todo."""
    _run(_add_impl(_require_token(token), title))


async def _add_impl(token: str, title: str):
    async with _client(token) as c:
        r = await c.post("/todos", json={"todo": {"title": title}})
    if r.status_code != 201:
        _fail(r)
    _print_todo(r.json())


@todos.command("done")
@click.argument("todo_id", type=int)
@click.option("--undo", is_flag=True, help="Mark as not completed")
@token_option
def done_todo(todo_id: int, undo: bool, token: Optional[str]):
    """Mark a todo completed."""
    _run(_done_impl(_require_token(token), todo_id, not undo))


async def _done_impl(token: str, todo_id: int, completed: bool):
    async with _client(token) as c:
        r = await c.patch(f"/todos/{todo_id}", json={"todo": {"completed": completed}})
    if r.status_code != 200:
        _fail(r)
    _print_todo(r.json())


@todos.command("rm")
@click.argument("todo_id", type=int)
@token_option
def remove_todo(todo_id: int, token: Optional[str]):
    """Delete a todo."""
    _run(_rm_impl(_require_token(token), todo_id))


async def _rm_impl(token: str, todo_id: int):
    async with _client(token) as c:
        r = await c.delete(f"/todos/{todo_id}")
    if r.status_code != 204:
        _fail(r)
    click.echo(f"Deleted #{todo_id}")


if __name__ == "__main__":
    main()
