"""Command-line interface of the shared to-do client."""
from __future__ import annotations

import json
import logging
from contextlib import contextmanager
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Iterator, List, Optional

import requests
import typer

from shared_todo_client.clients import ApiError, TodoApiClient
from shared_todo_client.config import AppConfig
from shared_todo_client.models import SessionContext, Task, User
from shared_todo_client.services import SessionManager, TaskFilter, TaskSynchronizer, TokenStore

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
MIN_PASSWORD_LENGTH = 6

app = typer.Typer(help="Shared to-do list client")


def configure_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(level=level, format=LOG_FORMAT)


@dataclass
class AppServices:
    """Everything a command needs, created per invocation and closed afterwards."""

    context: SessionContext
    client: TodoApiClient
    token_store: TokenStore
    session: SessionManager
    sync: TaskSynchronizer

    def close(self) -> None:
        self.token_store.close()
        self.client.close()


def build_services(config: AppConfig, http_session: Optional[requests.Session] = None) -> AppServices:
    config.ensure_runtime_dirs()
    context = SessionContext()
    client = TodoApiClient(config.api, context, session=http_session)
    token_store = TokenStore(config.storage.path, token_key=config.storage.token_key)
    session = SessionManager(client, token_store, context)
    sync = TaskSynchronizer(client, search_options=config.search)
    return AppServices(context=context, client=client, token_store=token_store, session=session, sync=sync)


def fail(message: str) -> None:
    typer.echo(message, err=True)
    raise typer.Exit(code=1)


@contextmanager
def open_services(ctx: typer.Context, *, require_user: bool = True) -> Iterator[AppServices]:
    services = build_services(ctx.obj)
    try:
        services.session.restore_session()
        if require_user and not services.session.is_authenticated:
            fail("Not logged in. Run `shared-todo login` first.")
        yield services
    except ApiError as exc:
        fail(exc.message)
    finally:
        services.close()


def format_task(task: Task, current_user: Optional[User]) -> str:
    mark = "x" if task.completed else " "
    line = f"[{mark}] {task.id}  {task.text}"
    details = [f"by {task.owner.name or task.owner.id}"]
    if task.collaborators:
        count = len(task.collaborators)
        details.append(f"{count} collaborator{'s' if count != 1 else ''}")
    if current_user is not None:
        if task.can_share(current_user.id):
            details.append("owner")
        elif task.can_edit(current_user.id):
            details.append("collaborator")
    return f"{line}  ({', '.join(details)})"


def _dump(items: List) -> str:
    return json.dumps([asdict(item) for item in items], indent=2, ensure_ascii=False, default=str)


def require_owner(services: AppServices, task_id: str, action: str) -> Task:
    """Loads the list and stops unless the current user owns the task."""
    if not services.sync.load():
        fail(services.sync.last_error or "Could not load tasks")
    task = services.sync.tasks.get(task_id)
    if task is None:
        fail(f"Task {task_id} not found")
    if not task.can_share(services.session.current_user.id):
        fail(f"Only the owner of task {task_id} can {action} it")
    return task


@app.callback()
def main(
    ctx: typer.Context,
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to a YAML configuration"),
    api_url: Optional[str] = typer.Option(None, "--api-url", help="Overrides the API base URL"),
    verbosity: int = typer.Option(0, "--verbose", "-v", count=True, help="Logging level"),
) -> None:
    configure_logging(verbosity)
    try:
        config = AppConfig.load_or_default(config_path)
    except ValueError as exc:
        fail(str(exc))
    if api_url:
        config.api.base_url = api_url
    ctx.obj = config


# region session commands
@app.command()
def login(
    ctx: typer.Context,
    email: str = typer.Option(..., prompt=True),
    password: str = typer.Option(..., prompt=True, hide_input=True),
) -> None:
    """Signs in and stores the credential locally."""
    with open_services(ctx, require_user=False) as services:
        user = services.session.login(email, password)
        typer.echo(f"Logged in as {user.name} <{user.email}>")


@app.command()
def register(
    ctx: typer.Context,
    name: str = typer.Option(..., prompt=True),
    email: str = typer.Option(..., prompt=True),
    password: str = typer.Option(..., prompt=True, hide_input=True, confirmation_prompt=True),
) -> None:
    """Creates an account and signs in."""
    if len(password) < MIN_PASSWORD_LENGTH:
        fail(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")
    with open_services(ctx, require_user=False) as services:
        user = services.session.register(name, email, password)
        typer.echo(f"Registered {user.name} <{user.email}>")


@app.command()
def logout(ctx: typer.Context) -> None:
    """Forgets the stored credential."""
    with open_services(ctx, require_user=False) as services:
        services.session.logout()
        typer.echo("Logged out")


@app.command()
def whoami(ctx: typer.Context) -> None:
    """Shows the signed-in user."""
    with open_services(ctx) as services:
        user = services.session.current_user
        typer.echo(f"{user.name} <{user.email}> ({user.id})")


# endregion


# region task commands
@app.command("list")
def list_tasks(
    ctx: typer.Context,
    task_filter: TaskFilter = typer.Option(TaskFilter.ALL, "--filter", "-f", case_sensitive=False),
    as_json: bool = typer.Option(False, "--json", help="Print tasks as JSON"),
) -> None:
    """Shows the tasks visible to the current user."""
    with open_services(ctx) as services:
        if not services.sync.load():
            fail(services.sync.last_error or "Could not load tasks")
        tasks = services.sync.tasks.filtered(task_filter)
        if as_json:
            typer.echo(_dump(tasks))
            return
        stats = services.sync.tasks.stats()
        typer.echo(f"{stats.completed} of {stats.total} completed")
        if not tasks:
            if task_filter is TaskFilter.COMPLETED:
                typer.echo("No completed tasks")
            elif task_filter is TaskFilter.ACTIVE:
                typer.echo("No pending tasks")
            else:
                typer.echo("No tasks yet. Add one with `shared-todo add`.")
            return
        for task in tasks:
            typer.echo(format_task(task, services.session.current_user))


@app.command()
def add(ctx: typer.Context, text: str = typer.Argument(..., help="Task text")) -> None:
    """Creates a task at the end of the list."""
    text = text.strip()
    if not text:
        fail("Task text must not be empty")
    with open_services(ctx) as services:
        task = services.sync.create(text)
        typer.echo(format_task(task, services.session.current_user))


@app.command()
def done(ctx: typer.Context, task_id: str = typer.Argument(...)) -> None:
    """Toggles the completed flag of a task."""
    with open_services(ctx) as services:
        if not services.sync.load():
            fail(services.sync.last_error or "Could not load tasks")
        if task_id not in services.sync.tasks:
            fail(f"Task {task_id} not found")
        task = services.sync.toggle(task_id)
        typer.echo(format_task(task, services.session.current_user))


@app.command()
def edit(ctx: typer.Context, task_id: str = typer.Argument(...), text: str = typer.Argument(...)) -> None:
    """Changes the text of a task."""
    if not text.strip():
        fail("Task text must not be empty")
    with open_services(ctx) as services:
        if not services.sync.load():
            fail(services.sync.last_error or "Could not load tasks")
        task = services.sync.rename(task_id, text)
        if task is None:
            typer.echo("Nothing to change")
            return
        typer.echo(format_task(task, services.session.current_user))


@app.command()
def delete(ctx: typer.Context, task_id: str = typer.Argument(...)) -> None:
    """Deletes a task you own."""
    with open_services(ctx) as services:
        require_owner(services, task_id, "delete")
        services.sync.delete(task_id)
        typer.echo(f"Deleted {task_id}")


# endregion


# region sharing commands
@app.command()
def share(ctx: typer.Context, task_id: str = typer.Argument(...), email: str = typer.Argument(...)) -> None:
    """Adds a collaborator to a task by e-mail."""
    with open_services(ctx) as services:
        require_owner(services, task_id, "share")
        task = services.sync.share(task_id, email)
        typer.echo(format_task(task, services.session.current_user))


@app.command()
def unshare(ctx: typer.Context, task_id: str = typer.Argument(...), user_id: str = typer.Argument(...)) -> None:
    """Removes a collaborator from a task."""
    with open_services(ctx) as services:
        require_owner(services, task_id, "unshare")
        task = services.sync.remove_collaborator(task_id, user_id)
        typer.echo(format_task(task, services.session.current_user))


@app.command()
def search(
    ctx: typer.Context,
    query: str = typer.Argument(..., help="Part of a name or e-mail"),
    as_json: bool = typer.Option(False, "--json"),
) -> None:
    """Looks up users to share with."""
    with open_services(ctx) as services:
        users = services.sync.search_users(query)
        if as_json:
            typer.echo(_dump(users))
            return
        if not users:
            typer.echo("No users found")
            return
        for user in users:
            typer.echo(f"{user.id}  {user.name} <{user.email}>")


# endregion


if __name__ == "__main__":
    app()
