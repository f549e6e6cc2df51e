"""Command-line interface for board service administration and debugging."""

import asyncio
import contextlib
import json
import sys
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import Any

import click
import tomli_w
from prometheus_client import generate_latest

from board_service import __version__
from board_service.config import DEFAULT_STORE_URL, Settings, get_config_path, get_settings
from board_service.core.board_engine import BoardEngine
from board_service.core.contact_registry import ContactRegistry
from board_service.core.errors import BoardServiceError, NotFoundFailure, ValidationFailure
from board_service.core.identity import IdentityContext, UserSession
from board_service.core.summary import format_due_date, greeting, summarize
from board_service.models import Task, TaskDraft, TaskStatus
from board_service.storage import RemoteStoreClient, SessionCache
from board_service.utils.logging import setup_logging


class ErrorCategory:
    """Error categories for CLI error messages."""

    SESSION = "session"
    STORE = "store"
    VALIDATION = "validation"


def format_error(category: str, message: str, remediation: str) -> str:
    """Format error with category and remediation.

    Args:
        category: Error category
        message: Error message
        remediation: Suggested fix

    Returns:
        Formatted error string
    """
    return f"""
Error [{category.upper()}]: {message}

Remediation: {remediation}
"""


def get_default_config() -> dict[str, Any]:
    """Get default configuration for init-config."""
    return {
        "store": {
            "base_url": DEFAULT_STORE_URL,
            "timeout_seconds": 10.0,
        },
        "session": {
            "cache_path": "~/.cache/join-board/session.db",
        },
        "guest": {
            "email": "guest@example.com",
            "user_id": "guest",
        },
        "server": {
            "log_level": "INFO",
            "log_format": "json",
        },
    }


def build_store(settings: Settings) -> RemoteStoreClient:
    token = settings.store_auth_token.get_secret_value() if settings.store_auth_token else None
    return RemoteStoreClient(
        base_url=settings.store_base_url,
        auth_token=token,
        timeout=settings.store_timeout_seconds,
    )


def build_identity(settings: Settings, store: RemoteStoreClient) -> IdentityContext:
    return IdentityContext(
        store=store,
        cache=SessionCache(settings.session_cache_path),
        guest_email=settings.guest_email,
        guest_user_id=settings.guest_user_id,
    )


def task_to_json(task: Task) -> dict[str, Any]:
    progress = BoardEngine.compute_progress(task)
    return {
        **task.to_document(),
        "progress": progress.model_dump(),
    }


def run_command(command: Callable[[], Awaitable[Any]]) -> Any:
    """Run an async command, turning service errors into CLI errors."""
    settings = get_settings()
    setup_logging(use_stderr=True)
    try:
        result = asyncio.run(command())
    except ValidationFailure as e:
        click.echo(
            format_error(
                ErrorCategory.VALIDATION,
                str(e),
                "Correct the listed fields and try again.",
            ),
            err=True,
        )
        sys.exit(2)
    except NotFoundFailure as e:
        click.echo(
            format_error(
                ErrorCategory.SESSION,
                str(e),
                "Sign in with: join-board login EMAIL (or join-board guest)",
            ),
            err=True,
        )
        sys.exit(1)
    except BoardServiceError as e:
        click.echo(
            format_error(
                ErrorCategory.STORE,
                str(e),
                "Check connectivity with: join-board health",
            ),
            err=True,
        )
        sys.exit(1)
    finally:
        if settings.metrics_enabled:
            click.echo(generate_latest().decode(), err=True)
    return result


async def require_session(identity: IdentityContext) -> UserSession:
    session = await identity.resolve_active_user()
    if session is None:
        raise NotFoundFailure("session", "active user")
    return session


def parse_status(_ctx: click.Context, _param: click.Parameter, value: str | None) -> TaskStatus | None:
    if value is None:
        return None
    try:
        return TaskStatus.parse(value)
    except ValueError:
        raise click.BadParameter(f"unknown status '{value}'") from None


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.version_option(version=__version__, prog_name="join-board")
def cli(verbose: bool) -> None:
    """Join Board CLI - Administration and debugging tools."""
    if verbose:
        import logging

        logging.getLogger().setLevel(logging.DEBUG)


@cli.command()
def health() -> None:
    """Check remote store reachability."""

    async def _check_health() -> dict[str, Any]:
        settings = get_settings()
        result: dict[str, Any] = {"store": {"status": "unknown", "url": settings.store_base_url}}
        async with build_store(settings) as store:
            result["store"]["status"] = "healthy" if await store.health_check() else "unhealthy"
        return result

    result = run_command(_check_health)
    click.echo(json.dumps(result, indent=2))

    if any(v.get("status") != "healthy" for v in result.values()):
        sys.exit(1)


@cli.command()
@click.argument("email")
@click.password_option(confirmation_prompt=False)
def login(email: str, password: str) -> None:
    """Sign in with EMAIL and remember the session locally."""

    async def _login() -> dict[str, Any]:
        settings = get_settings()
        async with build_store(settings) as store:
            identity = build_identity(settings, store)
            try:
                session = await identity.login(email, password)
            finally:
                await identity.cache.close()
        return {"user_id": session.user_id, "name": session.user.name}

    click.echo(json.dumps(run_command(_login), indent=2))


@cli.command()
def guest() -> None:
    """Sign in to the shared guest account."""

    async def _guest() -> dict[str, Any] | None:
        settings = get_settings()
        async with build_store(settings) as store:
            identity = build_identity(settings, store)
            try:
                session = await identity.login_as_guest()
            finally:
                await identity.cache.close()
        if session is None:
            return None
        return {"user_id": session.user_id, "name": session.user.name}

    result = run_command(_guest)
    if result is None:
        click.echo(
            format_error(
                ErrorCategory.SESSION,
                "The guest account does not exist in the store",
                "Check [guest] email and user_id in the config file",
            ),
            err=True,
        )
        sys.exit(1)
    click.echo(json.dumps(result, indent=2))


@cli.command()
def logout() -> None:
    """Forget the locally remembered session."""

    async def _logout() -> None:
        cache = SessionCache(get_settings().session_cache_path)
        try:
            await cache.clear()
        finally:
            await cache.close()

    run_command(_logout)
    click.echo(json.dumps({"status": "logged_out"}, indent=2))


@cli.command()
def summary() -> None:
    """Show task counts, urgent tasks and the next urgent deadline."""

    async def _summary() -> dict[str, Any]:
        settings = get_settings()
        async with build_store(settings) as store:
            identity = build_identity(settings, store)
            try:
                session = await require_session(identity)
            finally:
                await identity.cache.close()

        figures = summarize(session.board)
        return {
            "greeting": f"{greeting()} {session.user.name}".strip(),
            "counts": {status.value: count for status, count in figures.counts.items()},
            "total": figures.total,
            "urgent": figures.urgent,
            "next_urgent_due": (
                format_due_date(figures.next_urgent_due) if figures.next_urgent_due else None
            ),
        }

    click.echo(json.dumps(run_command(_summary), indent=2))


@cli.command()
@click.option("--search", "-s", default=None, help="Only show tasks whose title or description match")
def board(search: str | None) -> None:
    """Show the board, one array per status."""

    async def _board() -> dict[str, Any]:
        settings = get_settings()
        async with build_store(settings) as store:
            identity = build_identity(settings, store)
            try:
                session = await require_session(identity)
            finally:
                await identity.cache.close()

            engine = BoardEngine(session, store)
            columns = engine.search_tasks(search) if search else engine.filter_tasks(lambda task: True)
        return {
            status.label: [task_to_json(task) for task in tasks]
            for status, tasks in columns.items()
        }

    click.echo(json.dumps(run_command(_board), indent=2, default=str))


@cli.command("add-task")
@click.option("--title", "-t", required=True, help="Task title")
@click.option("--due", "-d", "due_date", required=True, help="Due date (YYYY-MM-DD)")
@click.option(
    "--category",
    "-c",
    type=click.Choice(["Technical Task", "User Story"], case_sensitive=False),
    required=True,
    help="Task category",
)
@click.option("--description", default="", help="Task description")
@click.option(
    "--priority",
    "-p",
    type=click.Choice(["low", "medium", "urgent"], case_sensitive=False),
    default="medium",
    help="Task priority",
)
@click.option("--subtask", "subtasks", multiple=True, help="Subtask text (repeatable)")
@click.option(
    "--status",
    default="todo",
    callback=parse_status,
    help="Status array to add the task to",
)
def add_task(
    title: str,
    due_date: str,
    category: str,
    description: str,
    priority: str,
    subtasks: tuple[str, ...],
    status: TaskStatus,
) -> None:
    """Create a task on the signed-in user's board."""

    async def _add_task() -> dict[str, Any]:
        settings = get_settings()
        draft = TaskDraft(
            title=title,
            description=description,
            due_date=due_date,
            priority=priority,
            category=category,
            subtasks=[{"text": text} for text in subtasks],
        )
        async with build_store(settings) as store:
            identity = build_identity(settings, store)
            try:
                session = await require_session(identity)
                task = await BoardEngine(session, store).create_task(draft, status)
                await identity.persist_local_snapshot(session)
            finally:
                await identity.cache.close()
        return task_to_json(task)

    click.echo(json.dumps(run_command(_add_task), indent=2, default=str))


@cli.command()
@click.argument("task_id")
@click.argument("status", callback=parse_status)
def move(task_id: str, status: TaskStatus) -> None:
    """Move TASK_ID to the end of STATUS."""

    async def _move() -> dict[str, Any] | None:
        settings = get_settings()
        async with build_store(settings) as store:
            identity = build_identity(settings, store)
            try:
                session = await require_session(identity)
                engine = BoardEngine(session, store)
                location = engine.find_task(task_id)
                if location is None:
                    return None
                task = await engine.move_task(task_id, location.status, status)
                await identity.persist_local_snapshot(session)
            finally:
                await identity.cache.close()
        return task_to_json(task) if task else None

    result = run_command(_move)
    if result is None:
        click.echo(f"Task not found: {task_id}", err=True)
        sys.exit(1)
    click.echo(json.dumps(result, indent=2, default=str))


@cli.command()
def contacts() -> None:
    """List contacts grouped by the initial of their last name."""

    async def _contacts() -> dict[str, Any]:
        settings = get_settings()
        async with build_store(settings) as store:
            identity = build_identity(settings, store)
            try:
                session = await require_session(identity)
            finally:
                await identity.cache.close()
            registry = ContactRegistry(session, store)
        return {
            letter: [contact.to_document() for contact in group]
            for letter, group in registry.group_by_initial().items()
        }

    click.echo(json.dumps(run_command(_contacts), indent=2))


@cli.command("init-config")
@click.option("--path", "config_file", type=click.Path(), default=None, help="Override config file path")
def init_config(config_file: str | None) -> None:
    """Create the configuration file with defaults.

    The file is created with restrictive permissions (600) since it may
    later hold the store auth token.
    """
    config_path = Path(config_file) if config_file else get_config_path()

    if config_path.exists():
        click.echo(f"Config file already exists: {config_path}")
        if not click.confirm("Overwrite?"):
            sys.exit(0)

    config_path.parent.mkdir(parents=True, exist_ok=True)
    with open(config_path, "wb") as f:
        tomli_w.dump(get_default_config(), f)

    with contextlib.suppress(OSError):
        config_path.chmod(0o600)

    click.echo(f"Created config file: {config_path}")


def main() -> None:
    """CLI entry point."""
    cli()


if __name__ == "__main__":
    main()
