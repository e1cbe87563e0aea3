"""CLI entry point for the Booklist client."""

import asyncio
import sys
from typing import Optional

import click

from . import ui
from .activity_log import ActivityLog
from .auth import PasswordAuthorizer
from .logging_config import configure_logging
from .remote import BookStoreClient
from .settings import Settings, load_settings
from .sync import AuthError, ListSynchronizer, ValidationError


def _open_store(settings: Settings) -> BookStoreClient:
    return BookStoreClient(settings.api_url, timeout=settings.timeout)


def _activity(settings: Settings) -> ActivityLog:
    return ActivityLog(settings.resolve_activity_path(), settings.api_url)


def _synchronizer(
    store: BookStoreClient, settings: Settings, password: Optional[str]
) -> ListSynchronizer:
    """Build a synchronizer whose password prompt reads from the terminal."""

    async def prompt() -> Optional[str]:
        if password:
            return password
        return click.prompt("Password", hide_input=True, default="", show_default=False)

    authorize = PasswordAuthorizer(store, prompt, report=ui.print_error)
    return ListSynchronizer(
        store, authorize, send_image_on_update=settings.send_image_on_update
    )


def _run(coro):
    """Run *coro*, turning validation and authorization failures into exit 1."""
    try:
        return asyncio.run(coro)
    except ValidationError as e:
        ui.print_error(str(e))
        sys.exit(1)
    except AuthError:
        ui.print_error("Not authorized.")
        sys.exit(1)


password_option = click.option(
    "--password",
    envvar="BOOKLIST_PASSWORD",
    help="Password for mutating operations (prompted if omitted).",
)


@click.group(invoke_without_command=True)
@click.option("--api-url", help="Book store URL, overriding the settings file.")
@click.pass_context
def main(ctx: click.Context, api_url: Optional[str]) -> None:
    """Booklist - manage a remote list of books."""
    settings = load_settings()
    if api_url:
        settings.api_url = api_url
    configure_logging(settings.resolve_log_path())
    ctx.obj = settings
    if ctx.invoked_subcommand is None:
        ctx.invoke(tui_cmd)


@main.command("tui")
@click.pass_obj
def tui_cmd(settings: Settings) -> None:
    """Open the interactive book list."""
    from .app import main as run_app

    run_app(settings)


@main.command("list")
@click.pass_obj
def list_cmd(settings: Settings) -> None:
    """List all books in the store."""

    async def run():
        async with _open_store(settings) as store:
            sync = _synchronizer(store, settings, None)
            await sync.load()
            return sync

    with ui.create_spinner("Fetching books..."):
        sync = _run(run())
    if sync.last_error:
        ui.print_error(sync.last_error)
        sys.exit(1)
    ui.display_book_table(sync.collection)


@main.command("add")
@click.argument("title")
@click.argument("author")
@click.argument("image_url")
@password_option
@click.pass_obj
def add_cmd(
    settings: Settings, title: str, author: str, image_url: str, password: Optional[str]
) -> None:
    """Create a book."""

    async def run():
        async with _open_store(settings) as store:
            sync = _synchronizer(store, settings, password)
            sync.set_field("title", title)
            sync.set_field("author", author)
            sync.set_field("image_url", image_url)
            created = await sync.create()
            return created, sync.last_error

    created, error = _run(run())
    if created is None:
        ui.print_error(error or "Unable to create book.")
        sys.exit(1)
    _activity(settings).record("create", "cli", after=created)
    ui.print_success(f"Created: {created.display_title(60)} ({created.book_id})")


@main.command("edit")
@click.argument("book_id")
@click.option("--title", help="New title.")
@click.option("--author", help="New author.")
@click.option("--image-url", help="New cover image URL.")
@password_option
@click.pass_obj
def edit_cmd(
    settings: Settings,
    book_id: str,
    title: Optional[str],
    author: Optional[str],
    image_url: Optional[str],
    password: Optional[str],
) -> None:
    """Edit the title, author or image of a book."""
    changes = {
        name: value
        for name, value in (("title", title), ("author", author), ("image_url", image_url))
        if value is not None
    }
    if not changes:
        ui.print_info("Nothing to change.")
        return
    if "image_url" in changes and not settings.send_image_on_update:
        ui.print_error(
            "This store's update endpoint ignores the image URL. Set "
            "\"send_image_on_update\": true in ~/.booklist/booklist-settings.json "
            "if your store accepts it."
        )
        sys.exit(1)

    async def run():
        async with _open_store(settings) as store:
            sync = _synchronizer(store, settings, password)
            if not await sync.load():
                return None, sync.last_error
            book = sync.find(book_id)
            if book is None:
                return None, f"No book found with ID: {book_id}"
            sync.begin_edit(book)
            for name, value in changes.items():
                sync.set_field(name, value)
            if not await sync.commit_edit():
                return None, sync.last_error
            return (book, sync.find(book_id)), None

    result, error = _run(run())
    if result is None:
        ui.print_error(error)
        sys.exit(1)
    before, updated = result
    _activity(settings).record("edit", "cli", before=before, after=updated)
    ui.print_success(f"Updated: {updated.display_title(60)}")


@main.command("delete")
@click.argument("book_id")
@password_option
@click.pass_obj
def delete_cmd(settings: Settings, book_id: str, password: Optional[str]) -> None:
    """Delete a book."""

    async def run():
        async with _open_store(settings) as store:
            sync = _synchronizer(store, settings, password)
            if not await sync.load():
                return None, sync.last_error
            book = sync.find(book_id)
            if book is None:
                return None, f"No book found with ID: {book_id}"
            if not await sync.remove(book_id):
                return None, sync.last_error
            return book, None

    removed, error = _run(run())
    if removed is None:
        ui.print_error(error)
        sys.exit(1)
    _activity(settings).record("delete", "cli", before=removed)
    ui.print_success(f"Deleted: {removed.display_title(60)} ({book_id})")


@main.command("activity")
@click.option("--limit", "-n", default=20, show_default=True, help="Entries to show.")
@click.option("--all", "all_stores", is_flag=True, help="Include changes made against other stores.")
@click.pass_obj
def activity_cmd(settings: Settings, limit: int, all_stores: bool) -> None:
    """Show recent changes the store confirmed."""
    changes = _activity(settings).recent(limit=limit, all_stores=all_stores)
    ui.display_activity(changes, show_store=all_stores)


if __name__ == "__main__":
    main()
