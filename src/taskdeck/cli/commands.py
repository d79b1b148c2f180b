# src/taskdeck/cli/commands.py

from __future__ import annotations

import contextlib
import inspect
import logging
from collections.abc import Awaitable, Callable
from datetime import datetime
from typing import Any, cast

from ..core.state import AppState
from ..errors import FetchError, ValidationError
from ..remote.models import EnrichedPost
from ..tasks.task_models import Task, TaskFilter

CommandEmitter = Callable[[str], None]
CommandResult = str | Awaitable[str]
CommandHandler2 = Callable[[AppState, list[str]], CommandResult]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], CommandResult]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by the console (/help, /add, /search, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    async def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        Handlers may be plain functions or coroutines.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except Exception:
            nparams = 3

        result: Any
        if nparams >= 3:
            h3 = cast(CommandHandler3, handler)
            result = h3(state, args, emit)
        else:
            h2 = cast(CommandHandler2, handler)
            result = h2(state, args)

        if inspect.isawaitable(result):
            result = await result
        return str(result)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- formatting ----


def _ts_local(ts: float) -> str:
    return datetime.fromtimestamp(ts).astimezone().strftime("%Y-%m-%d %H:%M")


def _split_text(args: list[str]) -> tuple[str, str]:
    """'/add Buy milk | 2 liters' -> ('Buy milk', '2 liters')."""
    text = " ".join(args)
    title, sep, description = text.partition("|")
    return title.strip(), description.strip() if sep else ""


def format_task(task: Task) -> str:
    mark = "x" if task.completed else " "
    line = f"[{mark}] {task.id}  {task.title}"
    if task.description:
        line += f"\n      {task.description}"
    stamp = f"created {_ts_local(task.created_at)}"
    if task.updated_at != task.created_at:
        stamp += f", updated {_ts_local(task.updated_at)}"
    return f"{line}\n      ({stamp})"


def format_posts_view(state: AppState) -> str:
    search = state.search
    if search.error:
        return f"Error: {search.error}\nUse /refresh to retry."

    result = search.result
    if result is None:
        return "No posts loaded yet. Use /posts."

    header = f'Results for "{search.query}"' if search.query else "Posts"
    lines = [f"{header}: {result.total} total, page {result.page}/{result.total_pages or 0}"]

    if not result.data:
        lines.append("No posts found." + (" Try adjusting your search terms." if search.query else ""))
    for post in result.data:
        author = ""
        if isinstance(post, EnrichedPost) and post.user is not None:
            author = f" - {post.user.name}"
        lines.append(f"  #{post.id} {post.title}{author}")

    if result.total_pages > 1:
        pages = " ".join(f"[{n}]" if n == result.page else str(n) for n in search.page_numbers)
        lines.append(f"Pages: {pages}")
    return "\n".join(lines)


def _parse_int(raw: str, what: str) -> int:
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{what} must be a number, got {raw!r}") from None


# ---- general ----


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_status(state: AppState, args: list[str]) -> str:
    stats = state.tasks.stats()
    settings = state.settings
    return (
        "Status:\n"
        f"  Theme: {'dark' if state.theme.dark_mode else 'light'}\n"
        f"  Tasks: {stats.total} ({stats.active} active, {stats.completed} completed)\n"
        f"  Storage: {'memory' if getattr(settings, 'in_memory_storage', False) else getattr(settings, 'storage_path', '?')}\n"
        f"  API: {getattr(settings, 'api_base_url', '?')}"
    )


def cmd_theme(state: AppState, args: list[str]) -> str:
    """
    /theme         -> show current theme
    /theme dark    -> dark mode on
    /theme light   -> dark mode off
    /theme toggle  -> flip
    """
    if not args:
        return f"Theme is {'dark' if state.theme.dark_mode else 'light'}. Use /theme dark | light | toggle."

    arg = args[0].lower()
    if arg in ("dark", "on", "1", "true", "yes"):
        state.theme.set(True)
    elif arg in ("light", "off", "0", "false", "no"):
        state.theme.set(False)
    elif arg == "toggle":
        state.theme.toggle()
    else:
        return "Usage: /theme dark | light | toggle."
    return f"Theme is now {'dark' if state.theme.dark_mode else 'light'}."


# ---- tasks ----


def cmd_add(state: AppState, args: list[str]) -> str:
    title, description = _split_text(args)
    try:
        task = state.tasks.add(title, description)
    except ValidationError as e:
        return f"Cannot add task ({e.field}): {e.message}"
    return f"Added:\n{format_task(task)}"


def cmd_edit(state: AppState, args: list[str]) -> str:
    if len(args) < 2:
        return "Usage: /edit <id> <title> [| description]"
    task_id = args[0]
    title, description = _split_text(args[1:])
    fields: dict[str, Any] = {"title": title}
    if description:
        fields["description"] = description
    try:
        task = state.tasks.update(task_id, fields)
    except ValidationError as e:
        return f"Cannot update task ({e.field}): {e.message}"
    if task is None:
        return f"No task with id {task_id}."
    return f"Updated:\n{format_task(task)}"


def cmd_list(state: AppState, args: list[str]) -> str:
    if args:
        try:
            state.task_filter = TaskFilter.parse(args[0])
        except ValueError as e:
            return str(e)

    flt = state.task_filter
    tasks = state.tasks.filter(flt)
    if not tasks:
        if len(state.tasks) == 0:
            return "No tasks yet! Add your first task with /add <title>."
        return f"No {flt.value} tasks found. Try another filter."

    stats = state.tasks.stats()
    counts = {TaskFilter.ALL: stats.total, TaskFilter.ACTIVE: stats.active, TaskFilter.COMPLETED: stats.completed}
    lines = [f"Tasks ({flt.value}, {counts[flt]}):"]
    lines.extend(format_task(t) for t in tasks)
    return "\n".join(lines)


def cmd_toggle(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /done <id>"
    task = state.tasks.toggle_completion(args[0])
    if task is None:
        return f"No task with id {args[0]}."
    return f"Task {task.id} is now {'completed' if task.completed else 'active'}."


def cmd_remove(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /rm <id>"
    if state.tasks.remove(args[0]):
        return f"Deleted task {args[0]}."
    return f"No task with id {args[0]}."


def cmd_clear(state: AppState, args: list[str]) -> str:
    removed = state.tasks.clear_completed()
    return f"Cleared {removed} completed task(s)."


def cmd_stats(state: AppState, args: list[str]) -> str:
    s = state.tasks.stats()
    return (
        "Task statistics:\n"
        f"  Total: {s.total}\n"
        f"  Active: {s.active}\n"
        f"  Completed: {s.completed}\n"
        f"  Completion: {s.completion_percentage}%"
    )


# ---- posts ----


async def cmd_posts(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """/posts [page] -> unfiltered view (drops any search query)."""
    page = 1
    if args:
        try:
            page = _parse_int(args[0], "page")
        except ValueError as e:
            return str(e)

    if emit:
        with contextlib.suppress(Exception):
            emit("Loading posts...")

    await state.search.clear()
    if page != 1:
        await state.search.go_to_page(page)
    return format_posts_view(state)


async def cmd_search(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    query = " ".join(args)
    if not query:
        await state.search.clear()
        return format_posts_view(state)

    if emit:
        with contextlib.suppress(Exception):
            emit(f'Searching for "{query}"...')

    state.search.on_input(query)
    await state.search.submit()
    return format_posts_view(state)


async def cmd_page(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /page <n>"
    try:
        page = _parse_int(args[0], "page")
        await state.search.go_to_page(page)
    except ValueError as e:
        return str(e)
    return format_posts_view(state)


async def cmd_next(state: AppState, args: list[str]) -> str:
    result = state.search.result
    if result is None:
        return "No posts loaded yet. Use /posts."
    if state.search.page >= result.total_pages:
        return "Already on the last page."
    await state.search.go_to_page(state.search.page + 1)
    return format_posts_view(state)


async def cmd_prev(state: AppState, args: list[str]) -> str:
    if state.search.page <= 1:
        return "Already on the first page."
    await state.search.go_to_page(state.search.page - 1)
    return format_posts_view(state)


async def cmd_refresh(state: AppState, args: list[str]) -> str:
    await state.search.refresh()
    return format_posts_view(state)


async def cmd_post(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /post <id>"
    try:
        post_id = _parse_int(args[0], "post id")
    except ValueError as e:
        return str(e)

    try:
        detail = await state.posts.post_detail(post_id)
    except FetchError as e:
        if e.status == 404:
            return f"No post with id {post_id}."
        return f"Error: {e.message}"

    lines = [f"#{detail.post.id} {detail.post.title}"]
    if detail.user is not None:
        lines.append(f"by {detail.user.name} <{detail.user.email}>")
    lines.append("")
    lines.append(detail.post.body)
    lines.append("")
    lines.append(f"Comments ({len(detail.comments)}):")
    for c in detail.comments:
        lines.append(f"  - {c.name} <{c.email}>: {c.body}")
    return "\n".join(lines)


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show theme, task counts, storage and API.")
registry.register("theme", cmd_theme, help_text="Dark mode: /theme dark | light | toggle.")
registry.register("add", cmd_add, help_text="Add a task: /add <title> [| description].")
registry.register("edit", cmd_edit, help_text="Edit a task: /edit <id> <title> [| description].")
registry.register("list", cmd_list, help_text="List tasks: /list [all | active | completed].", aliases=["ls"])
registry.register("done", cmd_toggle, help_text="Toggle completion: /done <id>.", aliases=["toggle"])
registry.register("rm", cmd_remove, help_text="Delete a task: /rm <id>.", aliases=["del"])
registry.register("clear", cmd_clear, help_text="Delete all completed tasks.")
registry.register("stats", cmd_stats, help_text="Task totals and completion percentage.")
registry.register("posts", cmd_posts, help_text="Browse posts: /posts [page].")
registry.register("search", cmd_search, help_text="Search posts by title or body: /search <text>.")
registry.register("page", cmd_page, help_text="Go to a page of the current posts view: /page <n>.")
registry.register("next", cmd_next, help_text="Next page of posts.")
registry.register("prev", cmd_prev, help_text="Previous page of posts.")
registry.register("refresh", cmd_refresh, help_text="Reload the current posts view.")
registry.register("post", cmd_post, help_text="Show one post with its comments: /post <id>.")
