# src/taskdeck/cli/commands.py

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Callable, Coroutine
from datetime import date
from typing import Any, cast

from ..auth.auth_models import Session
from ..core.state import AppState
from ..tasks.task_api import TaskView, build_task_view, resolve_task_id
from ..tasks.task_models import Task, TaskFilter, TaskValidationError
from ..tasks.task_query import is_overdue
from ..tasks.task_store import NotAuthenticatedError

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by the console (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}
        # Handlers that take the rest of the line verbatim as args[0].
        self._raw: set[str] = set()

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
        raw_args: bool = False,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler
        if raw_args:
            self._raw.update(n.lower() for n in [name, *aliases])

    def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]
        if name in self._raw:
            rest = line[1:].split(None, 1)
            args = rest[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except Exception:
            nparams = 3

        try:
            if nparams >= 3:
                h3 = cast(CommandHandler3, handler)
                return h3(state, args, emit)

            h2 = cast(CommandHandler2, handler)
            return h2(state, args)
        except TaskValidationError as e:
            return f"Invalid task: {e}"
        except NotAuthenticatedError:
            return "You are not signed in. Use /login, /register, /google or /facebook."

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- helpers ----


def _split_options(args: list[str]) -> tuple[list[str], dict[str, str]]:
    """
    Split "words --key value ..." into (words, {key: value}).

    A trailing "--key" with no value maps to "".
    """
    words: list[str] = []
    opts: dict[str, str] = {}
    i = 0
    while i < len(args):
        a = args[i]
        if a.startswith("--") and len(a) > 2:
            key = a[2:].lower()
            value_parts: list[str] = []
            i += 1
            while i < len(args) and not args[i].startswith("--"):
                value_parts.append(args[i])
                i += 1
            opts[key] = " ".join(value_parts)
            continue
        words.append(a)
        i += 1
    return words, opts


def _run_auth(
    state: AppState,
    coro: Coroutine[Any, Any, Session],
    pending_text: str,
    emit: CommandEmitter | None = None,
) -> str:
    """
    Start an auth coroutine without blocking the prompt when a background loop exists.

    The outcome arrives later as a notice.
    """
    if state.auth.session.is_loading:
        coro.close()
        return "Another sign-in is still in progress."

    if state.background is not None:
        state.background.submit(coro)
        return pending_text

    if emit is not None:
        emit(pending_text)
    session = asyncio.run(coro)
    if session.error:
        return session.error
    return _describe_session(session)


def _describe_session(session: Session) -> str:
    if session.is_loading:
        return "Signing in..."
    if session.user is None:
        return "Not signed in."
    u = session.user
    return f"Signed in as {u.name} <{u.email}> via {u.provider.value}."


def _format_task(task: Task, today: date | None = None) -> str:
    mark = "x" if task.is_completed else " "
    details = [task.priority.value, task.category.value]
    if task.due_date is not None:
        due = f"due {task.due_date.isoformat()}"
        if is_overdue(task, today):
            due += " OVERDUE"
        details.append(due)
    line = f"{task.id[:8]} [{mark}] {task.title} ({', '.join(details)})"
    if task.description:
        line += f"\n           {task.description}"
    return line


def _format_view(view: TaskView) -> str:
    if not view.tasks:
        return "No matching tasks." if view.is_filtered else "No tasks yet. Add one with /add."
    return "\n".join(_format_task(t) for t in view.tasks)


def _task_ref(state: AppState, args: list[str]) -> str | None:
    if not args:
        return None
    return resolve_task_id(state, args[0])


# ---- command handlers ----


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_whoami(state: AppState, args: list[str]) -> str:
    session = state.auth.session
    text = _describe_session(session)
    if session.error:
        text += f"\nLast error: {session.error}"
    return text


def cmd_login(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    if len(args) < 2:
        return "Usage: /login <email> <password>"
    return _run_auth(state, state.auth.login(args[0], args[1]), "Signing in...", emit)


def cmd_register(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    if len(args) < 3:
        return "Usage: /register <email> <password> <name...>"
    name = " ".join(args[2:])
    return _run_auth(state, state.auth.register(name, args[0], args[1]), "Creating account...", emit)


def cmd_google(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    return _run_auth(state, state.auth.login_with_google(), "Signing in with Google...", emit)


def cmd_facebook(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    return _run_auth(state, state.auth.login_with_facebook(), "Signing in with Facebook...", emit)


def cmd_logout(state: AppState, args: list[str]) -> str:
    if state.auth.user is None:
        return "Not signed in."
    coro = state.auth.logout()
    if state.background is not None:
        state.background.submit(coro)
        return "Signing out..."
    asyncio.run(coro)
    return "Signed out."


def cmd_add(state: AppState, args: list[str]) -> str:
    """
    /add <title> [| description] [--priority p] [--category c] [--due YYYY-MM-DD]
    """
    words, opts = _split_options(args)
    text = " ".join(words)
    title, _, description = text.partition("|")

    fields: dict[str, Any] = {"title": title, "description": description}
    if "priority" in opts:
        fields["priority"] = opts["priority"]
    if "category" in opts:
        fields["category"] = opts["category"]
    if "due" in opts:
        fields["due_date"] = opts["due"] or None

    task = state.task_store.create(**fields)
    return f"Added: {_format_task(task)}"


def cmd_edit(state: AppState, args: list[str]) -> str:
    """
    /edit <id> [--title t] [--description d] [--priority p] [--category c] [--due d|none]
    """
    task_id = _task_ref(state, args)
    if task_id is None:
        return "Usage: /edit <id> [--title ...] [--description ...] [--priority ...] [--category ...] [--due ...]"

    _, opts = _split_options(args[1:])
    fields: dict[str, Any] = {}
    for key in ("title", "description", "priority", "category"):
        if key in opts:
            fields[key] = opts[key]
    if "due" in opts:
        due = opts["due"].strip().lower()
        fields["due_date"] = None if due in ("", "none", "-") else opts["due"]

    if not fields:
        return "Nothing to change."

    task = state.task_store.update(task_id, **fields)
    if task is None:
        return "No such task."
    return f"Updated: {_format_task(task)}"


def cmd_done(state: AppState, args: list[str]) -> str:
    task_id = _task_ref(state, args)
    if task_id is None:
        return "Usage: /done <id>"
    task = state.task_store.toggle_complete(task_id)
    if task is None:
        return "No such task."
    return ("Completed: " if task.is_completed else "Reopened: ") + task.title


def cmd_rm(state: AppState, args: list[str]) -> str:
    task_id = _task_ref(state, args)
    if task_id is None:
        return "Usage: /rm <id>"
    if not state.task_store.delete(task_id):
        return "No such task."
    return "Deleted."


def cmd_list(state: AppState, args: list[str]) -> str:
    """
    /list                 -> everything
    /list <filter>        -> all|completed|pending|high|work|personal|study
    /list <filter> <text> -> filter + search
    /list <text>          -> search only
    /list [filter] --search <text> -> search text that starts with a filter word

    The search text is used exactly as typed (inner spacing included).
    """
    if state.auth.user is None:
        raise NotAuthenticatedError()

    text = args[0] if args else ""
    task_filter = TaskFilter.ALL
    words = text.split(None, 1)
    if words and words[0].lower() in {f.value for f in TaskFilter}:
        task_filter = TaskFilter(words[0].lower())
        text = words[1] if len(words) > 1 else ""

    if text == "--search" or text.startswith("--search "):
        text = text[len("--search ") :]

    view = build_task_view(state, task_filter, text)
    return _format_view(view)


def cmd_stats(state: AppState, args: list[str]) -> str:
    if state.auth.user is None:
        raise NotAuthenticatedError()

    stats = build_task_view(state).stats
    if stats.total_count == 0:
        return "No tasks yet."
    return (
        "Progress:\n"
        f"  {stats.completed_count} of {stats.total_count} tasks completed "
        f"({stats.progress_percentage:.0f}%)\n"
        f"  Pending: {stats.pending_count}\n"
        f"  Overdue: {stats.overdue_count}"
    )


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("whoami", cmd_whoami, help_text="Show the current session.")
registry.register("login", cmd_login, help_text="Sign in: /login <email> <password>.")
registry.register(
    "register", cmd_register, help_text="Create an account: /register <email> <password> <name>."
)
registry.register("google", cmd_google, help_text="Sign in with Google (demo).")
registry.register("facebook", cmd_facebook, help_text="Sign in with Facebook (demo).")
registry.register("logout", cmd_logout, help_text="Sign out and clear local data.")
registry.register(
    "add",
    cmd_add,
    help_text="Add a task: /add <title> [| description] [--priority p] [--category c] [--due YYYY-MM-DD].",
)
registry.register("edit", cmd_edit, help_text="Edit a task: /edit <id> --title ... --priority ... --due none.")
registry.register("done", cmd_done, help_text="Toggle completion: /done <id>.", aliases=["toggle"])
registry.register("rm", cmd_rm, help_text="Delete a task: /rm <id>.", aliases=["delete"])
registry.register(
    "list",
    cmd_list,
    help_text="List tasks: /list [filter] [search] or /list [filter] --search <text>.",
    aliases=["ls"],
    raw_args=True,
)
registry.register("stats", cmd_stats, help_text="Show completion progress.")
