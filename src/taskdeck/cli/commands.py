# src/taskdeck/cli/commands.py

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable

from ..core.state import AppState
from ..tasks.stats_controller import StatsError, StatsLoaded
from ..tasks.task_format import (
    format_display_date,
    format_task_line,
    is_overdue_locally,
    parse_due_date,
    parse_priority,
    parse_status,
)
from ..tasks.task_models import Task, TaskPatch, TaskStatus
from ..tasks.task_states import TaskError, TaskLoaded, TaskState, TaskView

CommandHandler = Callable[[AppState, list[str]], Awaitable[str]]

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by the console (/help, /load, ...)."""

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

    async def handle(self, state: AppState, line: str) -> str | None:
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

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        return await handler(state, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- rendering ----


def render_tasks(tasks: list[Task] | tuple[Task, ...], empty: str = "No tasks.") -> str:
    if not tasks:
        return empty
    return "\n".join(format_task_line(t) for t in tasks)


def render_view(view: TaskView) -> str:
    criteria: list[str] = []
    if view.search_query is not None:
        criteria.append(f"search={view.search_query!r}")
    if view.status_filter is not None:
        criteria.append(f"status={view.status_filter.value}")
    if view.priority_filter is not None:
        criteria.append(f"priority={view.priority_filter.value}")

    header = f"Showing {len(view.filtered)} of {len(view.full)} tasks"
    if criteria:
        header += f" ({', '.join(criteria)})"
    return f"{header}\n{render_tasks(view.filtered)}"


def render_state(state: TaskState) -> str:
    if isinstance(state, TaskLoaded):
        return render_view(state.view)
    if isinstance(state, TaskError):
        return f"[ERROR] {state.message}"
    return "Nothing loaded yet. Use /load first."


def render_task_detail(task: Task) -> str:
    lines = [
        f"{task.title} ({task.id})",
        f"  Status: {task.status.value}",
        f"  Priority: {task.priority.value}",
        f"  Due: {format_display_date(task.due_date)}{' (overdue)' if task.is_overdue else ''}",
        f"  Created by: {task.created_by.name}",
    ]
    if task.assigned_to is not None:
        lines.append(f"  Assigned to: {task.assigned_to.name}")
    if task.description:
        lines.append(f"  {task.description}")
    return "\n".join(lines)


# ---- handlers ----


async def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


async def cmd_load(state: AppState, args: list[str]) -> str:
    return render_state(await state.tasks.load())


async def cmd_refresh(state: AppState, args: list[str]) -> str:
    return render_state(await state.tasks.refresh())


async def cmd_list(state: AppState, args: list[str]) -> str:
    """
    /list          -> everything cached
    /list <status> -> cached tasks with that status
    /list overdue  -> cached tasks past their due date
    """
    if not args:
        return render_tasks(state.tasks.get_all())

    if args[0].lower() == "overdue":
        overdue = [t for t in state.tasks.get_all() if t.is_overdue or is_overdue_locally(t)]
        return render_tasks(overdue, empty="No overdue tasks.")

    status = parse_status(args[0])
    if status is None:
        return "Usage: /list [todo|in_progress|done|overdue]"
    return render_tasks(state.tasks.get_by_status(status), empty=f"No {status.value} tasks.")


async def cmd_show(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /show <task_id>"
    task = state.tasks.get_by_id(args[0])
    if task is None:
        return f"Task not found: {args[0]}"
    return render_task_detail(task)


async def cmd_add(state: AppState, args: list[str]) -> str:
    """/add <title> | <description> | <priority> | <YYYY-MM-DD>"""
    usage = "Usage: /add <title> | <description> | <low|medium|high> | <YYYY-MM-DD>"
    parts = [p.strip() for p in " ".join(args).split("|")]
    if len(parts) != 4 or not parts[0]:
        return usage

    title, description, raw_priority, raw_due = parts
    priority = parse_priority(raw_priority)
    due_date = parse_due_date(raw_due)
    if priority is None or due_date is None:
        return usage

    result = await state.tasks.create(
        title=title,
        description=description,
        priority=priority,
        due_date=due_date,
    )
    return render_state(result)


async def cmd_edit(state: AppState, args: list[str]) -> str:
    """/edit <id> title=... priority=high due=2024-06-01 status=done"""
    usage = "Usage: /edit <task_id> [title=..] [description=..] [status=..] [priority=..] [due=YYYY-MM-DD]"
    if len(args) < 2:
        return usage

    task_id = args[0]
    fields: dict[str, str] = {}
    current_key: str | None = None
    for token in args[1:]:
        key, sep, value = token.partition("=")
        if sep and key.lower() in {"title", "description", "status", "priority", "due"}:
            current_key = key.lower()
            fields[current_key] = value
        elif current_key is not None:
            # Values with spaces: "title=Fix the bug" arrives as several tokens.
            fields[current_key] = f"{fields[current_key]} {token}"
        else:
            return usage

    status = parse_status(fields["status"]) if "status" in fields else None
    priority = parse_priority(fields["priority"]) if "priority" in fields else None
    due_date = parse_due_date(fields["due"]) if "due" in fields else None
    if ("status" in fields and status is None) or ("priority" in fields and priority is None):
        return usage
    if "due" in fields and due_date is None:
        return usage

    patch = TaskPatch(
        title=fields.get("title"),
        description=fields.get("description"),
        status=status,
        priority=priority,
        due_date=due_date,
    )
    if patch.is_empty():
        return usage
    return render_state(await state.tasks.update(task_id, patch))


async def cmd_done(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /done <task_id>"
    return render_state(await state.tasks.update_status(args[0], TaskStatus.DONE))


async def cmd_start(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /start <task_id>"
    return render_state(await state.tasks.update_status(args[0], TaskStatus.IN_PROGRESS))


async def cmd_rm(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /rm <task_id>"
    return render_state(await state.tasks.delete(args[0]))


async def cmd_search(state: AppState, args: list[str]) -> str:
    return render_state(await state.tasks.search(" ".join(args).strip()))


async def cmd_filter(state: AppState, args: list[str]) -> str:
    """/filter [status] [priority] in any order; no args clears the filter."""
    status = None
    priority = None
    for token in args:
        s = parse_status(token)
        p = parse_priority(token)
        if s is not None:
            status = s
        elif p is not None:
            priority = p
        else:
            return "Usage: /filter [todo|in_progress|done] [low|medium|high]"
    return render_state(await state.tasks.filter(status=status, priority=priority))


async def cmd_stats(state: AppState, args: list[str]) -> str:
    result = await state.stats.load()
    if isinstance(result, StatsError):
        return f"[ERROR] {result.message}"
    if not isinstance(result, StatsLoaded):
        return "Statistics are not available."

    stats = result.statistics
    lines = [f"Total: {stats.total}", f"Overdue: {stats.overdue}"]
    if stats.by_status:
        lines.append("By status: " + ", ".join(f"{k}={v}" for k, v in stats.by_status.items()))
    if stats.by_priority:
        lines.append("By priority: " + ", ".join(f"{k}={v}" for k, v in stats.by_priority.items()))
    return "\n".join(lines)


async def cmd_whoami(state: AppState, args: list[str]) -> str:
    user = state.session.get_current_user()
    if user is None:
        return "No user in the stored session."
    return f"{user.name} <{user.email}> role={user.role}"


async def cmd_logout(state: AppState, args: list[str]) -> str:
    state.session.clear()
    state.tasks.reset()
    state.stats.reset()
    return "Logged out. Local task cache cleared."


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("load", cmd_load, help_text="Load tasks from the server.")
registry.register("refresh", cmd_refresh, help_text="Reload tasks in the background.", aliases=["r"])
registry.register("list", cmd_list, help_text="List cached tasks: /list [status|overdue].", aliases=["ls"])
registry.register("show", cmd_show, help_text="Show one cached task: /show <id>.")
registry.register("add", cmd_add, help_text="Create: /add title | description | priority | YYYY-MM-DD.")
registry.register("edit", cmd_edit, help_text="Update: /edit <id> field=value ...")
registry.register("done", cmd_done, help_text="Mark a task done: /done <id>.")
registry.register("start", cmd_start, help_text="Mark a task in progress: /start <id>.")
registry.register("rm", cmd_rm, help_text="Delete a task: /rm <id>.", aliases=["delete"])
registry.register("search", cmd_search, help_text="Server-side search: /search <text> (empty resets).")
registry.register("filter", cmd_filter, help_text="Filter by status/priority: /filter [status] [priority].")
registry.register("stats", cmd_stats, help_text="Show task statistics.")
registry.register("whoami", cmd_whoami, help_text="Show the stored session user.")
registry.register("logout", cmd_logout, help_text="Clear the session and the local cache.")
