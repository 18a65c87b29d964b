from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .client.board import BoardColumn
from .client.http import TaskApiClient
from .client.sync import ClientSyncEngine
from .config import load_config
from .constants import DEFAULT_BASE_URL
from .errors import ConfigError
from .logging_utils import configure_logging
from .server import create_app
from .server.faults import RequestOptions, parse_delay

console = Console()


def render_board(columns: list[BoardColumn]) -> Table:
    table = Table(title="Kanban Board")
    for column in columns:
        table.add_column(f"{column.title} ({len(column.cards)})")
    depth = max((len(c.cards) for c in columns), default=0)
    for row in range(depth):
        cells = []
        for column in columns:
            if row >= len(column.cards):
                cells.append("")
                continue
            card = column.cards[row]
            back = " " if card.back_disabled else "<"
            forward = " " if card.forward_disabled else ">"
            cells.append(f"{back} {escape(card.name)} {forward}")
        table.add_row(*cells)
    return table


def _options(args: argparse.Namespace) -> Optional[RequestOptions]:
    delay = getattr(args, "delay", None)
    error = getattr(args, "error", None)
    if delay is None and error is None:
        return None
    return RequestOptions.from_query(delay, error)


async def _with_engine(args: argparse.Namespace) -> int:
    async with TaskApiClient(base_url=args.base_url) as client:
        engine = ClientSyncEngine(client, options=_options(args))
        await engine.load()
        if not engine.loaded:
            latest = engine.notifications.latest
            sys.stderr.write((latest.message if latest else "Failed to load the board") + "\n")
            return 1

        action = getattr(args, "task_cmd", None)
        ok = True
        if action == "create":
            ok = await engine.create_task(args.name)
        elif action in {"forward", "back", "delete"}:
            task = engine.find(args.name)
            if task is None:
                sys.stderr.write(f"Unknown task: {args.name}\n")
                return 1
            if action == "forward":
                ok = await engine.move_forward(task)
            elif action == "back":
                ok = await engine.move_back(task)
            else:
                ok = await engine.delete_task(task.name)
        await engine.wait_idle()

        if not ok:
            latest = engine.notifications.latest
            sys.stderr.write((latest.message if latest else "Request failed") + "\n")
            return 1
        console.print(render_board(engine.board()))
        return 0


def _board_command(args: argparse.Namespace) -> int:
    return asyncio.run(_with_engine(args))


def _server(args: argparse.Namespace) -> int:
    import uvicorn

    try:
        config = load_config(Path(args.config) if args.config else None)
    except ConfigError as exc:
        sys.stderr.write(f"Invalid configuration: {exc}\n")
        return 1
    configure_logging(args.log_level or config.log_level)
    app = create_app(config=config)
    uvicorn.run(app, host=args.host, port=args.port)
    return 0


def _delay_arg(raw: str) -> str:
    if parse_delay(raw) is None:
        raise argparse.ArgumentTypeError(f"delay must start with an integer, got {raw!r}")
    return raw


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Kanban board backed by a simulated unreliable task API')
    parser.add_argument('--log-level', default=None, help='Log level (default: from config, INFO)')
    subparsers = parser.add_subparsers(dest='command', required=True)

    server = subparsers.add_parser('server', help='Start the task API server')
    server.add_argument('--host', default='127.0.0.1')
    server.add_argument('--port', default=8000, type=int)
    server.add_argument('--config', default=None, help='YAML config file with a `server:` section')
    server.set_defaults(func=_server)

    board = subparsers.add_parser('board', help='Show the board')
    board.add_argument('--base-url', default=DEFAULT_BASE_URL)
    board.set_defaults(func=_board_command)

    task = subparsers.add_parser('task', help='Manage tasks by name')
    task.add_argument('--base-url', default=DEFAULT_BASE_URL)
    task.add_argument('--delay', default=None, type=_delay_arg, help='Simulated latency (ms)')
    task.add_argument('--error', default=None, choices=['true', 'false'], help='Force failure or success')
    task_sub = task.add_subparsers(dest='task_cmd', required=True)
    for name, help_text in (
        ('create', 'Create a task in the backlog'),
        ('forward', 'Move a task to the next stage'),
        ('back', 'Move a task to the previous stage'),
        ('delete', 'Delete a task'),
    ):
        sub = task_sub.add_parser(name, help=help_text)
        sub.add_argument('name')
        sub.set_defaults(func=_board_command)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.command != 'server':
        configure_logging(args.log_level or "WARNING")
    handler = getattr(args, 'func', None)
    if handler is None:
        parser.print_help()
        return 1
    return int(handler(args) or 0)


if __name__ == '__main__':
    sys.exit(main())
