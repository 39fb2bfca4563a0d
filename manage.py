#!/usr/bin/env python3
"""
Faktura management CLI.

Usage:
    python manage.py start                      Start the API server
    python manage.py stop                       Graceful shutdown
    python manage.py status                     Server and database state
    python manage.py migrate                    Apply pending database migrations
    python manage.py next-number --tenant ID    Show the next invoice number
"""

import argparse
import asyncio
import os
import signal
import socket
import subprocess
import sys
import time
from pathlib import Path

ROOT_DIR = Path(__file__).resolve().parent
PID_FILE = ROOT_DIR / ".faktura.pid"

STOP_TIMEOUT = 5.0


def _server_pid() -> int | None:
    """PID recorded by ``start`` if that process is still alive."""
    try:
        pid = int(PID_FILE.read_text().strip())
    except (FileNotFoundError, ValueError):
        return None
    if _alive(pid):
        return pid
    PID_FILE.unlink(missing_ok=True)
    return None


def _alive(pid: int) -> bool:
    try:
        os.kill(pid, 0)
    except ProcessLookupError:
        return False
    except PermissionError:
        # exists but owned by someone else
        return True
    return True


def _port_in_use(host: str, port: int) -> bool:
    probe_host = "127.0.0.1" if host in ("0.0.0.0", "") else host
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.settimeout(0.5)
        return s.connect_ex((probe_host, port)) == 0


def _wait_for_exit(pid: int, timeout: float = STOP_TIMEOUT) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if not _alive(pid):
            return True
        time.sleep(0.1)
    return False


def cmd_start(args: argparse.Namespace) -> None:
    """Start uvicorn in the background and record its PID."""
    pid = _server_pid()
    if pid is not None:
        print(f"Server already running (PID {pid}). Use 'stop' first.")
        sys.exit(1)
    if _port_in_use(args.host, args.port):
        print(f"Error: port {args.port} is already in use.")
        sys.exit(1)

    command = [
        sys.executable, "-m", "uvicorn", "src.api.main:app",
        "--host", args.host,
        "--port", str(args.port),
    ]
    if args.reload:
        command.append("--reload")

    proc = subprocess.Popen(command, cwd=ROOT_DIR, start_new_session=True)
    PID_FILE.write_text(str(proc.pid))
    print(f"Server started on {args.host}:{args.port} (PID {proc.pid}).")
    print(f"  Health:   http://{args.host}:{args.port}/api/health")
    print(f"  PID file: {PID_FILE}")


def cmd_stop(args: argparse.Namespace) -> None:
    """Send SIGTERM to the recorded server and wait for it to exit."""
    pid = _server_pid()
    if pid is None:
        print("Server is not running.")
        return

    print(f"Stopping server (PID {pid})...")
    os.kill(pid, signal.SIGTERM)
    if not _wait_for_exit(pid):
        print(f"Server did not exit within {STOP_TIMEOUT:.0f}s; sending SIGKILL.")
        os.kill(pid, signal.SIGKILL)
        _wait_for_exit(pid)

    PID_FILE.unlink(missing_ok=True)
    print("Server stopped.")


def cmd_status(args: argparse.Namespace) -> None:
    """Report whether the server is running and the database state."""
    from src.infrastructure.storage.sqlite.migrations import get_migration_status

    pid = _server_pid()
    if pid is not None:
        print(f"Server is running (PID {pid}).")
    elif _port_in_use("127.0.0.1", args.port):
        print(f"No PID file, but something is listening on port {args.port}.")
    else:
        print("Server is not running.")

    status = asyncio.run(get_migration_status())
    if not status["exists"]:
        print("Database: not created yet (run 'migrate').")
        return
    print(
        f"Database: {len(status['applied_migrations'])} migration(s) applied, "
        f"{len(status['pending_migrations'])} pending."
    )
    if status["missing_tables"]:
        print(f"  missing tables: {', '.join(status['missing_tables'])}")


def cmd_migrate(args: argparse.Namespace) -> None:
    """Apply pending migrations."""
    from src.core.exceptions import FakturaError
    from src.infrastructure.storage.sqlite.migrations import initialize_database

    try:
        results = asyncio.run(initialize_database(create_backup_before=not args.no_backup))
    except FakturaError as e:
        print(f"Error: {e.message}")
        sys.exit(1)
    for result in results:
        print(f"Applied v{result.version}_{result.name} ({result.execution_time_ms} ms)")
    print("Database is up to date.")


def cmd_next_number(args: argparse.Namespace) -> None:
    """Print the number the tenant's next invoice would get."""
    from src.application.use_cases import NextInvoiceNumberUseCase
    from src.infrastructure.storage.sqlite import close_pool

    async def run() -> None:
        try:
            result = await NextInvoiceNumberUseCase().execute(args.tenant, args.year)
        finally:
            await close_pool()
        print(result.invoice_number)
        for number in result.skipped:
            print(f"  skipped malformed number: {number}", file=sys.stderr)

    asyncio.run(run())


def main() -> None:
    from src.config import get_settings

    api = get_settings().api
    parser = argparse.ArgumentParser(
        description="Faktura management CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    sub = parser.add_subparsers(dest="command", required=True)

    # start
    p_start = sub.add_parser("start", help="Start the server")
    p_start.add_argument("--host", default=api.host, help="Bind host (default: API_HOST)")
    p_start.add_argument("--port", type=int, default=api.port, help="Bind port (default: API_PORT)")
    p_start.add_argument("--reload", action="store_true", help="Reload on code changes")
    p_start.set_defaults(func=cmd_start)

    # stop
    p_stop = sub.add_parser("stop", help="Stop the server")
    p_stop.set_defaults(func=cmd_stop)

    # status
    p_status = sub.add_parser("status", help="Check server and database state")
    p_status.add_argument("--port", type=int, default=api.port, help="Port to probe (default: API_PORT)")
    p_status.set_defaults(func=cmd_status)

    # migrate
    p_migrate = sub.add_parser("migrate", help="Apply pending database migrations")
    p_migrate.add_argument("--no-backup", action="store_true", help="Skip the pre-migration backup")
    p_migrate.set_defaults(func=cmd_migrate)

    # next-number
    p_next = sub.add_parser("next-number", help="Show the next invoice number for a tenant")
    p_next.add_argument("--tenant", required=True, help="Tenant ID")
    p_next.add_argument("--year", type=int, default=None, help="Year (default: current year)")
    p_next.set_defaults(func=cmd_next_number)

    args = parser.parse_args()
    args.func(args)


if __name__ == "__main__":
    main()
