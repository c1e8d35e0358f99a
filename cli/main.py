#!/usr/bin/env python3
"""
Kharcha CLI - Main Entry Point

Usage:
    kharcha serve                   # Run the web app with uvicorn
    kharcha init-db                 # Create database tables
    kharcha reminders run           # Generate tomorrow's reminders now
    kharcha reminders schedule      # Show the periodic task schedule
    kharcha make-admin EMAIL        # Allow a user to trigger reminders from the API
"""

import argparse
import asyncio
import sys
from datetime import datetime, timedelta

from rich.console import Console
from rich.table import Table


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser for CLI"""
    parser = argparse.ArgumentParser(
        prog="kharcha",
        description="Kharcha - personal finance tracker",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  kharcha serve --reload                  Start a development server
  kharcha reminders run                   Create reminders for tomorrow's renewals and dues
  kharcha reminders run --for 2026-01-15  Create reminders for a given day

Background jobs:
  celery -A kharcha.core.celery_app worker --beat    Run the daily reminder schedule
""",
    )
    subparsers = parser.add_subparsers(dest="command")

    serve_parser = subparsers.add_parser("serve", help="Run the web server")
    serve_parser.add_argument("--host", default=None, help="Bind address (default: SERVER_HOST)")
    serve_parser.add_argument("--port", type=int, default=None, help="Port (default: SERVER_PORT)")
    serve_parser.add_argument("--reload", action="store_true", help="Reload on code changes")

    subparsers.add_parser("init-db", help="Create database tables")

    reminders_parser = subparsers.add_parser("reminders", help="Reminder notifications")
    reminders_sub = reminders_parser.add_subparsers(dest="reminders_command")
    run_parser = reminders_sub.add_parser("run", help="Generate reminders now")
    run_parser.add_argument(
        "--for",
        dest="for_date",
        default=None,
        help="Day whose renewals and dues to remind about, YYYY-MM-DD (default: tomorrow)",
    )
    reminders_sub.add_parser("schedule", help="Show the periodic task schedule")

    admin_parser = subparsers.add_parser("make-admin", help="Grant admin rights to a user")
    admin_parser.add_argument("email", help="Email address of an existing user")

    return parser


async def _run_reminders(now: datetime) -> int:
    from kharcha.core.database import AsyncSessionLocal, close_db
    from kharcha.services.reminder_service import generate_reminders

    try:
        async with AsyncSessionLocal() as session:
            created = await generate_reminders(session, now=now)
            await session.commit()
            return created
    finally:
        await close_db()


async def _make_admin(email: str) -> bool:
    from kharcha.core.database import AsyncSessionLocal, close_db
    from kharcha.services.user_service import user_service

    try:
        async with AsyncSessionLocal() as session:
            user = await user_service.get_by_email(session, email)
            if user is None:
                return False
            user.is_admin = True
            await session.commit()
            return True
    finally:
        await close_db()


async def _init_db() -> None:
    from kharcha.core.database import init_db, close_db

    try:
        await init_db()
    finally:
        await close_db()


def show_schedule(console: Console) -> None:
    from kharcha.core.celery_app import celery_app

    table = Table(title="Periodic tasks (UTC)")
    table.add_column("Name", style="cyan")
    table.add_column("Task")
    table.add_column("Schedule")
    table.add_column("Args")

    for name, entry in celery_app.conf.beat_schedule.items():
        table.add_row(name, entry["task"], str(entry["schedule"]), repr(tuple(entry.get("args", ()))))

    console.print(table)


def main():
    """Main entry point"""
    parser = create_parser()
    args = parser.parse_args()
    console = Console()

    if args.command == "serve":
        import uvicorn
        from kharcha.core.config import settings

        uvicorn.run(
            "kharcha.main:app",
            host=args.host or settings.SERVER_HOST,
            port=args.port or settings.SERVER_PORT,
            reload=args.reload,
        )

    elif args.command == "init-db":
        asyncio.run(_init_db())
        console.print("[green]✓ Database tables created[/green]")

    elif args.command == "reminders" and args.reminders_command == "run":
        if args.for_date:
            try:
                target = datetime.strptime(args.for_date, "%Y-%m-%d")
            except ValueError:
                console.print(f"[red]✗ Invalid date '{args.for_date}', expected YYYY-MM-DD[/red]")
                sys.exit(2)
            now = target - timedelta(days=1)
        else:
            from kharcha.utils.dates import utcnow
            now = utcnow()

        created = asyncio.run(_run_reminders(now))
        console.print(f"[green]✓ Created {created} reminder notification(s)[/green]")

    elif args.command == "reminders" and args.reminders_command == "schedule":
        show_schedule(console)

    elif args.command == "make-admin":
        if asyncio.run(_make_admin(args.email)):
            console.print(f"[green]✓ {args.email} is now an admin[/green]")
        else:
            console.print(f"[red]✗ No user with email {args.email}[/red]")
            sys.exit(1)

    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
