"""Seed the database with two demo teams and a few days of standups.

Usage:
    python -m scripts.seed
"""

import asyncio
import sys
from datetime import timedelta

from rich.console import Console
from rich.table import Table

from standupsync.days import utc_now, utc_today
from standupsync.db.base import Base
from standupsync.db.engine import get_engine, get_session_factory
from standupsync.db.models.standup import StandupORM
from standupsync.db.models.user import UserORM
from standupsync.services.user_service import UserService
from standupsync.settings import load_settings

console = Console(force_terminal=True)

ADMIN = {"email": "admin@standupsync.com", "password": "Admin123!", "name": "Admin User"}
MEMBERS = [
    {"email": "john@standupsync.com", "password": "Password123!", "name": "John Doe"},
    {"email": "jane@standupsync.com", "password": "Password123!", "name": "Jane Smith"},
    {"email": "bob@standupsync.com", "password": "Password123!", "name": "Bob Johnson"},
]
SECOND_ADMIN = {"email": "alice@standupsync.com", "password": "Admin123!", "name": "Alice Williams"}

# (days ago, yesterday, today, blockers)
SAMPLE_STANDUPS = {
    "admin@standupsync.com": [
        (
            0,
            ["Reviewed pull requests from team members", "Set up CI/CD pipeline improvements"],
            ["Sprint planning meeting", "Update project documentation"],
            [],
        ),
        (
            1,
            ["Implemented new API endpoints", "Fixed critical bug in payment system"],
            ["Review pull requests from team members"],
            ["Waiting for design assets from design team"],
        ),
    ],
    "john@standupsync.com": [
        (
            0,
            ["Completed user authentication feature", "Updated unit tests"],
            ["Start working on password reset feature"],
            [],
        ),
        (
            1,
            ["Worked on authentication module", "Wrote integration tests"],
            ["Complete user authentication feature"],
            [],
        ),
    ],
    "jane@standupsync.com": [
        (
            0,
            ["Designed the weekly report view"],
            ["Implement the weekly report API"],
            ["Need access to production analytics"],
        ),
    ],
    "bob@standupsync.com": [
        (
            2,
            ["Investigated flaky integration tests"],
            ["Stabilize the test suite"],
            [],
        ),
    ],
}


async def seed() -> int:
    settings = load_settings()
    if not settings.database_url:
        console.print("[red]DATABASE_URL is not set[/red]")
        return 1

    engine = await get_engine(settings.database_url)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = get_session_factory(engine)
    created: list[UserORM] = []
    standup_count = 0

    async with session_factory() as session:
        users = UserService(session)
        if await users.get_by_email(ADMIN["email"]) is not None:
            console.print("[yellow]Seed data already present, nothing to do[/yellow]")
            await engine.dispose()
            return 0

        console.print("[bold cyan]Creating users...[/bold cyan]")
        admin = await users.create(**ADMIN)
        created.append(admin)
        for member in MEMBERS:
            created.append(
                await users.create(
                    **member, role="user", team_id=admin.team_id, invited_by=admin.id
                )
            )
        created.append(await users.create(**SECOND_ADMIN))

        console.print("[bold cyan]Creating standups...[/bold cyan]")
        by_email = {user.email: user for user in created}
        today = utc_today()
        for email, entries in SAMPLE_STANDUPS.items():
            user = by_email[email]
            for days_ago, yesterday, plan, blockers in entries:
                session.add(
                    StandupORM(
                        user_id=user.id,
                        team_id=user.team_id,
                        date=today - timedelta(days=days_ago),
                        yesterday_work=yesterday,
                        today_plan=plan,
                        blockers=blockers,
                        submitted_at=utc_now(),
                        updated_at=utc_now(),
                    )
                )
                standup_count += 1
        await session.commit()

    await engine.dispose()

    table = Table(title="Seeded users")
    table.add_column("Email")
    table.add_column("Name")
    table.add_column("Role")
    table.add_column("Team")
    for user in created:
        table.add_row(user.email, user.name, user.role.value, str(user.team_id)[:8])
    console.print(table)
    console.print(f"[bold green]OK[/bold green] {len(created)} users, {standup_count} standups")
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(seed()))
