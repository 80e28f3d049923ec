"""CLI: peerchat users"""

import asyncio
import json

import click
from rich.console import Console
from rich.table import Table

console = Console()


def _get_client():
    from peerchat.cli.main import _get_client
    return _get_client()


def _run(coro):
    from peerchat.cli.main import _run
    return _run(coro)


@click.command("users")
@click.option("--json-output", "--json", is_flag=True)
def users_cmd(json_output: bool):
    """List peers and who is online."""
    client = _get_client()

    async def _users():
        async with client:
            session = await client.open_session()
            users = await session.load_roster()
            # online-users is pushed right after user-online; give it a moment
            await asyncio.sleep(1.0)
            if json_output:
                click.echo(json.dumps([
                    {**u.model_dump(by_alias=True), "online": session.is_online(u.id)} for u in users
                ], indent=2))
                return
            table = Table(title=f"Users ({len(users)})")
            table.add_column("", width=1)
            table.add_column("ID", style="bold")
            table.add_column("Username")
            table.add_column("Email")
            for u in users:
                dot = "[green]●[/green]" if session.is_online(u.id) else "[dim]○[/dim]"
                table.add_row(dot, u.id, u.username, u.email)
            console.print(table)

    _run(_users())
