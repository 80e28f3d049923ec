"""CLI: peerchat chat, peerchat send, peerchat history"""

import asyncio
import json
from typing import Optional

import click
from rich.console import Console

from peerchat.models.message import Message
from peerchat.models.user import User
from peerchat.session import ChatSession

console = Console()


def _get_client():
    from peerchat.cli.main import _get_client
    return _get_client()


def _run(coro):
    from peerchat.cli.main import _run
    return _run(coro)


def _find_peer(session: ChatSession, peer: str) -> User:
    for u in session.users:
        if peer in (u.id, u.username, u.email):
            return u
    raise click.ClickException(f"No such user: {peer}")


def _render(message: Message, session: ChatSession, peer: User) -> None:
    mine = message.sender == session.local_user.id
    who = "[cyan]You[/cyan]" if mine else f"[green]{peer.username}[/green]"
    line = f"{who} [dim]{message.time_label()}[/dim]"
    if message.content:
        line += f"  {message.content}"
    if message.file_url:
        line += f"  [blue][file] {message.file_url}[/blue]"
    console.print(line)


async def _open(client, peer: str):
    session = await client.open_session()
    await session.load_roster()
    target = _find_peer(session, peer)
    with console.status(f"Loading conversation with {target.username}..."):
        await session.select_peer(target.id)
    return session, target


@click.command("history")
@click.argument("peer")
@click.option("--json-output", "--json", is_flag=True)
def history_cmd(peer: str, json_output: bool):
    """Print the conversation with PEER (id, username or email)."""
    client = _get_client()

    async def _history():
        async with client:
            session, target = await _open(client, peer)
            for message in session.view():
                if json_output:
                    click.echo(json.dumps(message.to_wire()))
                else:
                    _render(message, session, target)

    _run(_history())


@click.command("send")
@click.argument("peer")
@click.argument("text", required=False, default="")
@click.option("-f", "--file", "file_path", type=click.Path(exists=True, dir_okay=False), default=None)
def send_cmd(peer: str, text: str, file_path: Optional[str]):
    """Send a one-shot message to PEER."""
    if not text and not file_path:
        console.print("[yellow]Nothing to send.[/yellow]")
        return
    client = _get_client()

    async def _send():
        async with client:
            session, target = await _open(client, peer)
            with console.status("Sending..."):
                message = await session.submit(text, file_path)
                # let the fire-and-forget push leave before disconnecting
                await asyncio.sleep(0.5)
            if message is not None:
                _render(message, session, target)

    _run(_send())


@click.command("chat")
@click.argument("peer")
def chat_cmd(peer: str):
    """Interactive chat with PEER. `/file PATH` attaches a file, `/quit` exits."""
    client = _get_client()

    async def _chat():
        async with client:
            session, target = await _open(client, peer)
            status = "[green]online[/green]" if session.is_online(target.id) else "[dim]offline[/dim]"
            console.print(f"[bold]{target.username}[/bold] ({status})")
            for message in session.view():
                _render(message, session, target)

            def on_message(message: Message) -> None:
                if message.belongs_to(session.local_user.id, target.id):
                    _render(message, session, target)

            remove = session.connection.on_inbound_message(on_message)
            console.print("[cyan]Type your message (/quit to exit)[/cyan]\n")
            try:
                while True:
                    line = await asyncio.to_thread(click.prompt, "You", default="", show_default=False, prompt_suffix=": ")
                    if line.lower() in ("/quit", "/exit"):
                        break
                    if line.startswith("/file "):
                        session.pipeline.stage(attachment=line[len("/file "):].strip())
                        console.print(f"[dim]Attached {session.pipeline.pending_attachment.name}; type a caption or press enter[/dim]")
                        continue
                    message = await session.submit(line)
                    if message is not None and message.has_attachment:
                        _render(message, session, target)
            except (EOFError, click.Abort):
                pass
            finally:
                remove()

    try:
        _run(_chat())
    except KeyboardInterrupt:
        pass
