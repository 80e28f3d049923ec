"""CLI: peerchat auth login|register|status|logout|photo"""

from typing import Optional

import click
from rich.console import Console

from peerchat.client import AsyncPeerChat
from peerchat.models.user import AuthState

console = Console()


def _load_config() -> dict:
    from peerchat.cli.main import _load_config
    return _load_config()


def _save_config(cfg: dict) -> None:
    from peerchat.cli.main import _save_config
    _save_config(cfg)


def _base_url(cfg: dict, override: Optional[str] = None) -> str:
    from peerchat.cli.main import _base_url
    return _base_url(cfg, override)


def _get_client():
    from peerchat.cli.main import _get_client
    return _get_client()


def _run(coro):
    from peerchat.cli.main import _run
    return _run(coro)


def _remember(cfg: dict, state: AuthState, url: str) -> None:
    _save_config({**cfg, "token": state.token, "user": state.user.model_dump(by_alias=True), "base_url": url})


@click.group()
def auth():
    """Authentication commands."""


@auth.command("login")
@click.option("--base-url", default=None, help="Chat backend base URL")
def auth_login(base_url: Optional[str]):
    """Log in with email and password."""

    async def _login():
        cfg = _load_config()
        url = _base_url(cfg, base_url)
        email = click.prompt("Email")
        password = click.prompt("Password", hide_input=True)
        async with AsyncPeerChat(base_url=url) as client:
            with console.status("Logging in..."):
                state = await client.login(email, password)
        console.print(f"[green]Login successful: {state.user.username} (ID: {state.user.id})[/green]")
        _remember(cfg, state, url)
        console.print("[dim]Token saved to ~/.peerchat/config.json[/dim]")

    _run(_login())


@auth.command("register")
@click.option("--base-url", default=None, help="Chat backend base URL")
@click.option("--photo", type=click.Path(exists=True, dir_okay=False), default=None, help="Profile photo")
def auth_register(base_url: Optional[str], photo: Optional[str]):
    """Create an account."""

    async def _register():
        cfg = _load_config()
        url = _base_url(cfg, base_url)
        username = click.prompt("Username")
        email = click.prompt("Email")
        password = click.prompt("Password", hide_input=True, confirmation_prompt=True)
        async with AsyncPeerChat(base_url=url) as client:
            with console.status("Registering..."):
                state = await client.register(username, email, password, photo=photo)
        console.print(f"[green]Registration successful: {state.user.username} (ID: {state.user.id})[/green]")
        _remember(cfg, state, url)

    _run(_register())


@auth.command("photo")
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
def auth_photo(path: str):
    """Replace your profile photo."""
    cfg = _load_config()
    client = _get_client()

    async def _photo():
        async with client:
            with console.status("Uploading..."):
                state = await client.update_profile_photo(path)
        _remember(cfg, state, _base_url(cfg))
        console.print(f"[green]Profile photo updated![/green] [dim]{state.user.profile_photo or ''}[/dim]")

    _run(_photo())


@auth.command("status")
def auth_status():
    """Show current auth status."""
    cfg = _load_config()
    if cfg.get("token"):
        user = cfg.get("user") or {}
        console.print(f"[green]Logged in[/green] as {user.get('username', 'unknown')} (ID: {user.get('_id')})")
    else:
        console.print("[yellow]Not logged in. Run `peerchat auth login`.[/yellow]")


@auth.command("logout")
def auth_logout():
    """Clear saved credentials."""
    _save_config({})
    console.print("[green]Logged out.[/green]")
