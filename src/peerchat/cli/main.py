"""
peerchat CLI: `peerchat` command.

Commands:
  peerchat auth login|register|status|logout|photo
  peerchat users                 Roster with presence
  peerchat history <peer>        Print a conversation
  peerchat send <peer> [text]    One-shot message (--file for attachments)
  peerchat chat <peer>           Interactive REPL chat
"""

import asyncio
import json
import logging
import os
from pathlib import Path
from typing import Optional

try:
    import click
    from rich.console import Console
except ImportError:
    raise SystemExit("CLI requires extras: pip install peerchat[cli]")

from peerchat.client import AsyncPeerChat
from peerchat.models.state import Notice
from peerchat.models.user import AuthState
from peerchat.transport.http import DEFAULT_BASE_URL

console = Console()
CONFIG_FILE = Path.home() / ".peerchat" / "config.json"

NOTICE_STYLES = {"error": "red", "success": "green", "info": "cyan"}


def _load_config() -> dict:
    try:
        return json.loads(CONFIG_FILE.read_text())
    except (FileNotFoundError, json.JSONDecodeError):
        return {}


def _save_config(cfg: dict) -> None:
    CONFIG_FILE.parent.mkdir(parents=True, exist_ok=True)
    CONFIG_FILE.write_text(json.dumps(cfg, indent=2))


def _base_url(cfg: dict, override: Optional[str] = None) -> str:
    return override or os.environ.get("PEERCHAT_BASE_URL") or cfg.get("base_url", DEFAULT_BASE_URL)


def _print_notice(notice: Notice) -> None:
    style = NOTICE_STYLES.get(notice.level, "white")
    console.print(f"[{style}]{notice.text}[/{style}]")


def _get_client() -> AsyncPeerChat:
    cfg = _load_config()
    if not cfg.get("token") or not cfg.get("user"):
        console.print("[red]Not logged in. Run `peerchat auth login` first.[/red]")
        raise SystemExit(1)
    return AsyncPeerChat(
        base_url=_base_url(cfg),
        auth_state=AuthState.model_validate({"token": cfg["token"], "user": cfg["user"]}),
        notify=_print_notice,
    )


def _run(coro):
    return asyncio.run(coro)


@click.group()
@click.version_option("0.1.0")
@click.option("-v", "--verbose", is_flag=True, help="Log transport activity")
def main(verbose: bool):
    """peerchat CLI: two-party real-time chat."""
    if verbose:
        logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")


# Register subcommands from separate modules
from peerchat.cli.auth import auth
from peerchat.cli.chat import chat_cmd, history_cmd, send_cmd
from peerchat.cli.users import users_cmd

main.add_command(auth)
main.add_command(chat_cmd)
main.add_command(send_cmd)
main.add_command(history_cmd)
main.add_command(users_cmd)


if __name__ == "__main__":
    main()
