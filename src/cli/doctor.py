"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio

import httpx
import typer
from rich.table import Table

from adapters.http_client import build_async_client
from cli import runtime
from cli.providers import CONSOLE
from core.config import AppSettings, get_user_env_file, write_user_env_vars
from core.context import SETTINGS
from core.domain.theme import ThemeMode

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")


async def _check_http(settings: AppSettings, url: str) -> tuple[bool, str]:
    try:
        async with build_async_client(settings, transport=runtime.build_transport()) as client:
            response = await client.get(url)
        # Cualquier respuesta HTTP (incluido 404) prueba que el backend escucha.
        return True, f"HTTP {response.status_code}"
    except httpx.HTTPError as exc:
        return False, str(exc) or exc.__class__.__name__


@app.command()
def run() -> None:
    """Run baseline diagnostics and show recommended fixes."""

    settings = SETTINGS.get()
    console = CONSOLE.get()

    table = Table(title="TeamFlow Doctor")
    table.add_column("Check", style="success", no_wrap=True)
    table.add_column("Status")
    table.add_column("Details", style="muted")

    # Config
    table.add_row("API base", "OK", settings.resolved_api_base)
    env_file = get_user_env_file()
    table.add_row("User config", "OK" if env_file.exists() else "OPTIONAL", str(env_file))
    table.add_row("Theme", "OK", settings.theme.label())

    # Connectivity (best-effort)
    ok_http, detail_http = asyncio.run(_check_http(settings, settings.resolved_api_base))
    table.add_row("Backend connectivity", "OK" if ok_http else "FAIL", detail_http)

    # Session
    session = runtime.session_store()
    user = session.get_user()
    if session.get_token():
        table.add_row("Session", "OK", user.full_name if user else "token stored")
    else:
        table.add_row("Session", "MISSING", "Run `teamflow login`")

    console.print(table)

    if not ok_http:
        console.print(
            "\n[warning]Note:[/warning] Set TEAMFLOW_API_URL (or run `teamflow doctor setup`) "
            "to point at the backend."
        )


@app.command(name="setup")
def setup() -> None:
    """Interactive setup (stores config in the user config .env)."""

    settings = SETTINGS.get()
    console = CONSOLE.get()

    api_url = typer.prompt("Backend URL", default=settings.resolved_api_url, show_default=True).strip()
    api_prefix = typer.prompt("API prefix", default=settings.api_prefix, show_default=True).strip()
    dark = typer.confirm("Dark terminal theme?", default=settings.theme is ThemeMode.DARK)

    if not api_url.startswith(("http://", "https://")):
        raise typer.BadParameter("Backend URL must start with http:// or https://")

    env_path = write_user_env_vars(
        {
            "TEAMFLOW_API_URL": api_url.rstrip("/"),
            "TEAMFLOW_API_PREFIX": api_prefix,
            "TEAMFLOW_THEME": ThemeMode.from_bool(dark).value,
        }
    )

    console.print(f"[success]Saved config to:[/success] {env_path}")
