"""PageVault CLI — run the server and manage your pages from a terminal.

Usage:
    pagevault serve                              # Run the API under uvicorn
    pagevault register alice@example.com         # Create an account (prompts for password)
    pagevault login alice@example.com            # Log in and store the access token
    pagevault whoami                             # Show who the stored token belongs to
    pagevault pages list                         # List your pages
    pagevault pages show 3                       # Print one page
    pagevault pages create "Hi" -c "<p>hello</p>"
    pagevault pages edit 3 --title "Hello"       # Change title and/or content
    pagevault pages delete 3
    pagevault logout                             # Forget the stored token
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import json
import os
import sys
from pathlib import Path
from typing import Optional

import click
import httpx

from pagevault import __version__

# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------

DEFAULT_API_URL = "http://localhost:3001"
DEFAULT_TOKEN_FILE = "~/.config/pagevault/token"


def _api_url() -> str:
    return os.environ.get("PAGEVAULT_API_URL", DEFAULT_API_URL).rstrip("/")


def _token_path() -> Path:
    return Path(os.environ.get("PAGEVAULT_TOKEN_FILE", DEFAULT_TOKEN_FILE)).expanduser()


def _client() -> httpx.AsyncClient:
    """Build an async HTTP client pointed at the PageVault API."""
    return httpx.AsyncClient(base_url=_api_url(), timeout=30.0)


# ---------------------------------------------------------------------------
# Token storage
# ---------------------------------------------------------------------------


def load_token() -> Optional[str]:
    path = _token_path()
    if not path.exists():
        return None
    token = path.read_text().strip()
    return token or None


def save_token(token: str) -> None:
    path = _token_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(token)
    path.chmod(0o600)


def clear_token() -> bool:
    """Delete the stored token. Returns True if there was one."""
    path = _token_path()
    if path.exists():
        path.unlink()
        return True
    return False


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _run(coro):
    """Run an async coroutine from synchronous Click handler.

    Handles nested event loops (e.g. when invoked via Click CliRunner
    inside an existing async context like tests) by offloading to a thread.
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(coro)
    else:
        with concurrent.futures.ThreadPoolExecutor(max_workers=1) as pool:
            return pool.submit(asyncio.run, coro).result()


def _fail(message: str):
    click.secho(f"Error: {message}", fg="red", err=True)
    sys.exit(1)


def _auth_headers() -> dict[str, str]:
    token = load_token()
    if not token:
        _fail("Not logged in. Run: pagevault login <email>")
    return {"Authorization": f"Bearer {token}"}


def _check(r: httpx.Response, authenticated: bool = False) -> httpx.Response:
    """Exit with the server's message on any error response.

    authenticated: the request carried the stored token. A 401/403 on such
    a request means the token is no longer accepted, so it is dropped and
    the next command asks for a fresh login. Login and register failures
    leave the stored token alone.
    """
    if r.is_success:
        return r
    try:
        message = r.json().get("message", r.text)
    except ValueError:
        message = r.text or r.reason_phrase
    if authenticated and r.status_code in (401, 403) and clear_token():
        message = "Your session has expired. Please log in again."
    _fail(f"{message} (HTTP {r.status_code})")


def _print_table(rows: list[dict], columns: list[tuple[str, str, int]]):
    """Print a simple ASCII table.

    columns: list of (header, dict_key, width)
    """
    header = "  ".join(h.ljust(w) for h, _, w in columns)
    click.secho(header, bold=True)
    click.echo("-" * len(header))
    for row in rows:
        line = "  ".join(str(row.get(k, "—"))[:w].ljust(w) for _, k, w in columns)
        click.echo(line)


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(version=__version__, prog_name="pagevault")
def main():
    """PageVault — private pages behind a login."""


@main.command()
@click.option("--host", default=None, help="Bind address (default: PAGEVAULT_HOST)")
@click.option("--port", type=int, default=None, help="Port (default: PAGEVAULT_PORT)")
@click.option("--reload", is_flag=True, help="Restart on code changes (development)")
def serve(host: Optional[str], port: Optional[int], reload: bool):
    """Run the API server."""
    import uvicorn

    from pagevault.config import get_settings

    settings = get_settings()
    uvicorn.run(
        "pagevault.main:app",
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
    )


# ---------------------------------------------------------------------------
# Accounts
# ---------------------------------------------------------------------------


@main.command()
@click.argument("email")
@click.password_option()
def register(email: str, password: str):
    """Create an account for EMAIL."""
    _run(_register_impl(email, password))


async def _register_impl(email: str, password: str):
    async with _client() as c:
        r = _check(await c.post("/api/register", json={"email": email, "password": password}))
        body = r.json()
        click.secho(f"{body['message']} (user #{body['userId']})", fg="green")


@main.command()
@click.argument("email")
@click.option("--password", prompt=True, hide_input=True)
def login(email: str, password: str):
    """Log in as EMAIL and store the access token."""
    _run(_login_impl(email, password))


async def _login_impl(email: str, password: str):
    async with _client() as c:
        r = _check(await c.post("/api/login", json={"email": email, "password": password}))
        save_token(r.json()["accessToken"])
        click.secho(f"Logged in as {email}", fg="green")


@main.command()
def logout():
    """Forget the stored access token."""
    if clear_token():
        click.echo("Logged out.")
    else:
        click.echo("Not logged in.")


@main.command()
def whoami():
    """Show the identity of the stored token."""
    _run(_whoami_impl())


async def _whoami_impl():
    headers = _auth_headers()
    async with _client() as c:
        r = _check(await c.get("/api/me", headers=headers), authenticated=True)
        me = r.json()
        click.echo(f"{me['email']} (user #{me['id']})")


# ---------------------------------------------------------------------------
# Pages
# ---------------------------------------------------------------------------


@main.group()
def pages():
    """List, show, create, edit and delete your pages."""


@pages.command("list")
@click.option("--json", "as_json", is_flag=True, help="Print raw JSON")
def list_pages(as_json: bool):
    """List your pages."""
    _run(_list_impl(as_json))


async def _list_impl(as_json: bool):
    headers = _auth_headers()
    async with _client() as c:
        r = _check(await c.get("/api/pages", headers=headers), authenticated=True)
        rows = r.json()

    if as_json:
        click.echo(json.dumps(rows, indent=2))
        return
    if not rows:
        click.echo("No pages yet.")
        return
    _print_table(rows, [("ID", "id", 6), ("Title", "title", 60)])


@pages.command("show")
@click.argument("page_id", type=int)
def show_page(page_id: int):
    """Print the title and content of a page."""
    _run(_show_impl(page_id))


async def _show_impl(page_id: int):
    headers = _auth_headers()
    async with _client() as c:
        r = _check(await c.get(f"/api/pages/{page_id}", headers=headers), authenticated=True)
        page = r.json()
    click.secho(page["title"], bold=True)
    click.echo(page["content"])


@pages.command("create")
@click.argument("title")
@click.option("--content", "-c", default="", help="Page content")
@click.option("--file", "-f", "content_file", type=click.File("r"), help="Read content from a file")
def create_page(title: str, content: str, content_file):
    """Create a page titled TITLE."""
    if content_file is not None:
        content = content_file.read()
    _run(_create_impl(title, content))


async def _create_impl(title: str, content: str):
    headers = _auth_headers()
    async with _client() as c:
        r = _check(await c.post(
            "/api/pages", json={"title": title, "content": content}, headers=headers,
        ), authenticated=True)
        page = r.json()
        click.secho(f"Created page #{page['id']}: {page['title']}", fg="green")


@pages.command("edit")
@click.argument("page_id", type=int)
@click.option("--title", "-t", help="New title")
@click.option("--content", "-c", help="New content")
@click.option("--file", "-f", "content_file", type=click.File("r"), help="Read content from a file")
def edit_page(page_id: int, title: Optional[str], content: Optional[str], content_file):
    """Change the title and/or content of a page."""
    if content_file is not None:
        content = content_file.read()
    if title is None and content is None:
        _fail("Nothing to change. Pass --title, --content or --file.")
    _run(_edit_impl(page_id, title, content))


async def _edit_impl(page_id: int, title: Optional[str], content: Optional[str]):
    headers = _auth_headers()
    async with _client() as c:
        # PUT replaces both fields, so fill in whatever was not given
        if title is None or content is None:
            r = await c.get(f"/api/pages/{page_id}", headers=headers)
            current = _check(r, authenticated=True).json()
            title = current["title"] if title is None else title
            content = current["content"] if content is None else content

        r = _check(await c.put(
            f"/api/pages/{page_id}",
            json={"title": title, "content": content},
            headers=headers,
        ), authenticated=True)
        click.secho(r.json()["message"], fg="green")


@pages.command("delete")
@click.argument("page_id", type=int)
@click.confirmation_option(prompt="Delete this page?")
def delete_page(page_id: int):
    """Delete a page."""
    _run(_delete_impl(page_id))


async def _delete_impl(page_id: int):
    headers = _auth_headers()
    async with _client() as c:
        _check(await c.delete(f"/api/pages/{page_id}", headers=headers), authenticated=True)
        click.secho(f"Deleted page #{page_id}", fg="green")
