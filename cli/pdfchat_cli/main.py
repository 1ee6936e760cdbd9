from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any, Awaitable, Callable, List, Optional, Tuple

import typer
from rich import print

from pdfchat_client.client import ChatBotClient
from pdfchat_client.config import Settings
from pdfchat_client.credentials import TOKEN_KEY, USER_ID_KEY, FileCredentialStore
from pdfchat_client.errors import ApiError
from pdfchat_client.models import (
    ChatsParams,
    GetConversationListParams,
    LoginParams,
    SetPasswordParams,
    SignupParams,
    SuccessResult,
    UpdateConversationParams,
    UploadFile,
)
from pdfchat_client.navigation import listen_to_navigation, remove_navigation_listener
from pdfchat_client.pipeline import ApiService

from .config_store import load_config, save_config

app = typer.Typer(add_completion=False, help="PDF chat CLI")

def _store() -> FileCredentialStore:
    return FileCredentialStore(Settings().config_dir)


def _url() -> str:
    return load_config(Settings().config_dir).get("url") or Settings().api_url


def _build_client() -> ChatBotClient:
    s = Settings()
    store = FileCredentialStore(s.config_dir)
    url = load_config(s.config_dir).get("url") or s.api_url
    return ChatBotClient(ApiService(url, store=store, timeout=s.timeout_seconds))


def _on_navigate(path: str) -> None:
    if path == "/":
        print("[yellow]Session expired. Run: pdfchat login --email <email>[/yellow]")


def _run(call: Callable[[ChatBotClient], Awaitable[SuccessResult]]) -> SuccessResult:
    async def _go() -> SuccessResult:
        async with _build_client() as client:
            return await call(client)

    listen_to_navigation(_on_navigate)
    try:
        return asyncio.run(_go())
    except ApiError as e:
        print(f"[red]{e.message_type}:[/red] {e.error_message}")
        raise typer.Exit(code=1)
    finally:
        remove_navigation_listener(_on_navigate)


def _require_login() -> None:
    store = _store()
    if not store.get(TOKEN_KEY) or not store.get(USER_ID_KEY):
        raise typer.BadParameter("Not logged in. Run: pdfchat login --email <email>")


def _session_from(data: Any) -> Tuple[Optional[str], Optional[str]]:
    """Pull (token, user_id) out of a login/signup response body."""
    if not isinstance(data, dict):
        return None, None
    if isinstance(data.get("data"), dict):
        data = data["data"]
    token = data.get("token") or data.get("access_token")
    user_id = data.get("user_id")
    if user_id is None and isinstance(data.get("user"), dict):
        user_id = data["user"].get("id")
    return token, (str(user_id) if user_id is not None else None)


def _save_session(data: Any) -> None:
    token, user_id = _session_from(data)
    if not token or not user_id:
        print("[red]Server response did not include a token and user id[/red]")
        raise typer.Exit(code=1)
    store = _store()
    store.set(TOKEN_KEY, token)
    store.set(USER_ID_KEY, user_id)


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Log requests and failures")):
    level = "DEBUG" if verbose else Settings().log_level
    logging.basicConfig(level=level.upper(), format="%(asctime)s %(levelname)s %(name)s: %(message)s")


@app.command()
def configure(url: Optional[str] = typer.Option(None, help="Backend base URL")):
    """Show or change the backend URL."""
    if url:
        config_dir = Settings().config_dir
        cfg = load_config(config_dir)
        cfg["url"] = url
        save_config(cfg, config_dir)
        print(f"[green]URL set to:[/green] {url}")
        return
    print("Current configuration:")
    print(f"  URL: {_url()}")
    print(f"  Token: {'(set)' if _store().get(TOKEN_KEY) else '(not set)'}")


@app.command()
def login(email: str = typer.Option(...), password: str = typer.Option(..., prompt=True, hide_input=True)):
    res = _run(lambda c: c.login(LoginParams(email=email, password=password)))
    _save_session(res.data)
    print("[green]Logged in[/green]")


@app.command()
def signup(
    name: str = typer.Option(...),
    email: str = typer.Option(...),
    password: str = typer.Option(..., prompt=True, hide_input=True, confirmation_prompt=True),
):
    res = _run(lambda c: c.signup(SignupParams(name=name, email=email, password=password)))
    token, user_id = _session_from(res.data)
    if token and user_id:
        _save_session(res.data)
        print("[green]Signed up and logged in[/green]")
    else:
        print("[green]Signed up.[/green] Run: pdfchat login")


@app.command("set-password")
def set_password(
    token: str = typer.Option(..., help="Short-lived token from the invitation link"),
    password: str = typer.Option(..., prompt=True, hide_input=True, confirmation_prompt=True),
):
    _run(lambda c: c.set_user_password(SetPasswordParams(password=password, short_lived_token=token)))
    print("[green]Password set[/green]")


@app.command()
def logout():
    store = _store()
    store.delete(TOKEN_KEY)
    store.delete(USER_ID_KEY)
    print("[green]Logged out[/green]")


@app.command()
def whoami():
    _require_login()
    user_id = _store().get(USER_ID_KEY)
    res = _run(lambda c: c.get_user_details_by_id(user_id))
    print(res.data)


@app.command()
def conversations(
    page: Optional[int] = typer.Option(None, min=1),
    limit: Optional[int] = typer.Option(None, min=1),
    archived: Optional[bool] = typer.Option(None, "--archived/--active"),
):
    _require_login()
    params = GetConversationListParams(page=page, limit=limit, archived=archived)
    res = _run(lambda c: c.get_conversations(params))
    print(res.data)


@app.command("new-conversation")
def new_conversation():
    _require_login()
    res = _run(lambda c: c.create_new_conversation())
    print(res.data)


@app.command()
def rename(conversation_id: str = typer.Argument(...), name: str = typer.Option(...)):
    _require_login()
    res = _run(lambda c: c.update_conversation(UpdateConversationParams(id=conversation_id, name=name)))
    print(res.data)


@app.command()
def archive(conversation_id: str = typer.Argument(...)):
    _require_login()
    _run(lambda c: c.archive_conversation(conversation_id))
    print(f"[green]Archived[/green] {conversation_id}")


@app.command()
def history(conversation_id: str = typer.Argument(...)):
    _require_login()
    res = _run(lambda c: c.get_chats_by_conversation_id(conversation_id))
    print(res.data)


@app.command()
def ask(question: str = typer.Argument(...), conversation_id: Optional[str] = typer.Option(None, "--conversation")):
    _require_login()
    res = _run(lambda c: c.chats(ChatsParams(question=question, conv_id=conversation_id)))
    print(res.data)


@app.command()
def upload(
    files: List[Path] = typer.Argument(..., exists=True, dir_okay=False, readable=True),
    replace: bool = typer.Option(False, help="Replace the current file instead of adding one"),
):
    _require_login()
    uploads = [UploadFile(filename=p.name, content=p.read_bytes()) for p in files]
    if replace:
        res = _run(lambda c: c.pdf_upload_update_file(uploads))
    else:
        res = _run(lambda c: c.pdf_upload(uploads))
    print(res.data)


@app.command()
def pdfs():
    _require_login()
    res = _run(lambda c: c.pdf_list())
    print(res.data)


@app.command("delete-pdfs")
def delete_pdfs(pdf_ids: List[str] = typer.Argument(...)):
    _require_login()
    res = _run(lambda c: c.pdf_delete(pdf_ids))
    print(res.data)


@app.command()
def status():
    """Check that the backend answers and the stored token is accepted."""
    print(f"  Server URL: {_url()}")
    if not _store().get(TOKEN_KEY):
        print("  Token: [yellow]not configured[/yellow]")
        return
    res = _run(lambda c: c.get_users())
    print("  Token: [green]valid[/green]")
    if isinstance(res.data, list):
        print(f"  Users visible: {len(res.data)}")


if __name__ == "__main__":
    app()
