# unlocker/client/relay.py
"""
Despacho de mensajes {"action": ..., ...} hacia CommentsClient, igual que
el listener del service worker. El estado (las sesiones) vive en un
ClientContext que el llamador crea una vez y pasa en cada mensaje.
Siempre devuelve algo serializable; los errores vuelven como
{"error": "..."}.
"""
from __future__ import annotations

import logging
from typing import Any, Callable

import requests

from unlocker.client.api import ApiError, CommentsClient
from unlocker.client.storage import ClientContext

log = logging.getLogger(__name__)

ACTION_FAILED_MSG = "Action failed. Please try again."


def make_client(context: ClientContext, incognito: bool) -> CommentsClient:
    return CommentsClient(context.storage(incognito))


ACTIONS: dict[str, Callable[[CommentsClient, dict], Any]] = {
    "checkUsername": lambda c, r: c.check_username(r["username"]),
    "registerUser": lambda c, r: c.register(
        r["username"], r["password"], r["firstName"], r["lastName"], r.get("email")
    ),
    "loginUser": lambda c, r: c.login(r["username"], r["password"]),
    "logoutUser": lambda c, r: c.logout(),
    "getCurrentUser": lambda c, r: c.current_user(),
    "deleteAccount": lambda c, r: c.delete_account(),
    "getComments": lambda c, r: c.get_comments(r["videoId"], r.get("sortBy") or "newest"),
    "addComment": lambda c, r: c.add_comment(r["videoId"], r["content"]),
    "addReply": lambda c, r: c.add_reply(r["commentId"], r["content"]),
    "editComment": lambda c, r: c.edit_comment(r["commentId"], r["content"]),
    "deleteComment": lambda c, r: c.delete_comment(r["commentId"]),
    "voteComment": lambda c, r: c.vote_comment(r["commentId"], r["voteType"]),
    "getUserComments": lambda c, r: c.get_user_comments(),
    "checkHealth": lambda c, r: c.check_health(),
}


def handle_message(
    request: dict,
    context: ClientContext,
    client: CommentsClient | None = None,
) -> Any:
    action = request.get("action")
    handler = ACTIONS.get(action)
    if handler is None:
        return {"error": f"Unknown action: {action}"}

    if client is None:
        client = make_client(context, bool(request.get("isIncognito", False)))

    try:
        return handler(client, request)
    except ApiError as e:
        return {"error": e.message}
    except KeyError as e:
        return {"error": f"Missing field: {e.args[0]}"}
    except requests.RequestException as e:
        log.warning("%s: error de red %r", action, e)
        return {"error": ACTION_FAILED_MSG}
