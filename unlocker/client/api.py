# unlocker/client/api.py
"""
Cliente HTTP del backend (lo que hace el service worker de la extensión).

Regla de reintento: si una llamada autenticada responde 401 con
code=TOKEN_EXPIRED se hace UN refresh y UN reintento. Si el refresh falla
se borra la sesión guardada y se lanza SessionExpiredError. Nada más.
"""
from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

import requests

from unlocker.client.storage import TokenStorage
from unlocker.core.config import settings

log = logging.getLogger(__name__)

SESSION_EXPIRED_MSG = "Session expired. Please login again."


class ApiError(Exception):
    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class NotLoggedInError(ApiError):
    def __init__(self):
        super().__init__("Not logged in")


class SessionExpiredError(ApiError):
    def __init__(self, message: str = SESSION_EXPIRED_MSG):
        super().__init__(message, 401)


def _error_of(resp: requests.Response) -> dict:
    try:
        data = resp.json()
    except ValueError:
        return {}
    return data if isinstance(data, dict) else {}


class CommentsClient:
    def __init__(
        self,
        storage: TokenStorage,
        base_url: str | None = None,
        http: requests.Session | None = None,
        timeout: float | None = None,
    ):
        self.storage = storage
        self.base_url = (base_url or settings.API_BASE_URL).rstrip("/")
        self.http = http or requests.Session()
        self.timeout = timeout or settings.CLIENT_TIMEOUT_S

    # -------------------------
    # sesión guardada
    # -------------------------

    def auth_data(self) -> dict[str, Any]:
        return self.storage.get()

    def store_auth(self, data: dict[str, Any]) -> None:
        self.storage.set(
            {
                "accessToken": data["accessToken"],
                "refreshToken": data["refreshToken"],
                "user": data["user"],
            }
        )

    def clear_auth(self) -> None:
        self.storage.remove()

    def current_user(self) -> dict | None:
        return self.auth_data().get("user")

    def _require_user(self) -> dict:
        user = self.current_user()
        if not user:
            raise NotLoggedInError()
        return user

    # -------------------------
    # HTTP
    # -------------------------

    def _url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    def _request(self, method: str, path: str, **kwargs) -> requests.Response:
        kwargs.setdefault("timeout", self.timeout)
        return self.http.request(method, self._url(path), **kwargs)

    @staticmethod
    def _json_or_raise(resp: requests.Response, default_msg: str) -> Any:
        if not resp.ok:
            err = _error_of(resp)
            raise ApiError(err.get("error") or default_msg, resp.status_code)
        return resp.json()

    def refresh_access_token(self) -> str:
        refresh_token = self.auth_data().get("refreshToken")
        if not refresh_token:
            raise SessionExpiredError("No refresh token available")

        resp = self._request("POST", "/auth/refresh", json={"refreshToken": refresh_token})
        if not resp.ok:
            # refresh inválido o vencido → hay que volver a loguearse
            log.info("refresh rechazado (%s), limpiando sesión", resp.status_code)
            self.clear_auth()
            raise SessionExpiredError()

        data = resp.json()
        update = {"accessToken": data["accessToken"], "user": data["user"]}
        if data.get("refreshToken"):
            update["refreshToken"] = data["refreshToken"]
        self.storage.set(update)
        return data["accessToken"]

    def authenticated_request(self, method: str, path: str, **kwargs) -> requests.Response:
        access_token = self.auth_data().get("accessToken")
        if not access_token:
            raise NotLoggedInError()

        headers = dict(kwargs.pop("headers", None) or {})
        headers["Authorization"] = f"Bearer {access_token}"
        resp = self._request(method, path, headers=headers, **kwargs)

        if resp.status_code == 401 and _error_of(resp).get("code") == "TOKEN_EXPIRED":
            access_token = self.refresh_access_token()
            headers["Authorization"] = f"Bearer {access_token}"
            resp = self._request(method, path, headers=headers, **kwargs)

        return resp

    # -------------------------
    # auth
    # -------------------------

    def check_username(self, username: str) -> dict:
        resp = self._request("GET", f"/auth/check-username/{quote(username, safe='')}")
        return self._json_or_raise(resp, "Failed to check username")

    def register(
        self,
        username: str,
        password: str,
        first_name: str,
        last_name: str,
        email: str | None = None,
    ) -> dict:
        body = {
            "username": username,
            "password": password,
            "firstName": first_name,
            "lastName": last_name,
        }
        if email:
            body["email"] = email
        data = self._json_or_raise(
            self._request("POST", "/auth/register", json=body),
            "Failed to register user",
        )
        self.store_auth(data)
        return data["user"]

    def login(self, username: str, password: str) -> dict:
        data = self._json_or_raise(
            self._request("POST", "/auth/login", json={"username": username, "password": password}),
            "Login failed",
        )
        self.store_auth(data)
        return data["user"]

    def logout(self) -> dict:
        refresh_token = self.auth_data().get("refreshToken")
        if refresh_token:
            try:
                self._request("POST", "/auth/logout", json={"refreshToken": refresh_token})
            except requests.RequestException as e:
                # igual cerramos la sesión local
                log.warning("logout en servidor falló: %r", e)
        self.clear_auth()
        return {"success": True}

    def delete_account(self) -> dict:
        resp = self.authenticated_request("DELETE", "/auth/account")
        self._json_or_raise(resp, "Failed to delete account")
        self.clear_auth()
        return {"success": True, "message": "Account deleted"}

    # -------------------------
    # comentarios
    # -------------------------

    def get_comments(self, video_id: str, sort_by: str = "newest") -> dict:
        params: dict[str, Any] = {"sort": sort_by}
        user = self.current_user()
        if user:
            params["userId"] = user["id"]
        resp = self._request("GET", f"/videos/{quote(video_id, safe='')}/comments", params=params)
        return self._json_or_raise(resp, "Failed to get comments")

    def add_comment(self, video_id: str, content: str) -> dict:
        user = self._require_user()
        resp = self.authenticated_request(
            "POST",
            f"/videos/{quote(video_id, safe='')}/comments",
            json={"userId": user["id"], "content": content},
        )
        return self._json_or_raise(resp, "Failed to add comment")

    def add_reply(self, comment_id: int, content: str) -> dict:
        user = self._require_user()
        resp = self.authenticated_request(
            "POST",
            f"/comments/{comment_id}/replies",
            json={"userId": user["id"], "content": content},
        )
        return self._json_or_raise(resp, "Failed to add reply")

    def edit_comment(self, comment_id: int, content: str) -> dict:
        user = self._require_user()
        resp = self.authenticated_request(
            "PUT",
            f"/comments/{comment_id}",
            json={"userId": user["id"], "content": content},
        )
        return self._json_or_raise(resp, "Failed to edit comment")

    def delete_comment(self, comment_id: int) -> dict:
        user = self._require_user()
        resp = self.authenticated_request(
            "DELETE",
            f"/comments/{comment_id}",
            json={"userId": user["id"]},
        )
        return self._json_or_raise(resp, "Failed to delete comment")

    def vote_comment(self, comment_id: int, vote_type: int) -> dict:
        user = self._require_user()
        resp = self.authenticated_request(
            "POST",
            f"/comments/{comment_id}/vote",
            json={"userId": user["id"], "voteType": vote_type},
        )
        return self._json_or_raise(resp, "Failed to vote on comment")

    def get_user_comments(self) -> dict:
        user = self._require_user()
        resp = self._request("GET", f"/users/{user['id']}/comments")
        return self._json_or_raise(resp, "Failed to get user comments")

    def check_health(self) -> bool:
        try:
            return self._request("GET", "/health").ok
        except requests.RequestException:
            return False
