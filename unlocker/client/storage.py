# unlocker/client/storage.py
"""
Dónde guarda el cliente la sesión (accessToken, refreshToken, user).

- LocalStorage: archivo JSON en disco, sobrevive reinicios (ventana normal).
- SessionStorage: solo en memoria, se pierde al cerrar el proceso (incógnito).
"""
from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Iterable

from unlocker.core.config import settings

log = logging.getLogger(__name__)

AUTH_KEYS = ("accessToken", "refreshToken", "user")


class TokenStorage:
    def get(self, keys: Iterable[str] = AUTH_KEYS) -> dict[str, Any]:
        raise NotImplementedError

    def set(self, data: dict[str, Any]) -> None:
        raise NotImplementedError

    def remove(self, keys: Iterable[str] = AUTH_KEYS) -> None:
        raise NotImplementedError


class SessionStorage(TokenStorage):
    def __init__(self):
        self._data: dict[str, Any] = {}

    def get(self, keys: Iterable[str] = AUTH_KEYS) -> dict[str, Any]:
        return {k: self._data[k] for k in keys if k in self._data}

    def set(self, data: dict[str, Any]) -> None:
        self._data.update(data)

    def remove(self, keys: Iterable[str] = AUTH_KEYS) -> None:
        for k in keys:
            self._data.pop(k, None)


class LocalStorage(TokenStorage):
    def __init__(self, path: str | os.PathLike | None = None):
        self.path = Path(path) if path else Path(settings.CLIENT_STATE_DIR) / "auth.json"

    def _load(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with self.path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            # archivo corrupto o ilegible: se trata como sesión vacía
            log.warning("⚠️ No se pudo leer %s (%r); sesión vacía.", self.path, e)
            return {}
        return data if isinstance(data, dict) else {}

    def _dump(self, data: dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False)

    def get(self, keys: Iterable[str] = AUTH_KEYS) -> dict[str, Any]:
        data = self._load()
        return {k: data[k] for k in keys if k in data}

    def set(self, data: dict[str, Any]) -> None:
        current = self._load()
        current.update(data)
        self._dump(current)

    def remove(self, keys: Iterable[str] = AUTH_KEYS) -> None:
        current = self._load()
        for k in keys:
            current.pop(k, None)
        self._dump(current)


class ClientContext:
    """
    Estado del cliente que sobrevive entre mensajes: la sesión normal
    (en disco) y la de incógnito (en memoria, vive lo que viva el contexto).
    Se crea una vez y se pasa a cada handle_message.
    """

    def __init__(
        self,
        local: TokenStorage | None = None,
        session: TokenStorage | None = None,
    ):
        self.local = local if local is not None else LocalStorage()
        self.session = session if session is not None else SessionStorage()

    def storage(self, incognito: bool) -> TokenStorage:
        return self.session if incognito else self.local
