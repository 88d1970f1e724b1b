# unlocker/core/json.py
from typing import Any
import json
from fastapi.encoders import jsonable_encoder
from starlette.responses import JSONResponse


class UTF8JSONResponse(JSONResponse):
    """
    Respuesta JSON en UTF-8, sin escapes ASCII (los comentarios traen
    emojis y acentos) y con jsonable_encoder previo para datetime.
    """
    media_type = "application/json; charset=utf-8"

    def render(self, content: Any) -> bytes:
        payload = jsonable_encoder(content, exclude_none=False)
        return json.dumps(
            payload,
            ensure_ascii=False,
            allow_nan=False,
            separators=(",", ":"),
        ).encode("utf-8")


def error_body(detail: Any) -> dict:
    """
    Todas las respuestas de error salen como {"error": "..."} más extras
    opcionales (code, editWindowExpired, ...).
    """
    if isinstance(detail, dict):
        body = dict(detail)
        body.setdefault("error", "Request failed")
        return body
    return {"error": str(detail)}
