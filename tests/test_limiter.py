"""Tests for the per-IP rate limit dependencies."""

import asyncio
from unittest.mock import AsyncMock, Mock

import pytest
from fastapi import HTTPException
from fastapi.routing import APIRoute
from fastapi_limiter import FastAPILimiter
from fastapi_limiter.depends import RateLimiter

from unlocker.core.limiter import general_limit, ip_identifier, limit
from unlocker.main import app


def _too_many(*args, **kwargs):
    raise HTTPException(status_code=429, detail="Too Many Requests")


def test_general_limit_on_every_route() -> None:
    routes = [r for r in app.routes if isinstance(r, APIRoute)]
    assert routes
    for route in routes:
        assert any(d.dependency is general_limit for d in route.dependencies), route.path


def test_noop_without_redis() -> None:
    assert FastAPILimiter.redis is None
    dep = limit(1, seconds=1)
    assert asyncio.run(dep(Mock(), Mock())) is None


def test_delegates_when_redis_configured(monkeypatch) -> None:
    monkeypatch.setattr(FastAPILimiter, "redis", AsyncMock())
    monkeypatch.setattr(RateLimiter, "__call__", AsyncMock(side_effect=_too_many))

    with pytest.raises(HTTPException) as exc:
        asyncio.run(limit(1, seconds=1)(Mock(), Mock()))
    assert exc.value.status_code == 429


def test_app_wide_limit_returns_429(client, monkeypatch) -> None:
    monkeypatch.setattr(FastAPILimiter, "redis", AsyncMock())
    monkeypatch.setattr(RateLimiter, "__call__", AsyncMock(side_effect=_too_many))

    resp = client.get("/api/health")
    assert resp.status_code == 429
    assert resp.json() == {"error": "Too Many Requests"}


def test_ip_identifier_ignores_path() -> None:
    forwarded = Mock(headers={"X-Forwarded-For": "1.2.3.4, 10.0.0.1"})
    direct = Mock(headers={}, client=Mock(host="5.6.7.8"))

    assert asyncio.run(ip_identifier(forwarded)) == "general:1.2.3.4"
    assert asyncio.run(ip_identifier(direct)) == "general:5.6.7.8"
