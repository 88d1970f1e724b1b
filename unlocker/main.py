# unlocker/main.py
import logging
from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from unlocker.core.json import UTF8JSONResponse, error_body
from unlocker.core.config import settings
from unlocker.core.limiter import init_limiter, close_limiter, general_limit
from unlocker.core.security import utcnow
from unlocker.db.init_db import init_models

# routers
from unlocker.auth.router import router as auth_router
from unlocker.users.router import router as users_router
from unlocker.comments.router import router as comments_router

log = logging.getLogger("uvicorn")

app = FastAPI(
    title="Comment Unlocker API",
    default_response_class=UTF8JSONResponse,
    dependencies=[Depends(general_limit)],
)

# CORS (la extensión llama desde el origen de YouTube / chrome-extension://)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allow_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StarletteHTTPException)
async def http_error(request: Request, exc: StarletteHTTPException):
    return UTF8JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.detail),
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_error(request: Request, exc: RequestValidationError):
    # 400 (no 422): el cliente solo distingue "datos mal formados"
    first = exc.errors()[0] if exc.errors() else {}
    field = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
    msg = first.get("msg", "Invalid request")
    return UTF8JSONResponse(
        status_code=400,
        content={"error": f"{field}: {msg}" if field else msg},
    )


@app.exception_handler(Exception)
async def unhandled_error(request: Request, exc: Exception):
    log.exception(f"❌ {request.method} {request.url.path} falló: {exc!r}")
    return UTF8JSONResponse(status_code=500, content={"error": "Internal server error"})


@app.on_event("startup")
async def on_startup():
    log.info("🚀 Iniciando servicio…")
    await init_limiter()
    await init_models()
    log.info("✅ Startup listo.")


@app.on_event("shutdown")
async def on_shutdown():
    await close_limiter()


@app.get("/api/health")
async def health():
    return {"status": "ok", "timestamp": utcnow().isoformat()}


# routers
app.include_router(auth_router)      # /api/auth/...
app.include_router(users_router)     # /api/users/...
app.include_router(comments_router)  # /api/videos/... y /api/comments/...
