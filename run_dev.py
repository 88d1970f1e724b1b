# run_dev.py
import os
import sys
import socket

import unlocker  # noqa: F401  (aplica la policy de event loop en Windows)


# Carga .env si existe (pydantic-settings ya lo lee, pero uvicorn/LOG_LEVEL no)
if os.path.exists(".env"):
    from dotenv import load_dotenv
    load_dotenv(".env")

APP_MODULE = os.getenv("APP_MODULE", "unlocker.main:app")


def _lan_ip() -> str:
    """Obtiene IP LAN real sin depender de hostname/DNS."""
    try:
        s = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        s.connect(("8.8.8.8", 80))
        ip = s.getsockname()[0]
        s.close()
        return ip
    except OSError:
        return "127.0.0.1"


def main():
    import uvicorn

    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", "8000"))

    reload_env = os.getenv("RELOAD")
    if reload_env is not None:
        reload_flag = reload_env.strip() in ("1", "true", "True", "yes", "on")
    else:
        # en Windows el reload duplica procesos con la DB abierta
        reload_flag = not sys.platform.startswith("win")

    print(f"🔗 API local: http://127.0.0.1:{port}/api")
    print(f"📱 API LAN:   http://{_lan_ip()}:{port}/api")
    print(f"🌀 reload={'ON' if reload_flag else 'OFF'}")

    uvicorn.run(
        APP_MODULE,
        host=host,
        port=port,
        loop="asyncio",
        reload=reload_flag,
        reload_dirs=["unlocker"],
        reload_excludes=[".venv", ".git", "__pycache__", ".unlocker"],
        timeout_keep_alive=30,
        log_level=os.getenv("LOG_LEVEL", "info"),
        lifespan="on",
    )


if __name__ == "__main__":
    main()
