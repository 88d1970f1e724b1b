# unlocker/__init__.py
"""
Paquete `unlocker`: backend + cliente de comentarios para videos con los
comentarios desactivados.

En Windows forzamos el Proactor event loop al importar el paquete
(uvicorn con --reload, tests, cliente), porque el Selector por defecto
rompe las conexiones async de la DB con:

    Fatal write error on socket transport
"""

import sys
import asyncio

__version__ = "1.0.0"

if sys.platform.startswith("win"):
    try:
        asyncio.set_event_loop_policy(asyncio.WindowsProactorEventLoopPolicy())
    except AttributeError:
        # Python sin la policy de Proactor: seguimos con la de siempre
        pass
