# main.py
import os
import shutil
from nicegui import ui
from fastapi import FastAPI, Request
from starlette.middleware.base import BaseHTTPMiddleware

import storage
from storage import get_options
import ui.navigation as navigation

import logging
import sys
from contextlib import asynccontextmanager


# -------------------
# Logging setup
# -------------------

LOG_LEVEL = os.getenv("LOG_LEVEL", "info").upper()

logging.basicConfig(
    level=getattr(logging, LOG_LEVEL, logging.INFO),
    format='%(asctime)s [%(levelname)s] %(threadName)s: %(message)s',
    handlers=[logging.StreamHandler(sys.stdout)],
)

logger = logging.getLogger(__name__)

options = get_options()


# =========================================================
# FastAPI lifespan
# =========================================================
@asynccontextmanager
async def lifespan(app: FastAPI):
    storage.ensure_dirs()
    logger.info(f"Starting Azure Configure, data root {storage.DATA_ROOT}, gateway {options['gateway']}")
    if options['gateway'] == 'az' and shutil.which(options['az_command']) is None:
        logger.warning(f"Azure CLI '{options['az_command']}' not found on PATH, remote calls will fail")

    yield  # ---- application runs here ----

    logger.info("Stopping Azure Configure")


# -------------------
# FastAPI app (single ASGI root)
# -------------------
app = FastAPI(lifespan=lifespan)


# -------------------
# Reverse proxy middleware (HTTP only)
# -------------------
class ForwardedPrefixMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        prefix = request.headers.get("X-Forwarded-Prefix")
        if prefix:
            request.scope["root_path"] = prefix
        return await call_next(request)

app.add_middleware(ForwardedPrefixMiddleware)


# -------------------
# Attach NiceGUI to FastAPI
# -------------------
logger.debug(f"Pages registered from {navigation.__name__}")
ui.run_with(app, title='Azure Configure', storage_secret=options['storage_secret'])


# -------------------
# Uvicorn entrypoint
# -------------------
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host=options['host'],
        port=options['port'],
        reload=False,
    )
