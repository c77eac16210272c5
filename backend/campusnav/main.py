from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging

from campusnav.api.routers import auth, maps, pins, routes, navigation, assistant
from campusnav.config import get_settings
from campusnav.db import init_db

settings = get_settings()

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title=settings.app_name, version=settings.app_version)

# credentials are needed for the admin session cookie, which "*" does not allow
_origins = settings.cors_origins_list
app.add_middleware(
    CORSMiddleware,
    allow_origins=_origins,
    allow_credentials="*" not in _origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.get("/health")
def health():
    return {"ok": True}


# create the schema on first start
@app.on_event("startup")
def on_startup():
    init_db()
    logger.info("%s %s started", settings.app_name, settings.app_version)

app.include_router(auth.router,       prefix="/auth",       tags=["auth"])
app.include_router(maps.router,       prefix="/maps",       tags=["maps"])
app.include_router(pins.router,       prefix="/pins",       tags=["pins"])
app.include_router(routes.router,     prefix="/routes",     tags=["routes"])
app.include_router(navigation.router, prefix="/navigation", tags=["navigation"])
app.include_router(assistant.router,  prefix="/assistant",  tags=["assistant"])
