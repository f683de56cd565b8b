from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from auth import router as auth_router
from core import db, settings
from core.logs import configure_logging
from dashboard import router as dashboard_router
from peptides import router as peptides_router
from profiles import router as profiles_router
from taxonomy import router as taxonomy_router
from webhooks import router as webhooks_router

DEFAULT_CORS_ORIGINS = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]


@asynccontextmanager
async def lifespan(_: FastAPI):
    # Initialize the DB pool once per process.
    await db.init_pool()
    try:
        yield
    finally:
        await db.close_pool()


configure_logging()

app = FastAPI(lifespan=lifespan)

# Allow the admin frontend to call this API from the browser.
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.env_list("CORS_ORIGINS", DEFAULT_CORS_ORIGINS),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(peptides_router.router, tags=["peptides"])
app.include_router(taxonomy_router.router, tags=["taxonomy"])
app.include_router(dashboard_router.router, tags=["dashboard"])
app.include_router(profiles_router.router, tags=["users"])
app.include_router(auth_router.router, tags=["auth"])
app.include_router(webhooks_router.router, tags=["webhooks"])


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}


@app.get("/")
def root() -> dict:
    return {"message": "peptide admin api"}
