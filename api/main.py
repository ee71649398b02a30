from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from auth import router as auth_router
from core import config, db, schema
from core.logging_config import setup_logging
from posts import router as posts_router

setup_logging(config.log_level())


@asynccontextmanager
async def lifespan(_: FastAPI):
    # One pool per process; tables are created if missing.
    await db.init_pool()
    try:
        await schema.apply_schema()
        yield
    finally:
        await db.close_pool()


app = FastAPI(title="blog-api", lifespan=lifespan)

# Allow the local frontend dev server to call this API from the browser.
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth_router.router, tags=["auth"])
app.include_router(posts_router.router, tags=["posts"])


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}


@app.get("/")
def root() -> dict:
    return {"message": "blog api"}
