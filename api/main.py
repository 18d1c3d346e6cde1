from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from authors import router as authors_router
from core import db, schema, settings
from core.errors import ValidationFailedError
from core.logging import configure_logging
from core.responses import fail, to_response
from posts import router as posts_router

configure_logging(settings.log_level())


@asynccontextmanager
async def lifespan(_: FastAPI):
    # Initialize the DB pool once per process.
    await db.init_pool()
    try:
        if settings.auto_create_schema():
            await schema.ensure_schema(db.pool())
        yield
    finally:
        await db.close_pool()


app = FastAPI(lifespan=lifespan)

# Allow local frontend dev server to call this API from the browser.
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(posts_router.router, tags=["posts"])
app.include_router(authors_router.router, tags=["authors"])


@app.exception_handler(RequestValidationError)
async def request_validation_failed(_: Request, exc: RequestValidationError) -> JSONResponse:
    # Malformed bodies still get the envelope, not the framework's 422 shape.
    fields = [".".join(str(part) for part in err.get("loc", ())) for err in exc.errors()]
    error = ValidationFailedError("Request could not be parsed.", fields=fields, cause=exc)
    return to_response(fail(error), production=settings.is_production())


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}


@app.get("/")
def root() -> dict:
    return {"message": "posts api"}
