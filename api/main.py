import logging
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.staticfiles import StaticFiles

from adverts import router as adverts_router
from core import config, db, envelope

logger = logging.getLogger(__name__)

ALLOWED_METHODS = ["GET", "POST", "DELETE", "PATCH", "OPTIONS"]


@asynccontextmanager
async def lifespan(_: FastAPI):
    config.static_dir().mkdir(parents=True, exist_ok=True)
    config.upload_dir().mkdir(parents=True, exist_ok=True)
    # Initialize the DB pool once per process.
    await db.init_pool()
    try:
        yield
    finally:
        await db.close_pool()


async def _validation_error(_: Request, exc: RequestValidationError) -> JSONResponse:
    # Malformed requests still get the envelope with a 200.
    errors = exc.errors()
    message = errors[0].get("msg", "Invalid request.") if errors else "Invalid request."
    return JSONResponse(status_code=200, content=envelope.fail(message))


def setup_logging() -> None:
    logging.basicConfig(
        level=config.log_level(),
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
    )


def create_app() -> FastAPI:
    app = FastAPI(title="Advert Board API", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=ALLOWED_METHODS,
        allow_headers=["*"],
    )
    app.add_exception_handler(RequestValidationError, _validation_error)

    app.include_router(adverts_router.router, tags=["adverts"])

    app.mount(
        "/static",
        StaticFiles(directory=str(config.static_dir()), check_dir=False),
        name="static",
    )

    @app.get("/health")
    def health() -> dict:
        return {"status": "ok"}

    return app


load_dotenv()
app = create_app()


def serve() -> None:
    import uvicorn

    setup_logging()
    logger.info("listening port=%s", config.port())
    uvicorn.run(app, host="0.0.0.0", port=config.port())


if __name__ == "__main__":
    serve()
