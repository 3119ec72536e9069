from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from messmeal.api.routes import router as api_router
from messmeal.config import settings
from messmeal.context import build_context
from messmeal.errors import MessMealError
from messmeal.logging import configure_logging, get_logger
from messmeal.storage.db import create_db_and_tables

app = FastAPI(title="Mess Meal API")
logger = get_logger(__name__)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(MessMealError)
def handle_messmeal_error(request: Request, exc: MessMealError) -> JSONResponse:
    logger.info("request.rejected path=%s status=%s error=%s", request.url.path, exc.status_code, exc)
    return JSONResponse(status_code=exc.status_code, content={"detail": str(exc)})


@app.on_event("startup")
def on_startup() -> None:
    configure_logging(settings.log_level)
    logger.info("startup: configuring services env=%s", settings.env)
    create_db_and_tables()
    # A context set before startup (tests) is kept as is
    if getattr(app.state, "context", None) is None:
        app.state.context = build_context(settings)


@app.on_event("shutdown")
def on_shutdown() -> None:
    context = getattr(app.state, "context", None)
    if context is not None:
        context.close()
        app.state.context = None


app.include_router(api_router)
