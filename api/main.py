import os
import time

from dotenv import load_dotenv

load_dotenv()

from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from api.body_limit import BodySizeLimitMiddleware
from api.schemas import ErrorResponse, ScheduleRequest, ScheduleResponse
from api.static_files import SinglePageStaticFiles
from visit_planner.config.logger import configure_logging, get_logger
from visit_planner.config.settings import Settings, settings as default_settings
from visit_planner.errors import ScheduleError
from visit_planner.llm.completion import CompletionClient
from visit_planner.llm.model_factory import build_completion_client
from visit_planner.scheduler.relay import (
    MISSING_CASE_DETAILS_MESSAGE,
    RelayConfig,
    relay_schedule,
)

logger = get_logger(__name__)

router = APIRouter()


def get_relay_config(request: Request) -> RelayConfig:
    return request.app.state.relay_config


async def log_requests(request: Request, call_next):
    start = time.perf_counter()
    logger.info("[request.start] %s %s", request.method, request.url.path)
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - start) * 1000
    logger.info(
        "[request.end] %s %s status=%s elapsed=%.1fms",
        request.method,
        request.url.path,
        response.status_code,
        elapsed_ms,
    )
    return response


async def handle_schedule_error(_request: Request, exc: ScheduleError) -> JSONResponse:
    logger.warning("[schedule.error] %s status=%s: %s", type(exc).__name__, exc.status_code, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload())


async def handle_request_validation_error(_request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.warning("[schedule.invalid_body] %s", exc.errors())
    return JSONResponse(status_code=400, content={"error": MISSING_CASE_DETAILS_MESSAGE})


@router.get("/api/health")
async def health():
    return {"ok": True}


@router.post(
    "/api/schedule",
    response_model=ScheduleResponse,
    responses={400: {"model": ErrorResponse}, 413: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def create_schedule(
    payload: ScheduleRequest | None = None,
    relay_config: RelayConfig = Depends(get_relay_config),
):
    case_details = payload.caseDetails if payload is not None else None
    result = await relay_schedule(relay_config, case_details)
    return ScheduleResponse(schedule=result.schedule, rawResponse=result.raw_response)


def create_app(config: Settings | None = None, client: CompletionClient | None = None) -> FastAPI:
    """Build the application with its configuration fixed for the process lifetime.

    ``client`` overrides the completion client resolved from ``config``.
    """
    config = config or default_settings
    configure_logging(config, force=True)

    if client is None:
        client = build_completion_client(config)

    app = FastAPI(title="Home Visit Route Planner")
    app.state.settings = config
    app.state.relay_config = RelayConfig.from_settings(config, client)

    app.middleware("http")(log_requests)
    app.add_middleware(BodySizeLimitMiddleware, max_body_bytes=config.MAX_BODY_BYTES)
    app.add_exception_handler(ScheduleError, handle_schedule_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.include_router(router)

    # Mount last so API routes take priority.
    if os.path.isdir(config.STATIC_DIR):
        app.mount(
            "/",
            SinglePageStaticFiles(directory=config.STATIC_DIR, index_file=config.INDEX_FILE),
            name="static",
        )
    else:
        logger.info("[static] skip mount: '%s' directory not found (API-only mode)", config.STATIC_DIR)

    return app


app = create_app()
