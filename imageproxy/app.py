# imageproxy/app.py

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from config.settings import Settings, settings
from .everart_client import EverArtClient, create_http_client
from .model import ClientError, ProxyResult, Success, Timeout, UpstreamError
from .observer import LoggingObserver, configure_logging
from .orchestrator import GenerationOrchestrator
from .utils import gen_request_id, get_timestamp_ms
from .validator import validate

logger = logging.getLogger("imageproxy.app")


def build_orchestrator(http, cfg: Settings) -> GenerationOrchestrator:
    client = EverArtClient(http, base_url=cfg.EVERART_API_URL, model_id=cfg.EVERART_MODEL_ID)
    return GenerationOrchestrator(
        client,
        poll_interval=cfg.POLL_INTERVAL,
        max_attempts=cfg.POLL_MAX_ATTEMPTS,
        stop_on_remote_failure=cfg.STOP_ON_REMOTE_FAILURE,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(settings.LOG_LEVEL)
    # One outbound client for the whole process
    http = create_http_client(timeout=settings.REQUEST_TIMEOUT)
    app.state.orchestrator = build_orchestrator(http, settings)
    try:
        yield
    finally:
        await http.aclose()


app = FastAPI(title="Image Generation Proxy", lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ALLOW_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)


def get_settings() -> Settings:
    return settings


def get_orchestrator(request: Request) -> GenerationOrchestrator:
    return request.app.state.orchestrator


def render_result(result: ProxyResult) -> Response:
    if isinstance(result, Success):
        return JSONResponse(status_code=200, content=result.to_body())
    if isinstance(result, ClientError):
        return JSONResponse(status_code=result.status_code, content={"error": result.message})
    if isinstance(result, Timeout):
        return JSONResponse(status_code=result.status_code, content={"error": result.message})
    if isinstance(result, UpstreamError):
        # Raw header, so Starlette does not append a charset to the upstream type
        headers = {"content-type": result.media_type} if result.media_type else None
        return Response(content=result.body, status_code=result.status_code, headers=headers)
    raise TypeError(f"Unknown result type: {type(result).__name__}")


@app.post("/api/generate-image", name="GenerateImage")
async def generate_image(
    request: Request,
    cfg: Settings = Depends(get_settings),
    orchestrator: GenerationOrchestrator = Depends(get_orchestrator),
) -> Response:
    """
    Generate one image from `{"prompt": ...}` and wait for the result.

    Blocks until EverArt finishes, fails, or the poll budget runs out.
    """
    request_id = gen_request_id()
    started_at = get_timestamp_ms()

    raw_body = await request.body()
    logger.info("[%s] received request (%d bytes)", request_id, len(raw_body))

    parsed = validate(raw_body)
    if isinstance(parsed, ClientError):
        logger.info("[%s] rejected: %s", request_id, parsed.message)
        return render_result(parsed)

    result = await orchestrator.generate(
        parsed, cfg.EVERART_API_KEY, observer=LoggingObserver(request_id)
    )
    logger.info(
        "[%s] finished: %s in %d ms", request_id, result.kind, get_timestamp_ms() - started_at
    )
    return render_result(result)
