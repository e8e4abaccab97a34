import logging
from contextlib import asynccontextmanager
from typing import Any, Dict

from fastapi import Body, FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ..actions import get_action, list_actions, run_action
from ..infra.config import get_config
from ..observability.logging_utils import init_logging, log_event
from ..observability.otel import init_otel
from ..schemas import GENERIC_INVALID_MESSAGE, to_payload


logger = logging.getLogger(__name__)

GENERIC_SERVER_ERROR = "An unexpected error occurred. Please try again."


@asynccontextmanager
async def lifespan(_: FastAPI):
    cfg = get_config()
    init_logging(log_path=cfg.log_path, level=cfg.log_level)
    init_otel()
    yield


app = FastAPI(title="KisanMitra", lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def _request_validation_handler(request: Request, exc: RequestValidationError):
    # malformed JSON bodies never reach the action boundary; answer in its envelope
    log_event(
        "request_invalid",
        path=request.url.path,
        errors=sorted({str(error.get("type")) for error in exc.errors()}),
    )
    return JSONResponse(
        status_code=400,
        content={"success": False, "error": GENERIC_INVALID_MESSAGE},
    )


@app.exception_handler(Exception)
async def _unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error at %s", request.url.path)
    return JSONResponse(
        status_code=500,
        content={"success": False, "error": GENERIC_SERVER_ERROR},
    )


@app.get("/health")
async def health():
    cfg = get_config()
    return {"status": "ok", "llm": cfg.llm_provider, "model": cfg.llm_model}


@app.get("/api/v1/actions")
async def actions():
    return {"actions": list_actions()}


@app.post("/api/v1/actions/{name}")
async def call_action(name: str, payload: Any = Body(default=None)) -> Dict[str, Any]:
    if get_action(name) is None:
        raise HTTPException(status_code=404, detail=f"Unknown action: {name}")
    result = await run_action(name, payload)
    return to_payload(result)
