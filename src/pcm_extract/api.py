"""FastAPI interface for pcm_extract."""

import os
from functools import lru_cache
from pathlib import Path
from typing import Any
from uuid import uuid4

from fastapi import Body, FastAPI, Header, HTTPException
from fastapi.responses import JSONResponse

from .application.decode_service import DecodeAudioToPcm
from .infrastructure.logging_event_publisher import LoggingEventPublisher
from .interfaces.bridge import BridgeError, ErrorKind, handle_decode_request
from .utils.config import DecodeSettings, load_decode_settings

app = FastAPI(title="pcm_extract API", version="0.1.0")

_ERROR_STATUS = {
    ErrorKind.INVALID_ARGUMENT: 400,
    ErrorKind.DECODE_ERROR: 422,
    ErrorKind.UNKNOWN_ERROR: 500,
    ErrorKind.NOT_IMPLEMENTED: 501,
}


@lru_cache(maxsize=1)
def get_decode_service() -> DecodeAudioToPcm:
    settings_path = os.getenv("PCM_EXTRACT_SETTINGS")
    settings = load_decode_settings(Path(settings_path)) if settings_path else DecodeSettings()
    return DecodeAudioToPcm(settings=settings, event_publisher=LoggingEventPublisher())


@app.get("/health")
def health() -> dict[str, str]:
    """Health check endpoint."""

    return {"status": "ok"}


@app.post("/decode")
def decode(
    payload: dict[str, Any] = Body(..., description='{"audioPath": str, "sampleRate": int}'),
    x_correlation_id: str | None = Header(default=None, alias="X-Correlation-Id"),
) -> JSONResponse:
    """Decode a server-local media file to mono float samples.

    Declared sync so the blocking decode runs on FastAPI's worker threadpool.
    """

    correlation_id = x_correlation_id or str(uuid4())
    result = handle_decode_request(payload, get_decode_service(), correlation_id=correlation_id)

    if isinstance(result, BridgeError):
        raise HTTPException(
            status_code=_ERROR_STATUS[result.kind],
            detail=result.as_dict(),
            headers={"X-Correlation-Id": correlation_id},
        )

    response = JSONResponse(content=result.samples)
    response.headers["X-Correlation-Id"] = correlation_id
    response.headers["X-Sample-Rate"] = str(result.sample_rate)
    response.headers["X-Source-Sample-Rate"] = str(result.source_sample_rate)
    response.headers["X-Source-Channels"] = str(result.source_channel_count)
    return response
