"""Request/response boundary used by every embedding (CLI, HTTP, in-process).

A request ``{"audioPath": str, "sampleRate": int}`` yields either the decoded
sample list or a structured error ``{"kind", "message", "details"}``.
"""

from __future__ import annotations

from enum import Enum
import logging
import traceback
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from pcm_extract.application.decode_service import DecodeAudioToPcm
from pcm_extract.audio_contract import DEFAULT_TARGET_SAMPLE_RATE_HZ
from pcm_extract.domain.models import NormalizedWaveform
from pcm_extract.errors import InvalidArgumentError, PcmExtractError
from pcm_extract.infrastructure.logging_event_publisher import LoggingEventPublisher
from pcm_extract.resample_options import ResampleMode, parse_case_insensitive_enum

LOGGER = logging.getLogger(__name__)

DECODE_METHOD = "decodeAudioToPCM"


class ErrorKind(str, Enum):
    INVALID_ARGUMENT = "INVALID_ARGUMENT"
    DECODE_ERROR = "DECODE_ERROR"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"
    NOT_IMPLEMENTED = "NOT_IMPLEMENTED"


class DecodeRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    audio_path: str = Field(alias="audioPath", min_length=1)
    sample_rate: int = Field(DEFAULT_TARGET_SAMPLE_RATE_HZ, alias="sampleRate", gt=0, strict=True)
    resample_mode: ResampleMode | None = Field(None, alias="resampleMode")

    @field_validator("sample_rate", mode="before")
    @classmethod
    def _default_missing_sample_rate(cls, value: Any) -> Any:
        return DEFAULT_TARGET_SAMPLE_RATE_HZ if value is None else value

    @field_validator("resample_mode", mode="before")
    @classmethod
    def _parse_resample_mode(cls, value: Any) -> Any:
        if isinstance(value, str):
            return parse_case_insensitive_enum(value, ResampleMode)
        return value


class DecodeSuccess(BaseModel):
    samples: list[float]
    sample_rate: int
    source_sample_rate: int
    source_channel_count: int

    @classmethod
    def from_waveform(cls, waveform: NormalizedWaveform) -> "DecodeSuccess":
        return cls(
            samples=waveform.to_list(),
            sample_rate=waveform.sample_rate_hz,
            source_sample_rate=waveform.source.sample_rate_hz,
            source_channel_count=waveform.source.channel_count,
        )


class BridgeError(BaseModel):
    kind: ErrorKind
    message: str
    details: str | None = None
    code: str | None = None

    def as_dict(self) -> dict[str, str | None]:
        return {"kind": self.kind.value, "message": self.message, "details": self.details}


DecodeResponse = DecodeSuccess | BridgeError

_default_service = DecodeAudioToPcm(event_publisher=LoggingEventPublisher())


def parse_decode_request(arguments: Mapping[str, Any] | None) -> DecodeRequest:
    """Validate raw call arguments, raising :class:`InvalidArgumentError`."""

    arguments = dict(arguments or {})
    if not arguments.get("audioPath") and not arguments.get("audio_path"):
        raise InvalidArgumentError("Audio path is null")
    try:
        return DecodeRequest.model_validate(arguments)
    except ValidationError as error:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in item['loc'])}: {item['msg']}" for item in error.errors()
        )
        raise InvalidArgumentError(f"Invalid arguments: {problems}") from error


def handle_decode_request(
    arguments: Mapping[str, Any] | None,
    service: DecodeAudioToPcm | None = None,
    *,
    correlation_id: str | None = None,
) -> DecodeResponse:
    """Run one decode request and marshal the outcome for the caller."""

    service = service or _default_service
    try:
        request = parse_decode_request(arguments)
    except InvalidArgumentError as error:
        return BridgeError(kind=ErrorKind.INVALID_ARGUMENT, message=error.message, code=error.code)

    try:
        waveform = service.decode(
            request.audio_path,
            request.sample_rate,
            resample_mode=request.resample_mode,
            correlation_id=correlation_id,
        )
        return DecodeSuccess.from_waveform(waveform)
    except InvalidArgumentError as error:
        return BridgeError(kind=ErrorKind.INVALID_ARGUMENT, message=error.message, code=error.code)
    except PcmExtractError as error:
        return BridgeError(
            kind=ErrorKind.DECODE_ERROR,
            message=f"Failed to decode audio: {error.message}",
            details="".join(traceback.format_exception(error)),
            code=error.code,
        )
    except Exception as error:  # noqa: BLE001
        LOGGER.exception("unexpected error while handling decode request")
        return BridgeError(kind=ErrorKind.UNKNOWN_ERROR, message=f"Unknown error occurred: {error}")


def handle_method_call(
    method: str,
    arguments: Mapping[str, Any] | None,
    service: DecodeAudioToPcm | None = None,
) -> DecodeResponse:
    """Dispatch a named method call the way a platform channel would."""

    if method == DECODE_METHOD:
        return handle_decode_request(arguments, service)
    return BridgeError(kind=ErrorKind.NOT_IMPLEMENTED, message=f"Method not implemented: {method}")
