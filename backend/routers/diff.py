"""Diff API endpoints"""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException
from starlette.concurrency import run_in_threadpool
from sse_starlette.sse import EventSourceResponse

from models.diff import DiffRequest, DiffResult, DiffStreamEvent
from services.config_manager import ConfigManager
from services.diff_generator import DiffGenerator, change_count
from services.edit_script import DiffError

logger = logging.getLogger(__name__)

router = APIRouter()

DIFF_ERROR_MESSAGE = "Error while creating version diff."


def build_generator() -> DiffGenerator:
    """DiffGenerator configured from the current settings"""
    config_manager = ConfigManager.get_instance()
    return DiffGenerator(
        context_limit=config_manager.get_context_limit(),
        navigation=config_manager.get_navigation(),
    )


@router.post("", response_model=DiffResult)
def create_diff(request: DiffRequest) -> DiffResult:
    """Diff two revisions and return the full segment stream"""
    generator = build_generator()
    try:
        return generator.generate_diff(request.old_text, request.new_text, request.context_limit)
    except DiffError as e:
        logger.error(f"Diff generation failed: {e}")
        raise HTTPException(status_code=500, detail=DIFF_ERROR_MESSAGE)


async def diff_events(generator: DiffGenerator, request: DiffRequest):
    """Yield one SSE message per segment, then a done (or error) message"""
    try:
        segments = await run_in_threadpool(
            generator.render, request.old_text, request.new_text, request.context_limit
        )
    except DiffError as e:
        logger.error(f"Diff generation failed: {e}")
        event = DiffStreamEvent(type="error", error=DIFF_ERROR_MESSAGE)
        yield {"event": "error", "data": event.model_dump_json()}
        return

    for segment in segments:
        event = DiffStreamEvent(type="segment", segment=segment)
        yield {"event": "segment", "data": event.model_dump_json()}

    event = DiffStreamEvent(type="done", done=True, change_count=change_count(segments))
    yield {"event": "done", "data": event.model_dump_json()}


@router.post("/stream")
async def stream_diff(request: DiffRequest):
    """Diff two revisions and stream the segments (SSE)"""
    return EventSourceResponse(diff_events(build_generator(), request))
