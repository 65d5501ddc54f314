"""POST /api/colonies/* — colony analysis and CSV export."""

from __future__ import annotations

import asyncio
import json
import time
from collections.abc import AsyncGenerator

from fastapi import APIRouter
from fastapi.responses import Response, StreamingResponse

from petrilens.dependencies import load_raster
from petrilens.engine.colonies import build_context
from petrilens.engine.context import AnalysisContext
from petrilens.engine.pipeline import create_pipeline
from petrilens.errors import StageError
from petrilens.models.requests import ColonyAnalyzeRequest, ColonyExportRequest
from petrilens.models.responses import ColonyAnalyzeResponse, ColonyModel
from petrilens.report.csv_export import colonies_to_csv

router = APIRouter(prefix="/colonies")


_SENTINEL = object()  # marks end of queue


def _context_for(req: ColonyAnalyzeRequest) -> AnalysisContext:
    raster = load_raster(req.image)
    region = req.region.to_region() if req.region else None
    return build_context(raster, region, req.background_mode, req.count_target, req.invert)


def _to_response(ctx: AnalysisContext, elapsed_ms: float) -> ColonyAnalyzeResponse:
    return ColonyAnalyzeResponse(
        mask_image=ctx.mask_image,
        colonies=[ColonyModel.from_colony(c) for c in ctx.colonies],
        avg_size=ctx.avg_size,
        effective_count=ctx.effective_count,
        colony_count=len(ctx.colonies),
        width=ctx.width,
        height=ctx.height,
        background=ctx.background,
        count_dark=ctx.count_dark,
        threshold=ctx.threshold,
        processing_time_ms=round(elapsed_ms, 1),
    )


def _sse(event: str, payload: dict) -> str:
    return f"event: {event}\ndata: {json.dumps(payload)}\n\n"


async def _stream_analyze(ctx: AnalysisContext, start: float) -> AsyncGenerator[str, None]:
    """Drive pipeline.run_streaming() in a thread, yielding SSE events as they arrive."""
    pipeline = create_pipeline()
    loop = asyncio.get_running_loop()
    queue: asyncio.Queue = asyncio.Queue()
    failure: list[Exception] = []

    def _run_pipeline() -> None:
        """Sync pipeline in a thread. Pushes progress dicts onto the async queue."""
        try:
            for progress in pipeline.run_streaming(ctx):
                loop.call_soon_threadsafe(queue.put_nowait, progress)
        except Exception as e:
            failure.append(e)
        finally:
            loop.call_soon_threadsafe(queue.put_nowait, _SENTINEL)

    # Start pipeline in a thread so the event loop stays free to flush SSE
    worker = loop.run_in_executor(None, _run_pipeline)

    while True:
        item = await queue.get()
        if item is _SENTINEL:
            break
        yield _sse("progress", item)
    await worker

    if failure:
        err = failure[0]
        stage_id = err.stage_id if isinstance(err, StageError) else None
        yield _sse("error", {"type": "error", "stage_id": stage_id, "message": str(err)})
        return

    elapsed = (time.perf_counter() - start) * 1000
    response = _to_response(ctx, elapsed)
    yield _sse("result", response.model_dump(mode="json"))
    yield _sse("done", {"type": "done"})


@router.post("/analyze/stream")
async def analyze_stream(req: ColonyAnalyzeRequest) -> StreamingResponse:
    """SSE stream: `progress` per stage, then `result`, then `done` (or `error`).

    The image is decoded before the stream opens, so decode and size errors
    still come back as plain 422 / 413 responses.
    """
    start = time.perf_counter()
    ctx = _context_for(req)
    return StreamingResponse(
        _stream_analyze(ctx, start),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "X-Accel-Buffering": "no",
        },
    )


@router.post("/analyze", response_model=ColonyAnalyzeResponse)
def analyze(req: ColonyAnalyzeRequest) -> ColonyAnalyzeResponse:
    start = time.perf_counter()
    ctx = _context_for(req)
    create_pipeline().run(ctx)
    return _to_response(ctx, (time.perf_counter() - start) * 1000)


@router.post("/export")
def export_csv(req: ColonyExportRequest) -> Response:
    body = colonies_to_csv(c.to_colony() for c in req.colonies)
    return Response(
        content=body,
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="colonies.csv"'},
    )
