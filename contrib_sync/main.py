import os
from typing import List, Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from .config import settings
from .errors import ContribSyncError, LedgerError
from .extractors import ExtractorChain
from .ledger import FileLedger, InMemoryLedger
from .log import configure_logging
from .models import CalendarCell, ExtractionResult, ObservedCount
from .pipeline import ContributionPipeline


class ExtractPayload(BaseModel):
    cells: List[CalendarCell]
    total_from_page: Optional[int] = None


class SchedulePayload(BaseModel):
    observed: List[ObservedCount]
    write_script: bool = False
    # Contents of the contributions file; overrides the configured ledger.
    ledger_lines: Optional[List[str]] = None


configure_logging(verbose=settings.verbose, json_logs=settings.json_logs)

app = FastAPI(
    title="Contribution Sync",
    version="0.1.0",
    description="Turns contribution calendar counts into batched, idempotent commit scripts.",
)

ledger = FileLedger(settings.ledger_path)
extractors = ExtractorChain()
pipeline = ContributionPipeline(
    ledger,
    settings.author(),
    settings.schedule_config(),
    approximate_policy=settings.approximate_policy,
    ledger_file=os.path.basename(settings.ledger_path),
    ledger_header=settings.ledger_header,
    git_remote=settings.git_remote,
    git_branch=settings.git_branch,
)


@app.get("/health")
async def health() -> dict:
    return {"status": "ok"}


@app.get("/ledger/stats")
async def ledger_stats() -> dict:
    try:
        return {"ledger": ledger.stats()}
    except LedgerError as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc


@app.post("/calendar/extract")
async def calendar_extract(payload: ExtractPayload) -> ExtractionResult:
    try:
        return extractors.extract_all(payload.cells, payload.total_from_page)
    except ContribSyncError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


@app.post("/schedule")
async def schedule_run(payload: SchedulePayload) -> dict:
    write_to = None
    if payload.write_script:
        write_to = os.path.join(settings.output_dir, f"{settings.year}.sh")
    supplied = None
    if payload.ledger_lines is not None:
        supplied = InMemoryLedger(payload.ledger_lines)
    try:
        result = pipeline.run(payload.observed, write_to=write_to, ledger=supplied)
    except LedgerError as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc
    except ContribSyncError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return {"status": "completed", "result": result, "script": pipeline.last_script}


@app.get("/schedule/status")
async def schedule_status() -> dict:
    if pipeline.last_result:
        return {"last_run": pipeline.last_result}
    return {"last_run": None}
