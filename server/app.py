"""FastAPI application -- routes for the solution viewer."""

import logging
import sys
from contextlib import asynccontextmanager
from datetime import datetime
from pathlib import Path

_project_root = str(Path(__file__).resolve().parent.parent)
if _project_root not in sys.path:
    sys.path.insert(0, _project_root)

from fastapi import Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from server.config import Settings
from server.dependencies import get_settings
from server.schemas import (
    DiffRequest,
    DiffResponse,
    EvaluateRequest,
    EvaluateResponse,
    ScoreRequest,
    ScoreResponse,
    SolutionsRequest,
    SolutionsResponse,
)
from server.services import solution_service
from server.__version__ import __version__

logger = logging.getLogger("server")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan: nothing to load, solutions are built per request."""
    ts = datetime.utcnow().isoformat() + "Z"
    logger.info("[%s] Startup: begin", ts)
    yield
    ts_end = datetime.utcnow().isoformat() + "Z"
    logger.info("[%s] Shutdown: complete", ts_end)


app = FastAPI(title="Solution Viewer", version=__version__, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ---- Health (no dependencies, always fast) ----

@app.get("/health")
def health():
    """Minimal health check. No deps. Always returns immediately."""
    return {"ok": True}


# ---- Solutions ----

@app.post("/solutions", response_model=SolutionsResponse)
def solutions_list(body: SolutionsRequest, settings: Settings = Depends(get_settings)):
    """All the solutions of a challenge, alphabetically."""
    result = solution_service.list_solutions(body.challenge, settings, locale=body.locale)
    logger.debug("Listed %d solution(s) for locale %s", len(result["solutions"]), result["locale"])
    return result


@app.post("/score", response_model=ScoreResponse)
def solutions_score(body: ScoreRequest, settings: Settings = Depends(get_settings)):
    """Solutions scored against an answer, filtered, sorted and paginated."""
    try:
        return solution_service.score_solutions(
            body.challenge,
            body.answer,
            settings,
            locale=body.locale,
            filters=body.filters,
            sort_type=body.sort_type,
            sort_direction=body.sort_direction,
            page=body.page,
            page_size=body.page_size,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@app.post("/evaluate", response_model=EvaluateResponse)
def solutions_evaluate(body: EvaluateRequest, settings: Settings = Depends(get_settings)):
    """Closest solution (incorrect answers) or correction (correct answers)."""
    return solution_service.evaluate(
        body.challenge,
        body.answer,
        body.is_correct,
        settings,
        locale=body.locale,
    )


@app.post("/diff", response_model=DiffResponse)
def strings_diff(body: DiffRequest):
    return solution_service.diff(body.left, body.right, body.locale)
