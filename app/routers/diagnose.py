import json

from fastapi import APIRouter, Depends, Request  # type: ignore
from fastapi.responses import JSONResponse  # type: ignore
from starlette.concurrency import run_in_threadpool  # type: ignore

from app.agent.diagnostic_agent import UNEXPECTED_ERROR, DiagnosticAgent
from app.config import get_settings
from app.models.diagnostic import DiagnoseFailure

router = APIRouter(
    prefix="/api",
    tags=["Diagnose"]
)


def get_diagnostic_agent() -> DiagnosticAgent:
    return DiagnosticAgent(get_settings())


@router.post("/diagnose")
async def diagnose(
    request: Request,
    agent: DiagnosticAgent = Depends(get_diagnostic_agent),
):
    # Body is parsed here, not by FastAPI, so bad bodies are 400 not 422
    try:
        payload = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        failure = DiagnoseFailure(error=UNEXPECTED_ERROR, detail=str(e), status_code=400)
        return JSONResponse(status_code=failure.status_code, content=failure.to_body())

    # Provider call is blocking, keep it off the event loop
    result = await run_in_threadpool(agent.handle, payload)

    return JSONResponse(status_code=result.status_code, content=result.to_body())
