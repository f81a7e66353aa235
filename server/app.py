"""FastAPI app for validating, analysing and browsing SaaS ideas."""

import json
from datetime import date
from typing import Any, Optional

from fastapi import Body, Depends, FastAPI, HTTPException, Request
from fastapi.responses import Response
from starlette.middleware.sessions import SessionMiddleware

from idea_scanner import (
    CookieBackend,
    InputQualityValidator,
    cookie_history_store,
    get_cookie_consent,
    length_status,
    local_history_store,
    run_analysis,
    set_cookie_consent,
)

from . import queue as job_queue
from .config import settings, make_client
from .schemas import AnalysisRequest, ConsentRequest, DeleteManyRequest, ValidateRequest
from .storage import init_db, create_job, get_job, list_jobs, history_db_path


app = FastAPI(title='SaaS Idea Scanner')
app.add_middleware(SessionMiddleware, secret_key=settings.session_secret)

validator = InputQualityValidator()


def get_history_store(request: Request):
    """History store for this request, per the configured backend."""
    if settings.history_backend == 'cookie':
        store = cookie_history_store(request.session,
                                     max_cookie_bytes=settings.cookie_max_bytes)
    else:
        store = local_history_store(history_db_path())
    with store:
        yield store


def history_writable(request: Request) -> bool:
    """Cookie history is only written once the user has granted consent."""
    if settings.history_backend != 'cookie':
        return True
    return get_cookie_consent(CookieBackend(request.session)) is True


@app.on_event('startup')
def on_startup() -> None:
    """Initialize DB on startup."""
    init_db()


@app.get('/health')
def health() -> dict:
    """Health check."""
    return {'status': 'ok'}


# ---------------------------------------------------------------------------
# Validation and analysis
# ---------------------------------------------------------------------------

@app.post('/api/validate')
def validate_idea(payload: ValidateRequest) -> dict:
    """Per-rule validation results plus a summary."""
    results = validator.validate(payload.idea)
    return {
        'results': [r.to_dict() for r in results],
        'summary': validator.summarize(payload.idea),
        'lengthStatus': length_status(payload.idea),
    }


@app.post('/api/analyses')
def create_analysis(payload: AnalysisRequest, request: Request,
                    store=Depends(get_history_store)) -> dict:
    """Analyse an idea synchronously and save it to history."""
    client = make_client() if payload.use_api else None
    try:
        outcome = run_analysis(
            payload.idea,
            schema=payload.schema_name,
            client=client,
            store=store if history_writable(request) else None,
        )
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    finally:
        if client is not None:
            client.close()
    return outcome.to_dict()


@app.post('/api/jobs')
def create_analysis_job(payload: AnalysisRequest) -> dict:
    """Queue an analysis for the worker."""
    if not payload.idea.strip():
        raise HTTPException(status_code=400, detail='idea text is empty')
    job_id = create_job(payload.idea, payload.schema_name)
    queue = job_queue.get_queue()
    queue.enqueue(
        'worker.tasks.run_analysis_task',
        job_id,
        payload.model_dump(by_alias=True),
        job_timeout=60 * 5
    )
    return {'id': job_id, 'status': 'queued'}


@app.get('/api/jobs')
def jobs_list() -> list:
    """List recent jobs."""
    return list_jobs()


@app.get('/api/jobs/{job_id}')
def job_detail(job_id: str) -> dict:
    """Get job status and, once finished, its analysis."""
    job = get_job(job_id)
    if not job:
        raise HTTPException(status_code=404, detail='Job not found')
    return job


# ---------------------------------------------------------------------------
# History
# ---------------------------------------------------------------------------

@app.get('/api/history')
def history_list(
    q: Optional[str] = None,
    min_score: Optional[float] = None,
    max_score: Optional[float] = None,
    innovation_level: Optional[str] = None,
    start: Optional[str] = None,
    end: Optional[str] = None,
    store=Depends(get_history_store),
) -> list:
    """Stored analyses, newest first, narrowed by any given filters."""
    items = store.search(q) if q else store.get_all()

    if min_score is not None or max_score is not None:
        low = min_score if min_score is not None else float('-inf')
        high = max_score if max_score is not None else float('inf')
        allowed = {i.id for i in store.filter_by_score_range(low, high)}
        items = [i for i in items if i.id in allowed]

    if start or end:
        allowed = {i.id for i in store.filter_by_date_range(
            start or '0001-01-01T00:00:00Z', end or '9999-12-31T23:59:59Z')}
        items = [i for i in items if i.id in allowed]

    if innovation_level:
        allowed = {i.id for i in store.filter_by_innovation_level(innovation_level)}
        items = [i for i in items if i.id in allowed]

    return [i.to_dict() for i in items]


@app.get('/api/history/stats')
def history_stats(store=Depends(get_history_store)) -> dict:
    """Counts and storage size."""
    return store.get_stats()


@app.get('/api/history/export')
def history_export(store=Depends(get_history_store)) -> Response:
    """Download the full history as JSON."""
    filename = f'saas-analysis-history-{date.today().isoformat()}.json'
    return Response(
        content=store.export_as_json(),
        media_type='application/json',
        headers={'Content-Disposition': f'attachment; filename="{filename}"'},
    )


@app.post('/api/history/import')
def history_import(payload: Any = Body(...), store=Depends(get_history_store)) -> dict:
    """Merge a previous export into the history."""
    if not store.import_from_json(json.dumps(payload)):
        raise HTTPException(status_code=400, detail='No valid analyses to import')
    return {'imported': True, 'total': len(store.get_all())}


@app.post('/api/history/delete')
def history_delete_many(payload: DeleteManyRequest, store=Depends(get_history_store)) -> dict:
    """Delete several analyses."""
    if not store.delete_many(payload.ids):
        raise HTTPException(status_code=500, detail='Could not update history')
    return {'deleted': payload.ids}


@app.delete('/api/history')
def history_clear(store=Depends(get_history_store)) -> dict:
    """Delete every analysis."""
    if not store.clear():
        raise HTTPException(status_code=500, detail='Could not clear history')
    return {'cleared': True}


@app.get('/api/history/{analysis_id}')
def history_detail(analysis_id: str, store=Depends(get_history_store)) -> dict:
    """One stored analysis."""
    item = store.get_by_id(analysis_id)
    if not item:
        raise HTTPException(status_code=404, detail='Analysis not found')
    return item.to_dict()


@app.delete('/api/history/{analysis_id}')
def history_delete(analysis_id: str, store=Depends(get_history_store)) -> dict:
    """Delete one analysis."""
    if not store.delete(analysis_id):
        raise HTTPException(status_code=404, detail='Analysis not found')
    return {'deleted': analysis_id}


# ---------------------------------------------------------------------------
# Cookie consent
# ---------------------------------------------------------------------------

@app.get('/api/consent')
def consent_status(request: Request) -> dict:
    """Current consent answer: true, false or null."""
    return {'granted': get_cookie_consent(CookieBackend(request.session))}


@app.post('/api/consent')
def consent_update(payload: ConsentRequest, request: Request) -> dict:
    """Record the user's consent answer."""
    set_cookie_consent(CookieBackend(request.session), payload.granted)
    return {'granted': payload.granted}
