"""Background tasks for running analyses."""

import logging
from typing import Any

from idea_scanner import local_history_store, run_analysis
from server.config import make_client
from server.storage import update_status, attach_result, history_db_path


log = logging.getLogger(__name__)


def run_analysis_task(job_id: str, payload: dict[str, Any]) -> None:
    """Run an analysis and persist the result to the job row and history."""
    update_status(job_id, 'running')
    client = make_client() if payload.get('use_api', True) else None
    try:
        with local_history_store(history_db_path()) as store:
            outcome = run_analysis(
                payload['idea'],
                schema=payload.get('schema', 'horizontal'),
                client=client,
                store=store,
            )
        attach_result(job_id, outcome.record.id, outcome.to_dict())
        update_status(job_id, 'finished')
    except Exception as exc:
        log.exception('Analysis job %s failed', job_id)
        update_status(job_id, 'failed', error_message=str(exc)[:200])
    finally:
        if client is not None:
            client.close()
