#!/usr/bin/env python3
"""
SaaS Idea Scanner
Scores a free-text SaaS idea and produces a structured viability analysis.
Uses the Gemini API when GEMINI_API_KEY is set, local heuristics otherwise.
"""

import json
import logging
import sys
from datetime import datetime

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------
logging.basicConfig(
    level=logging.INFO,
    format='[%(levelname)s] %(message)s',
)
log = logging.getLogger(__name__)

from idea_scanner import *  # noqa: F401,F403,E402
from idea_scanner import (  # noqa: E402
    SCHEMAS,
    SCHEMA_HORIZONTAL,
    generate_json_report,
    generate_report,
    local_history_store,
    run_analysis,
)


def launch_server() -> None:
    """Serve the HTTP API with uvicorn."""
    import uvicorn
    from server.config import settings

    log.info('Serving API on http://%s:%d', settings.host, settings.port)
    uvicorn.run('server.app:app', host=settings.host, port=settings.port,
                log_level=settings.log_level.lower())


def main():
    """CLI entry point.

    No arguments        -> serves the HTTP API.
    With idea argument  -> analyses the idea, prints and saves the report.
    Optional second arg -> record schema (legacy, horizontal, comprehensive).
    """
    if len(sys.argv) < 2:
        launch_server()
        return

    from server.config import make_client  # noqa: lazy import, config reads env
    from server.storage import history_db_path

    idea = sys.argv[1]
    schema = sys.argv[2] if len(sys.argv) > 2 else SCHEMA_HORIZONTAL
    if schema not in SCHEMAS:
        print(f'Unknown schema {schema!r}; choose one of: {", ".join(SCHEMAS)}')
        sys.exit(2)

    print('\nSaaS Idea Scanner')
    print(f'Schema: {schema}')
    print('-' * 40)

    client = make_client()
    if client is None:
        log.info('GEMINI_API_KEY not set, using heuristic analysis')

    try:
        with local_history_store(history_db_path()) as store:
            outcome = run_analysis(idea, schema=schema, client=client, store=store)
    except ValueError as exc:
        print(f'Error: {exc}')
        sys.exit(1)
    finally:
        if client is not None:
            client.close()

    report_text = generate_report(outcome.record)
    print('\n' + report_text)

    timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
    filename = f'saas_analysis_{timestamp}.txt'
    json_filename = f'saas_analysis_{timestamp}.json'

    with open(filename, 'w', encoding='utf-8') as f:
        f.write(report_text)
    with open(json_filename, 'w', encoding='utf-8') as f:
        json.dump(generate_json_report(outcome.record), f, indent=2, ensure_ascii=False)

    log.info('Analysis source: %s (quality score %.0f)', outcome.source, outcome.quality_score)
    log.info('Report saved to: %s', filename)
    log.info('JSON saved to: %s', json_filename)


if __name__ == '__main__':
    main()
