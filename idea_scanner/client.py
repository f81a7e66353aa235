"""HTTP client for the Gemini ``generateContent`` endpoint.

Sends a fully substituted prompt and returns the raw text of the first
candidate. Any failure (network, HTTP status, missing content) raises
AnalysisClientError; the pipeline treats that as "use the heuristic path".
"""

import logging
import time
from dataclasses import dataclass
from typing import Optional

import httpx


log = logging.getLogger(__name__)


DEFAULT_BASE_URL = 'https://generativelanguage.googleapis.com/v1beta/models'
DEFAULT_MODEL = 'gemini-1.5-flash-latest'

RETRYABLE_STATUS_CODES = (429, 500, 502, 503, 504)

SAFETY_CATEGORIES = (
    'HARM_CATEGORY_HARASSMENT',
    'HARM_CATEGORY_HATE_SPEECH',
    'HARM_CATEGORY_SEXUALLY_EXPLICIT',
    'HARM_CATEGORY_DANGEROUS_CONTENT',
)


class AnalysisClientError(Exception):
    """The analysis API call failed or returned nothing usable."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


@dataclass
class ClientConfig:
    """Endpoint, generation and retry settings."""
    api_key: str
    base_url: str = DEFAULT_BASE_URL
    model: str = DEFAULT_MODEL
    max_output_tokens: int = 4096
    temperature: float = 0.3
    top_k: int = 1
    top_p: float = 0.8
    timeout_seconds: float = 30.0
    retry_attempts: int = 3
    retry_delay_seconds: float = 1.0


class GeminiClient:
    """Synchronous Gemini client.

    ``transport`` is passed through to httpx so tests can plug in an
    ``httpx.MockTransport``.
    """

    def __init__(self, config: ClientConfig, transport: httpx.BaseTransport = None,
                 sleep=time.sleep):
        if not config.api_key:
            raise ValueError('an API key is required')
        self.config = config
        self._sleep = sleep
        self._client = httpx.Client(
            headers={'Content-Type': 'application/json'},
            timeout=httpx.Timeout(config.timeout_seconds),
            transport=transport,
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> 'GeminiClient':
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    @property
    def endpoint(self) -> str:
        return f'{self.config.base_url.rstrip("/")}/{self.config.model}:generateContent'

    def build_request_body(self, prompt: str) -> dict:
        return {
            'contents': [{'parts': [{'text': prompt}]}],
            'generationConfig': {
                'temperature': self.config.temperature,
                'topK': self.config.top_k,
                'topP': self.config.top_p,
                'maxOutputTokens': self.config.max_output_tokens,
            },
            'safetySettings': [
                {'category': category, 'threshold': 'BLOCK_MEDIUM_AND_ABOVE'}
                for category in SAFETY_CATEGORIES
            ],
        }

    @staticmethod
    def extract_text(data) -> str:
        """Text of the first candidate's first part."""
        try:
            text = data['candidates'][0]['content']['parts'][0]['text']
        except (KeyError, IndexError, TypeError):
            raise AnalysisClientError('Invalid response format from API')
        if not isinstance(text, str) or not text.strip():
            raise AnalysisClientError('Empty response from API')
        return text

    def _post_once(self, prompt: str) -> str:
        try:
            response = self._client.post(
                self.endpoint,
                params={'key': self.config.api_key},
                json=self.build_request_body(prompt),
            )
        except httpx.TimeoutException as exc:
            raise AnalysisClientError(f'Request timed out: {exc}') from exc
        except httpx.HTTPError as exc:
            raise AnalysisClientError(f'Network error: {exc}') from exc

        if response.status_code != 200:
            raise AnalysisClientError(
                f'API request failed: {response.status_code} {response.reason_phrase}',
                status_code=response.status_code,
            )
        try:
            data = response.json()
        except ValueError as exc:
            raise AnalysisClientError('API returned non-JSON body') from exc
        return self.extract_text(data)

    def analyze(self, prompt: str) -> str:
        """Raw model output for ``prompt``, retrying transient failures."""
        attempts = max(1, self.config.retry_attempts)
        for attempt in range(1, attempts + 1):
            try:
                return self._post_once(prompt)
            except AnalysisClientError as exc:
                transient = exc.status_code is None or exc.status_code in RETRYABLE_STATUS_CODES
                if attempt == attempts or not transient:
                    raise
                log.warning('Analysis request failed (attempt %d/%d): %s',
                            attempt, attempts, exc)
                self._sleep(self.config.retry_delay_seconds)
