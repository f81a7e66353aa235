"""Tests for idea_scanner.client - the Gemini HTTP client."""

import json

import httpx
import pytest

from idea_scanner import AnalysisClientError, ClientConfig, GeminiClient


def _ok(text):
    return httpx.Response(200, json={
        'candidates': [{'content': {'parts': [{'text': text}]}}],
    })


class Recorder:
    """MockTransport handler replaying canned responses in order."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.requests = []

    def __call__(self, request):
        self.requests.append(request)
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture
def sleeps():
    return []


@pytest.fixture
def make_client(sleeps):
    clients = []

    def _make(*responses, **config):
        recorder = Recorder(*responses)
        client = GeminiClient(
            ClientConfig(api_key='secret', **config),
            transport=httpx.MockTransport(recorder),
            sleep=sleeps.append,
        )
        clients.append(client)
        return client, recorder

    yield _make
    for client in clients:
        client.close()


class TestRequest:
    """Tests for the request shape."""

    def test_success_returns_text(self, make_client):
        client, recorder = make_client(_ok('{"overallScore": 80}'))
        assert client.analyze('Analyse this') == '{"overallScore": 80}'
        assert len(recorder.requests) == 1

    def test_url_and_key(self, make_client):
        client, recorder = make_client(_ok('x'))
        client.analyze('prompt')
        request = recorder.requests[0]
        assert request.method == 'POST'
        assert request.url.path.endswith('/models/gemini-1.5-flash-latest:generateContent')
        assert request.url.params['key'] == 'secret'

    def test_body(self, make_client):
        client, recorder = make_client(_ok('x'))
        client.analyze('prompt text')
        body = json.loads(recorder.requests[0].content)
        assert body['contents'][0]['parts'][0]['text'] == 'prompt text'
        assert body['generationConfig'] == {
            'temperature': 0.3, 'topK': 1, 'topP': 0.8, 'maxOutputTokens': 4096,
        }
        assert len(body['safetySettings']) == 4

    def test_custom_model(self, make_client):
        client, recorder = make_client(_ok('x'), model='gemini-pro')
        client.analyze('p')
        assert recorder.requests[0].url.path.endswith('/gemini-pro:generateContent')

    def test_requires_api_key(self):
        with pytest.raises(ValueError):
            GeminiClient(ClientConfig(api_key=''))


class TestErrors:
    """Tests for failures and retries."""

    def test_server_error_then_success(self, make_client, sleeps):
        client, recorder = make_client(httpx.Response(503), _ok('fine'))
        assert client.analyze('p') == 'fine'
        assert len(recorder.requests) == 2
        assert sleeps == [1.0]

    def test_client_error_not_retried(self, make_client, sleeps):
        client, recorder = make_client(httpx.Response(400))
        with pytest.raises(AnalysisClientError) as exc_info:
            client.analyze('p')
        assert exc_info.value.status_code == 400
        assert len(recorder.requests) == 1
        assert sleeps == []

    def test_persistent_failure_raises_after_retries(self, make_client, sleeps):
        client, recorder = make_client(*(httpx.Response(500) for _ in range(3)))
        with pytest.raises(AnalysisClientError):
            client.analyze('p')
        assert len(recorder.requests) == 3
        assert len(sleeps) == 2

    def test_network_error(self, make_client):
        client, _ = make_client(httpx.ConnectError('refused'), retry_attempts=1)
        with pytest.raises(AnalysisClientError) as exc_info:
            client.analyze('p')
        assert exc_info.value.status_code is None

    def test_timeout(self, make_client):
        client, _ = make_client(httpx.ReadTimeout('slow'), retry_attempts=1)
        with pytest.raises(AnalysisClientError, match='timed out'):
            client.analyze('p')

    def test_invalid_format(self, make_client):
        client, _ = make_client(httpx.Response(200, json={'candidates': []}), retry_attempts=1)
        with pytest.raises(AnalysisClientError, match='Invalid response format'):
            client.analyze('p')

    def test_empty_text(self, make_client):
        client, _ = make_client(_ok('   '), retry_attempts=1)
        with pytest.raises(AnalysisClientError, match='Empty response'):
            client.analyze('p')

    def test_non_json_body(self, make_client):
        client, _ = make_client(httpx.Response(200, text='<html>'), retry_attempts=1)
        with pytest.raises(AnalysisClientError, match='non-JSON'):
            client.analyze('p')
