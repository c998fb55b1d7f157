import io
import json
import urllib.error
import urllib.request

import pytest

from logsearch.config import GatewayConfig
from logsearch.opensearch.client import (
	AuthenticationError,
	ConnectionFailedError,
	LightweightOpenSearchClient,
	QueryError,
	check_connection,
	get_opensearch_client,
)


class FakeResponse:
	def __init__(self, payload):
		self._raw = json.dumps(payload).encode("utf-8") if payload is not None else b""

	def read(self):
		return self._raw

	def __enter__(self):
		return self

	def __exit__(self, *exc):
		return False


class Recorder:
	def __init__(self, payload=None, error=None):
		self.payload = payload
		self.error = error
		self.requests = []

	def __call__(self, req, timeout=None):
		self.requests.append((req, timeout))
		if self.error is not None:
			raise self.error
		return FakeResponse(self.payload)


def _http_error(code, body=b"{}"):
	return urllib.error.HTTPError("http://localhost:9200/x", code, "error", {}, io.BytesIO(body))


@pytest.fixture
def client():
	return LightweightOpenSearchClient("localhost", 9200, "admin", "secret", timeout=None)


def test_search_posts_json_body(monkeypatch, client):
	recorder = Recorder(payload={"hits": {"total": 0, "hits": []}})
	monkeypatch.setattr(urllib.request, "urlopen", recorder)
	response = client.search(index="graylog2", body={"query": {"match_all": {}}})
	assert response == {"hits": {"total": 0, "hits": []}}
	req, timeout = recorder.requests[0]
	assert req.get_method() == "POST"
	assert req.full_url == "http://localhost:9200/graylog2/_search"
	assert json.loads(req.data) == {"query": {"match_all": {}}}
	assert req.get_header("Authorization").startswith("Basic ")
	assert timeout is None


def test_get_and_delete_paths(monkeypatch, client):
	recorder = Recorder(payload={"_id": "a b"})
	monkeypatch.setattr(urllib.request, "urlopen", recorder)
	client.get("graylog2", "_doc", "a b")
	client.delete("graylog2", "_doc", "a b")
	(get_req, _), (delete_req, _) = recorder.requests
	assert get_req.get_method() == "GET"
	assert get_req.full_url == "http://localhost:9200/graylog2/_doc/a%20b"
	assert delete_req.get_method() == "DELETE"
	assert delete_req.data is None


def test_indices_refresh_and_analyze(monkeypatch, client):
	recorder = Recorder(payload={"tokens": []})
	monkeypatch.setattr(urllib.request, "urlopen", recorder)
	client.indices.refresh(index="graylog2")
	client.indices.analyze(index="graylog2", body={"field": "message", "text": "x"})
	urls = [req.full_url for req, _ in recorder.requests]
	assert urls == [
		"http://localhost:9200/graylog2/_refresh",
		"http://localhost:9200/graylog2/_analyze",
	]


def test_timeout_is_passed_through(monkeypatch):
	recorder = Recorder(payload={})
	monkeypatch.setattr(urllib.request, "urlopen", recorder)
	LightweightOpenSearchClient("localhost", 9200, "u", "p", timeout=12).info()
	assert recorder.requests[0][1] == 12


def test_empty_body_is_empty_dict(monkeypatch, client):
	monkeypatch.setattr(urllib.request, "urlopen", Recorder(payload=None))
	assert client.info() == {}


def test_not_found_is_none(monkeypatch, client):
	monkeypatch.setattr(urllib.request, "urlopen", Recorder(error=_http_error(404)))
	assert client.get("graylog2", "_doc", "missing") is None


def test_bad_request_raises_query_error(monkeypatch, client):
	error = _http_error(400, b'{"error": "illegal_argument_exception"}')
	monkeypatch.setattr(urllib.request, "urlopen", Recorder(error=error))
	with pytest.raises(QueryError) as excinfo:
		client.indices.analyze(index="graylog2", body={"field": "nope", "text": "x"})
	assert excinfo.value.status == 400
	assert "illegal_argument_exception" in str(excinfo.value)


def test_unauthorized_raises(monkeypatch, client):
	monkeypatch.setattr(urllib.request, "urlopen", Recorder(error=_http_error(401)))
	with pytest.raises(AuthenticationError):
		client.info()


def test_server_errors_propagate(monkeypatch, client):
	monkeypatch.setattr(urllib.request, "urlopen", Recorder(error=_http_error(503)))
	with pytest.raises(urllib.error.HTTPError):
		client.search(index="graylog2", body={})


def test_unreachable_raises_connection_failed(monkeypatch, client):
	monkeypatch.setattr(urllib.request, "urlopen", Recorder(error=urllib.error.URLError("refused")))
	with pytest.raises(ConnectionFailedError):
		client.info()


def test_check_connection_mentions_host(monkeypatch, client):
	monkeypatch.setattr(urllib.request, "urlopen", Recorder(error=urllib.error.URLError("refused")))
	cfg = GatewayConfig(opensearch_host="search.internal", opensearch_port=9201)
	with pytest.raises(ConnectionFailedError) as excinfo:
		check_connection(client, cfg)
	assert "search.internal:9201" in str(excinfo.value)


def test_get_opensearch_client_uses_config():
	cfg = GatewayConfig(opensearch_host="es", opensearch_port=9300, opensearch_timeout=None)
	client = get_opensearch_client(cfg)
	assert client.base_url == "http://es:9300"
	assert client.timeout is None
