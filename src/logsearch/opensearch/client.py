# OpenSearch client - using stdlib urllib for fast imports

import json
import logging
import urllib.error
import urllib.parse
import urllib.request
from base64 import b64encode

from ..config import GatewayConfig, load_config

logger = logging.getLogger(__name__)


class OpenSearchError(Exception):
	"""Base exception for OpenSearch errors with user-friendly messages."""
	pass


class ConnectionFailedError(OpenSearchError):
	"""Raised when OpenSearch is not reachable."""
	pass


class AuthenticationError(OpenSearchError):
	"""Raised when authentication fails."""
	pass


class QueryError(OpenSearchError):
	"""Raised when OpenSearch rejects a request (HTTP 4xx)."""

	def __init__(self, status, message):
		self.status = status
		super().__init__(f"HTTP {status}: {message}")


def _quote(segment):
	return urllib.parse.quote(str(segment), safe="")


class LightweightOpenSearchClient:
	"""Minimal OpenSearch client using stdlib urllib for fast imports.

	``timeout`` is passed straight to urlopen; ``None`` waits without limit,
	which large searches and aggregations may need.
	"""

	def __init__(self, host, port, user, password, timeout=None):
		self.base_url = f"http://{host}:{port}"
		self.timeout = timeout
		# Pre-compute auth header
		credentials = b64encode(f"{user}:{password}".encode()).decode('ascii')
		self.headers = {
			"Authorization": f"Basic {credentials}",
			"Content-Type": "application/json",
		}
		self.indices = _IndicesClient(self)

	def _request(self, method, path, body=None):
		"""Make HTTP request to OpenSearch. Returns None on HTTP 404."""
		url = f"{self.base_url}{path}"
		data = json.dumps(body).encode('utf-8') if body is not None else None
		logger.debug("%s %s %s", method, path, data.decode('utf-8') if data else "")
		req = urllib.request.Request(url, data=data, headers=self.headers, method=method)
		try:
			with urllib.request.urlopen(req, timeout=self.timeout) as resp:
				raw = resp.read().decode('utf-8')
				if not raw:
					return {}
				return json.loads(raw)
		except urllib.error.HTTPError as e:
			if e.code == 401:
				raise AuthenticationError("Authentication failed (HTTP 401)")
			if e.code == 404:
				return None
			if 400 <= e.code < 500:
				detail = e.read().decode('utf-8', errors='replace') if e.fp else e.reason
				raise QueryError(e.code, detail)
			raise
		except urllib.error.URLError as e:
			raise ConnectionFailedError(f"Cannot connect: {e.reason}")

	def info(self):
		"""Get cluster info (used for connection check)."""
		return self._request("GET", "/")

	def search(self, index, body):
		"""Search an index."""
		return self._request("POST", f"/{_quote(index)}/_search", body)

	def get(self, index, doc_type, id):
		"""Fetch a single document by id."""
		return self._request("GET", f"/{_quote(index)}/{_quote(doc_type)}/{_quote(id)}")

	def delete(self, index, doc_type, id):
		"""Delete a single document by id."""
		return self._request("DELETE", f"/{_quote(index)}/{_quote(doc_type)}/{_quote(id)}")


class _IndicesClient:
	"""Minimal indices operations."""

	def __init__(self, client):
		self._client = client

	def refresh(self, index):
		"""Refresh an index to make recent changes searchable."""
		return self._client._request("POST", f"/{_quote(index)}/_refresh")

	def analyze(self, index, body):
		"""Run text through the analyzer configured for a field."""
		return self._client._request("POST", f"/{_quote(index)}/_analyze", body)


def get_opensearch_client(cfg: GatewayConfig = None):
	cfg = cfg or load_config()
	return LightweightOpenSearchClient(
		host=cfg.opensearch_host,
		port=cfg.opensearch_port,
		user=cfg.opensearch_user,
		password=cfg.opensearch_pass,
		timeout=cfg.opensearch_timeout,
	)


def check_connection(client, cfg: GatewayConfig):
	"""Check if OpenSearch is reachable. Raises ConnectionFailedError if not."""
	try:
		client.info()
	except ConnectionFailedError:
		raise ConnectionFailedError(
			f"Cannot connect to OpenSearch at {cfg.opensearch_host}:{cfg.opensearch_port}\n"
			f"Make sure OpenSearch is running and accessible."
		)
	except AuthenticationError:
		raise AuthenticationError(
			f"Authentication failed for OpenSearch at {cfg.opensearch_host}:{cfg.opensearch_port}\n"
			f"Check LOGSEARCH_OPENSEARCH_USER and LOGSEARCH_OPENSEARCH_PASS in your .env file."
		)
