import os
import sys

import pytest

PROJECT_ROOT = os.path.dirname(os.path.dirname(__file__))
SRC_DIR = os.path.join(PROJECT_ROOT, "src")
if SRC_DIR not in sys.path:
	sys.path.insert(0, SRC_DIR)

from logsearch.config import GatewayConfig


class FakeIndices:
	def __init__(self, parent):
		self.parent = parent
		self.refreshed = []
		self.analyze_response = None
		self.analyze_error = None

	def refresh(self, index):
		self.parent.calls.append(("refresh", index))
		self.refreshed.append(index)
		return {"_shards": {"total": 1, "successful": 1, "failed": 0}}

	def analyze(self, index, body):
		self.parent.calls.append(("analyze", index, body))
		if self.analyze_error is not None:
			raise self.analyze_error
		return self.analyze_response


class FakeClient:
	"""Records every request and replays canned responses."""

	def __init__(self, search_response=None, get_response=None, delete_response=None):
		self.search_response = search_response
		self.get_response = get_response
		self.delete_response = delete_response
		self.calls = []
		self.indices = FakeIndices(self)

	def search(self, index, body):
		self.calls.append(("search", index, body))
		return self.search_response

	def get(self, index, doc_type, id):
		self.calls.append(("get", index, doc_type, id))
		return self.get_response

	def delete(self, index, doc_type, id):
		self.calls.append(("delete", index, doc_type, id))
		return self.delete_response

	@property
	def search_bodies(self):
		return [call[2] for call in self.calls if call[0] == "search"]


def make_hit(doc_id, **source):
	return {"_index": "graylog2", "_id": doc_id, "_score": None, "_source": source}


def make_collection(hits, total=None):
	if total is None:
		total = len(hits)
	return {
		"took": 1,
		"timed_out": False,
		"hits": {"total": {"value": total, "relation": "eq"}, "hits": hits},
	}


@pytest.fixture
def fake_client():
	return FakeClient()


@pytest.fixture
def gateway_config():
	return GatewayConfig(index_name="graylog2-test", document_type="_doc", page_size=10)
