# Message gateway - public search operations against the message index

import copy
import logging
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from .config import GatewayConfig
from .models import DistributionEntry, FilterCriteria, Message, ScopeOptions
from .normalize import Decoder, total_hits, wrap, wrap_distribution
from .opensearch.client import QueryError
from .opensearch.queries import (
	DEFAULT_SORT,
	OLDEST_FIRST_SORT,
	build_count_body,
	build_distribution,
	build_filter_query,
	build_range_query,
	build_search_body,
	paginate,
	scope_clauses,
)
from .timeframes import resolve_timeframe

logger = logging.getLogger(__name__)


class MessageGateway:
	"""Builds message queries, runs them through ``client`` and wraps the results.

	``decode`` maps one raw document to a domain message and
	``resolve_timeframe`` maps a relative date token to a (start, end) window.
	"""

	def __init__(
		self,
		client,
		config: GatewayConfig,
		decode: Decoder = Message.from_hit,
		resolve_timeframe: Callable[[str], Any] = resolve_timeframe,
	):
		self.client = client
		self.config = config
		self.decode = decode
		self.resolve_timeframe = resolve_timeframe

	@property
	def index_name(self) -> str:
		return self.config.index_name

	def _search(self, body: Dict[str, Any]) -> Any:
		logger.debug("Searching %s: %s", self.index_name, body)
		return self.client.search(index=self.index_name, body=body)

	def _paginated(self, query: Dict[str, Any], page: Any) -> Any:
		spec = paginate(page, self.config.page_size)
		return wrap(self._search(build_search_body(query, spec, DEFAULT_SORT)), self.decode)

	def all_paginated(self, page: Any = 1):
		return self._paginated({"match_all": {}}, page)

	def all_of_stream_paginated(self, stream_id: str, page: Any = 1):
		return self._paginated(build_filter_query(FilterCriteria(), ScopeOptions(stream_id=stream_id)), page)

	def all_of_host_paginated(self, hostname: str, page: Any = 1):
		return self._paginated(build_filter_query(FilterCriteria(), ScopeOptions(hostname=hostname)), page)

	def retrieve_by_id(self, id: str) -> Optional[Any]:
		"""Fetch one message. Missing documents give None."""
		response = self.client.get(self.index_name, self.config.document_type, id)
		return wrap(response, self.decode)

	def dynamic_search(self, query: Dict[str, Any], with_default_sort: bool = False):
		"""Run a caller-built search body, optionally sorted newest first."""
		body = copy.deepcopy(query)
		if with_default_sort:
			body["sort"] = [dict(item) for item in DEFAULT_SORT]
		return wrap(self._search(body), self.decode)

	def dynamic_distribution(self, target: str, query: Dict[str, Any]) -> List[DistributionEntry]:
		"""Count messages per distinct value of ``target`` within ``query``."""
		body = copy.deepcopy(query)
		body["aggs"] = build_distribution(target)
		body.setdefault("size", 0)
		return wrap_distribution(self._search(body))

	def all_by_quickfilter(
		self,
		filters: Union[FilterCriteria, Mapping[str, Any]],
		page: Any = 1,
		scope: Optional[ScopeOptions] = None,
	):
		if not isinstance(filters, FilterCriteria):
			filters = FilterCriteria.from_request(filters)
		query = build_filter_query(filters, scope, self.resolve_timeframe)
		return self._paginated(query, page)

	def total_count(self) -> int:
		return total_hits(self._search(build_count_body()))

	def stream_count(self, stream_id: str) -> int:
		query = {"bool": {"must": scope_clauses(ScopeOptions(stream_id=stream_id))}}
		return total_hits(self._search(build_count_body(query)))

	def oldest_message(self) -> Optional[Any]:
		body = build_search_body({"match_all": {}}, sort=OLDEST_FIRST_SORT)
		body["size"] = 1
		result = wrap(self._search(body), self.decode)
		if result is None or len(result) == 0:
			return None
		return result[0]

	def all_in_range(self, page: Any, range_from: Any, range_to: Any, scope: Optional[ScopeOptions] = None):
		"""Messages created within [from, to]. Only paginated when a page is given."""
		query = build_range_query(range_from, range_to, scope)
		spec = paginate(page, self.config.page_size) if page is not None else None
		return wrap(self._search(build_search_body(query, spec, DEFAULT_SORT)), self.decode)

	def delete_message(self, id: str) -> bool:
		"""Delete one message and refresh the index. Returns False if not acknowledged."""
		result = self.client.delete(self.index_name, self.config.document_type, id)
		self.client.indices.refresh(index=self.index_name)
		if not isinstance(result, dict):
			return False
		return result.get("ok") is True or result.get("result") == "deleted"

	def analyze(self, text: str, field: str = "message") -> List[str]:
		"""Return how ``text`` is broken down into terms for ``field``.

		``field`` is sent to the analyze API as given, so pass the full mapped
		field name (e.g. "message" or "full_message"), not a type-prefixed one.
		"""
		try:
			result = self.client.indices.analyze(
				index=self.index_name,
				body={"field": field, "text": text},
			)
		except QueryError as e:
			logger.warning("Cannot analyze text for field %s: %s", field, e)
			return []
		if not result:
			return []
		return [token["token"] for token in result.get("tokens", [])]
