# Query construction for message searches

from typing import Any, Callable, Dict, Iterable, List, Optional

from ..config import DEFAULT_PAGE_SIZE
from ..errors import ConflictingScope, InvalidSeverity
from ..levels import normalize_severity
from ..models import DistributionEntry, FilterCriteria, PageSpec, ScopeOptions, is_blank
from ..timeframes import parse_timestamp, resolve_timeframe

TIMESTAMP_FIELD = "created_at"
DISTRIBUTION_NAME = "distribution_result"
# Large enough to return every distinct term of a field
DISTRIBUTION_SIZE = 99999
# Additional fields are stored with this prefix to keep them apart from built-in ones
ADDITIONAL_FIELD_PREFIX = "_"

DEFAULT_SORT = [{TIMESTAMP_FIELD: "desc"}]
OLDEST_FIRST_SORT = [{TIMESTAMP_FIELD: "asc"}]


def paginate(page: Any = None, size: int = DEFAULT_PAGE_SIZE) -> PageSpec:
	"""Page numbers start at 1. Missing, invalid or non-positive pages become 1."""
	try:
		number = int(page)
	except (TypeError, ValueError):
		number = 1
	if number < 1:
		number = 1
	return PageSpec(size=size, page=number)


def _term(field: str, value: Any) -> Dict[str, Any]:
	return {"term": {field: value}}


def _range(field: str, **bounds) -> Dict[str, Any]:
	return {"range": {field: bounds}}


def _severity_value(value: Any) -> int:
	severity = normalize_severity(value)
	if severity is None:
		raise InvalidSeverity(value)
	return severity


def scope_clauses(scope: Optional[ScopeOptions]) -> List[Dict[str, Any]]:
	clauses = []
	if scope is None:
		return clauses
	if scope.has_stream:
		clauses.append(_term("streams", scope.stream_id))
	if scope.has_host:
		clauses.append(_term("host", scope.hostname))
	return clauses


def _bool_query(must: List[Dict[str, Any]], filters: List[Dict[str, Any]]) -> Dict[str, Any]:
	bool_query: Dict[str, Any] = {}
	if must:
		bool_query["must"] = must
	if filters:
		bool_query["filter"] = filters
	if not bool_query:
		return {"match_all": {}}
	return {"bool": bool_query}


def build_filter_query(
	criteria: FilterCriteria,
	scope: Optional[ScopeOptions] = None,
	resolve: Callable[[str], Any] = resolve_timeframe,
) -> Dict[str, Any]:
	"""Turn quickfilter criteria into a bool query.

	Every present filter adds one must clause. Severity in floor mode and
	time constraints go into range filters instead. ``resolve`` maps a
	relative date token to a (start, end) window.
	"""
	must: List[Dict[str, Any]] = []
	filters: List[Dict[str, Any]] = []

	if not is_blank(criteria.message):
		must.append({"query_string": {"default_field": "message", "query": criteria.message}})

	if not is_blank(criteria.facility):
		must.append(_term("facility", criteria.facility))

	if not is_blank(criteria.severity):
		severity = _severity_value(criteria.severity)
		if criteria.severity_above:
			# This severity or worse
			filters.append(_range("level", lte=severity))
		else:
			must.append(_term("level", severity))

	if not is_blank(criteria.host):
		must.append(_term("host", criteria.host))

	for key, value in (criteria.extra or {}).items():
		if is_blank(key) or is_blank(value):
			continue
		must.append(_term(f"{ADDITIONAL_FIELD_PREFIX}{key}", value))

	must.extend(scope_clauses(scope))

	if not is_blank(criteria.from_time) and not is_blank(criteria.to_time):
		range_from = parse_timestamp(criteria.from_time)
		range_to = parse_timestamp(criteria.to_time)
		filters.append(_range(TIMESTAMP_FIELD, gt=range_from, lt=range_to))

	if not is_blank(criteria.date):
		start, end = resolve(criteria.date)
		filters.append(_range(TIMESTAMP_FIELD, gt=start, lt=end))

	return _bool_query(must, filters)


def build_range_query(range_from: Any, range_to: Any, scope: Optional[ScopeOptions] = None) -> Dict[str, Any]:
	"""Messages created within [from, to], optionally narrowed to a stream or a host."""
	if scope is not None and scope.has_stream and scope.has_host:
		raise ConflictingScope()
	window = _range(
		TIMESTAMP_FIELD,
		gte=parse_timestamp(range_from),
		lte=parse_timestamp(range_to),
	)
	return _bool_query(scope_clauses(scope), [window])


def build_distribution(field: str) -> Dict[str, Any]:
	"""Terms aggregation over every distinct value of ``field``, zero counts included."""
	return {
		DISTRIBUTION_NAME: {
			"terms": {
				"field": field,
				"size": DISTRIBUTION_SIZE,
				"min_doc_count": 0,
			}
		}
	}


def translate_buckets(buckets: Iterable[Dict[str, Any]]) -> List[DistributionEntry]:
	result = []
	for bucket in buckets:
		count = bucket.get("doc_count", 0)
		# Non-matching terms come back with a zero count
		if count == 0:
			continue
		result.append(DistributionEntry(distinct=bucket.get("key"), count=count))
	return result


def build_search_body(
	query: Dict[str, Any],
	page: Optional[PageSpec] = None,
	sort: Optional[List[Dict[str, Any]]] = None,
) -> Dict[str, Any]:
	body: Dict[str, Any] = {"query": query}
	if sort:
		body["sort"] = [dict(item) for item in sort]
	if page is not None:
		body.update(page.to_body())
	return body


def build_count_body(query: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
	# A zero-size search, since the count endpoint is not reliable
	return {
		"query": query or {"match_all": {}},
		"size": 0,
		"track_total_hits": True,
	}
