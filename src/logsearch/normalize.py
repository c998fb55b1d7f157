# Wrapping of raw search responses into domain objects

import logging
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from .errors import UnsupportedResultType
from .models import DistributionEntry, Message, MessageResult
from .opensearch.queries import DISTRIBUTION_NAME, translate_buckets

logger = logging.getLogger(__name__)

Decoder = Callable[[Dict[str, Any]], Any]


class ResponseShape(Enum):
	NULL = "null"
	SINGLE_ITEM = "single_item"
	COLLECTION = "collection"
	AGGREGATION = "aggregation"
	UNKNOWN = "unknown"


def classify_response(response: Any) -> ResponseShape:
	if response is None:
		return ResponseShape.NULL
	if not isinstance(response, dict):
		return ResponseShape.UNKNOWN
	if response.get("found") is False:
		return ResponseShape.NULL
	if "_source" in response:
		return ResponseShape.SINGLE_ITEM
	if isinstance(response.get("aggregations"), dict):
		return ResponseShape.AGGREGATION
	if _has_hit_list(response):
		return ResponseShape.COLLECTION
	return ResponseShape.UNKNOWN


def _shape_identity(response: Any, shape: ResponseShape) -> str:
	if isinstance(response, dict):
		keys = ", ".join(sorted(str(key) for key in response.keys()))
		return f"{shape.value} ({type(response).__name__} with keys: {keys})"
	return f"{shape.value} ({type(response).__name__})"


def _has_hit_list(response: Dict[str, Any]) -> bool:
	hits = response.get("hits")
	return isinstance(hits, dict) and isinstance(hits.get("hits"), list)


def total_hits(response: Optional[Dict[str, Any]]) -> int:
	"""Read hits.total, which is either a number or {"value": n}. A missing index counts 0."""
	if response is None:
		return 0
	total = response.get("hits", {}).get("total", 0)
	if isinstance(total, dict):
		total = total.get("value", 0)
	return int(total or 0)


def _unsupported(response: Any, shape: ResponseShape) -> UnsupportedResultType:
	identity = _shape_identity(response, shape)
	logger.error("Unsupported result type while trying to wrap search response: %s", identity)
	return UnsupportedResultType(identity)


def wrap(response: Any, decode: Decoder = Message.from_hit) -> Optional[Any]:
	"""Turn a response into one decoded message, a MessageResult or None."""
	shape = classify_response(response)
	if shape is ResponseShape.NULL:
		return None
	if shape is ResponseShape.SINGLE_ITEM:
		return decode(response)
	if shape is ResponseShape.COLLECTION:
		return wrap_collection(response, decode)
	# Searches carrying aggregations still return their hits
	if shape is ResponseShape.AGGREGATION and _has_hit_list(response):
		return wrap_collection(response, decode)
	raise _unsupported(response, shape)


def wrap_collection(response: Dict[str, Any], decode: Decoder = Message.from_hit) -> MessageResult:
	hits = response["hits"]["hits"]
	return MessageResult(
		messages=[decode(hit) for hit in hits],
		total_result_count=total_hits(response),
	)


def wrap_distribution(response: Any, name: str = DISTRIBUTION_NAME) -> List[DistributionEntry]:
	shape = classify_response(response)
	if shape is not ResponseShape.AGGREGATION:
		raise _unsupported(response, shape)
	aggregation = response["aggregations"].get(name)
	if not isinstance(aggregation, dict) or not isinstance(aggregation.get("buckets"), list):
		raise _unsupported(response, ResponseShape.UNKNOWN)
	return translate_buckets(aggregation["buckets"])
