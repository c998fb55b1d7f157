# Domain objects for search criteria and search results

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Mapping, Optional


def is_blank(value: Any) -> bool:
	if value is None:
		return True
	if isinstance(value, str):
		return not value.strip()
	if isinstance(value, (list, tuple, dict, set)):
		return not value
	return False


def _present(value: Any) -> Any:
	return None if is_blank(value) else value


def _flag(value: Any) -> bool:
	if isinstance(value, bool):
		return value
	return not is_blank(value)


def extract_additional_fields(filters: Mapping[str, Any]) -> Dict[str, Any]:
	"""Pull additional field filters out of a request mapping.

	Supports the form layout ``{"additional": {"keys": [...], "values": [...]}}``.
	Pairs with a blank key or value are skipped.
	"""
	additional = filters.get("additional")
	if not isinstance(additional, Mapping):
		return {}
	keys = additional.get("keys") or []
	values = additional.get("values") or []
	fields: Dict[str, Any] = {}
	for key, value in zip(keys, values):
		if is_blank(key) or is_blank(value):
			continue
		fields[str(key).strip()] = value
	return fields


@dataclass(frozen=True)
class FilterCriteria:
	"""Named quickfilter values. Blank values are treated as absent."""
	message: Optional[str] = None
	facility: Optional[str] = None
	severity: Any = None
	severity_above: bool = False
	host: Optional[str] = None
	extra: Dict[str, Any] = field(default_factory=dict)
	from_time: Any = None
	to_time: Any = None
	date: Optional[str] = None

	@classmethod
	def from_request(cls, filters: Mapping[str, Any]) -> "FilterCriteria":
		extra = dict(filters.get("extra") or {})
		extra.update(extract_additional_fields(filters))
		return cls(
			message=_present(filters.get("message")),
			facility=_present(filters.get("facility")),
			severity=_present(filters.get("severity")),
			severity_above=_flag(filters.get("severity_above")),
			host=_present(filters.get("host")),
			extra={key: value for key, value in extra.items() if not is_blank(key) and not is_blank(value)},
			from_time=_present(filters.get("from")),
			to_time=_present(filters.get("to")),
			date=_present(filters.get("date")),
		)


@dataclass(frozen=True)
class ScopeOptions:
	stream_id: Optional[str] = None
	hostname: Optional[str] = None

	@property
	def has_stream(self) -> bool:
		return not is_blank(self.stream_id)

	@property
	def has_host(self) -> bool:
		return not is_blank(self.hostname)


@dataclass(frozen=True)
class PageSpec:
	size: int
	page: int

	@property
	def offset(self) -> int:
		return (self.page - 1) * self.size

	def to_body(self) -> Dict[str, int]:
		return {"size": self.size, "from": self.offset}


@dataclass
class Message:
	"""A log message decoded from one index document."""
	id: Optional[str]
	message: Optional[str] = None
	full_message: Optional[str] = None
	host: Optional[str] = None
	facility: Optional[str] = None
	level: Optional[int] = None
	file: Optional[str] = None
	line: Optional[int] = None
	created_at: Optional[float] = None
	streams: List[str] = field(default_factory=list)
	additional_fields: Dict[str, Any] = field(default_factory=dict)

	@classmethod
	def from_hit(cls, hit: Mapping[str, Any]) -> "Message":
		"""Decode a get response or a single search hit."""
		source = hit.get("_source") or {}
		additional = {
			key[1:]: value
			for key, value in source.items()
			if key.startswith("_") and len(key) > 1
		}
		streams = source.get("streams") or []
		if isinstance(streams, str):
			streams = [streams]
		return cls(
			id=hit.get("_id"),
			message=source.get("message"),
			full_message=source.get("full_message"),
			host=source.get("host"),
			facility=source.get("facility"),
			level=source.get("level"),
			file=source.get("file"),
			line=source.get("line"),
			created_at=source.get("created_at"),
			streams=list(streams),
			additional_fields=additional,
		)


@dataclass
class MessageResult:
	"""One page of decoded messages plus the total number of matches."""
	messages: List[Any] = field(default_factory=list)
	total_result_count: int = 0

	def __iter__(self) -> Iterator[Any]:
		return iter(self.messages)

	def __len__(self) -> int:
		return len(self.messages)

	def __getitem__(self, index):
		return self.messages[index]


@dataclass(frozen=True)
class DistributionEntry:
	distinct: Any
	count: int
