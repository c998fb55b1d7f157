# Absolute timestamp parsing and relative timeframe resolution

import re
from datetime import datetime, timedelta, timezone
from typing import Any, NamedTuple, Optional

from .errors import InvalidTimeFormat

_UNITS = {
	"second": 1,
	"minute": 60,
	"hour": 3600,
	"day": 86400,
	"week": 604800,
}

_LAST_RE = re.compile(r"^(?:last|past)\s+(?:(\d+)\s+)?([a-z]+?)s?$")
_AGO_RE = re.compile(r"^(\d+)\s+([a-z]+?)s?\s+ago$")
_SHORT_RE = re.compile(r"^(\d+)([smhdw])$")
_SHORT_UNITS = {"s": "second", "m": "minute", "h": "hour", "d": "day", "w": "week"}


class TimeWindow(NamedTuple):
	"""Half-open interval [start, end) in epoch seconds."""
	start: int
	end: int


def _utc(dt: datetime) -> datetime:
	# Naive values are taken as UTC
	if dt.tzinfo is None:
		return dt.replace(tzinfo=timezone.utc)
	return dt


def parse_timestamp(value: Any) -> int:
	"""Parse an absolute timestamp into epoch seconds.

	Accepts epoch numbers, numeric strings and ISO 8601 strings (a trailing
	``Z`` and a space separator are allowed). Raises InvalidTimeFormat
	otherwise.
	"""
	if value is None or isinstance(value, bool):
		raise InvalidTimeFormat(value, "missing")
	if isinstance(value, (int, float)):
		return int(value)
	if isinstance(value, datetime):
		return int(_utc(value).timestamp())
	text = str(value).strip()
	if not text:
		raise InvalidTimeFormat(value, "empty")
	try:
		return int(float(text))
	except ValueError:
		pass
	clean = text.replace("Z", "+00:00")
	try:
		parsed = datetime.fromisoformat(clean)
	except ValueError as e:
		raise InvalidTimeFormat(value, str(e)) from e
	return int(_utc(parsed).timestamp())


def _start_of_day(now: datetime) -> datetime:
	return now.replace(hour=0, minute=0, second=0, microsecond=0)


def resolve_timeframe(token: str, now: Optional[datetime] = None) -> TimeWindow:
	"""Resolve a relative date token such as "today" or "last 5 minutes"."""
	if not isinstance(token, str) or not token.strip():
		raise InvalidTimeFormat(token, "empty timeframe")
	now = _utc(now or datetime.now(timezone.utc))
	text = " ".join(token.strip().lower().split())

	if text == "today":
		start = _start_of_day(now)
		return TimeWindow(int(start.timestamp()), int((start + timedelta(days=1)).timestamp()))
	if text == "yesterday":
		end = _start_of_day(now)
		return TimeWindow(int((end - timedelta(days=1)).timestamp()), int(end.timestamp()))

	amount = None
	unit = None
	for pattern in (_LAST_RE, _AGO_RE):
		match = pattern.match(text)
		if match:
			amount = int(match.group(1) or 1)
			unit = match.group(2)
			break
	if unit is None:
		match = _SHORT_RE.match(text)
		if match:
			amount = int(match.group(1))
			unit = _SHORT_UNITS[match.group(2)]
	if unit not in _UNITS or not amount:
		raise InvalidTimeFormat(token, "unknown timeframe")

	end = int(now.timestamp())
	return TimeWindow(end - amount * _UNITS[unit], end + 1)
