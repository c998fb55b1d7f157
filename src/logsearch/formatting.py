# Display helpers for the CLI

from datetime import datetime, timezone
from typing import Any

from .errors import InvalidTimeFormat
from .levels import severity_name
from .timeframes import parse_timestamp


def format_timestamp(value: Any, use_utc: bool = False) -> str:
	"""Render an epoch or ISO timestamp as local (or UTC) time."""
	if value is None or value == "":
		return ""
	try:
		epoch = parse_timestamp(value)
	except InvalidTimeFormat:
		return str(value)
	dt = datetime.fromtimestamp(epoch, tz=timezone.utc)
	if not use_utc:
		dt = dt.astimezone()
	return dt.strftime("%Y-%m-%d %H:%M:%S")


def format_message(message, use_utc: bool = False) -> str:
	parts = [
		message.id,
		format_timestamp(message.created_at, use_utc=use_utc),
		severity_name(message.level),
		message.host,
		message.facility,
		message.message,
	]
	return " ".join(str(part) for part in parts if part)
