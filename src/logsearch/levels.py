# Syslog severity levels

from typing import Any, Optional

# Lower numbers are more severe
SEVERITIES = {
	0: "emergency",
	1: "alert",
	2: "critical",
	3: "error",
	4: "warning",
	5: "notice",
	6: "info",
	7: "debug",
}

_ALIASES = {
	"emerg": 0,
	"panic": 0,
	"crit": 2,
	"err": 3,
	"warn": 4,
	"informational": 6,
}

_BY_NAME = {name: number for number, name in SEVERITIES.items()}
_BY_NAME.update(_ALIASES)


def normalize_severity(value: Any) -> Optional[int]:
	"""Return the numeric syslog severity for a number, numeric string or name."""
	if value is None or isinstance(value, bool):
		return None
	if isinstance(value, int):
		return value if value in SEVERITIES else None
	text = str(value).strip().lower()
	if not text:
		return None
	if text.isdigit():
		number = int(text)
		return number if number in SEVERITIES else None
	return _BY_NAME.get(text)


def severity_name(value: Any) -> Optional[str]:
	number = normalize_severity(value)
	if number is None:
		return None
	return SEVERITIES[number]
