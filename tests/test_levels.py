import pytest

from logsearch.levels import normalize_severity, severity_name


@pytest.mark.parametrize("value,expected", [
	(3, 3),
	("3", 3),
	(" 6 ", 6),
	("error", 3),
	("ERR", 3),
	("warn", 4),
	("Debug", 7),
	("emerg", 0),
])
def test_normalize_severity(value, expected):
	assert normalize_severity(value) == expected


@pytest.mark.parametrize("value", [None, "", "loud", 8, "12", True])
def test_normalize_severity_rejects_unknown(value):
	assert normalize_severity(value) is None


def test_severity_name():
	assert severity_name(2) == "critical"
	assert severity_name("bogus") is None
