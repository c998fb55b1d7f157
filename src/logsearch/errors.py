# Gateway errors raised before or after talking to the search backend


class GatewayError(Exception):
	"""Base exception for query construction and result handling errors."""
	pass


class UnsupportedResultType(GatewayError):
	"""Raised when a backend response cannot be wrapped into domain objects."""

	def __init__(self, shape):
		self.shape = shape
		super().__init__(f"Unsupported result type while wrapping search response: {shape}")


class ConflictingScope(GatewayError):
	"""Raised when stream and host scoping are both requested."""

	def __init__(self, message="You can only pass stream_id OR hostname"):
		super().__init__(message)


class InvalidTimeFormat(GatewayError):
	"""Raised when a from/to timestamp or timeframe token cannot be parsed."""

	def __init__(self, value, reason=None):
		self.value = value
		message = f"Invalid time value: {value!r}"
		if reason:
			message += f" ({reason})"
		super().__init__(message)


class InvalidSeverity(GatewayError):
	"""Raised when a severity filter is neither a syslog level nor a number."""

	def __init__(self, value):
		self.value = value
		super().__init__(f"Unknown severity: {value!r}")
