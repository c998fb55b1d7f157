# Configuration loading for logsearch

import os
from dataclasses import dataclass
from typing import Optional

DEFAULT_INDEX_NAME = "graylog2"
DEFAULT_DOCUMENT_TYPE = "_doc"
DEFAULT_PAGE_SIZE = 100

# Lazy load dotenv - only when config is first accessed
_dotenv_loaded = False
_custom_dotenv_path = None

def _getenv(name, default):
	value = os.getenv(name)
	return value if value else default

def _parse_timeout(value) -> Optional[float]:
	# Unset, zero or negative means wait forever
	if value is None or str(value).strip().lower() in ("", "none", "0"):
		return None
	timeout = float(value)
	return timeout if timeout > 0 else None

@dataclass(frozen=True)
class GatewayConfig:
	"""Process-wide settings, read once from the environment."""
	opensearch_host: str = "localhost"
	opensearch_port: int = 9200
	opensearch_user: str = "admin"
	opensearch_pass: str = "admin"
	opensearch_timeout: Optional[float] = None
	index_name: str = DEFAULT_INDEX_NAME
	document_type: str = DEFAULT_DOCUMENT_TYPE
	page_size: int = DEFAULT_PAGE_SIZE

	@classmethod
	def from_env(cls) -> "GatewayConfig":
		page_size = int(_getenv("LOGSEARCH_PAGE_SIZE", str(DEFAULT_PAGE_SIZE)))
		if page_size < 1:
			raise ValueError(f"LOGSEARCH_PAGE_SIZE must be positive, got {page_size}")
		return cls(
			opensearch_host=_getenv("LOGSEARCH_OPENSEARCH_HOST", "localhost"),
			opensearch_port=int(_getenv("LOGSEARCH_OPENSEARCH_PORT", "9200")),
			opensearch_user=_getenv("LOGSEARCH_OPENSEARCH_USER", "admin"),
			opensearch_pass=_getenv("LOGSEARCH_OPENSEARCH_PASS", "admin"),
			opensearch_timeout=_parse_timeout(os.getenv("LOGSEARCH_OPENSEARCH_TIMEOUT")),
			index_name=_getenv("LOGSEARCH_INDEX", DEFAULT_INDEX_NAME),
			document_type=_getenv("LOGSEARCH_DOCUMENT_TYPE", DEFAULT_DOCUMENT_TYPE),
			page_size=page_size,
		)

def set_dotenv_path(path: str):
	"""Set a custom .env file path to load. Must be called before load_config()."""
	global _custom_dotenv_path, _dotenv_loaded
	_custom_dotenv_path = path
	_dotenv_loaded = False  # Reset to force reload with new path

def load_config() -> GatewayConfig:
	"""Return a config object with all settings loaded."""
	global _dotenv_loaded, _custom_dotenv_path
	if not _dotenv_loaded:
		from dotenv import load_dotenv, find_dotenv
		dotenv_path = os.getenv("DOTENV_PATH") or _custom_dotenv_path
		if dotenv_path:
			# Explicit files take precedence over the inherited environment
			load_dotenv(dotenv_path, override=True)
		else:
			# Search for .env file in current directory and parents
			dotenv_path = find_dotenv(usecwd=True)
			if dotenv_path:
				load_dotenv(dotenv_path)
		_dotenv_loaded = True
	return GatewayConfig.from_env()
