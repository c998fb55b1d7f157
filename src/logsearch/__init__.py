# logsearch - message search gateway for OpenSearch

from .config import GatewayConfig, load_config
from .errors import ConflictingScope, GatewayError, InvalidSeverity, InvalidTimeFormat, UnsupportedResultType
from .gateway import MessageGateway
from .models import DistributionEntry, FilterCriteria, Message, MessageResult, ScopeOptions

__all__ = [
	"ConflictingScope",
	"DistributionEntry",
	"FilterCriteria",
	"GatewayConfig",
	"GatewayError",
	"InvalidSeverity",
	"InvalidTimeFormat",
	"Message",
	"MessageGateway",
	"MessageResult",
	"ScopeOptions",
	"UnsupportedResultType",
	"load_config",
]
