"""核心模块导出."""

from elasticlink.core.naming import format_index_name, template_pattern
from elasticlink.core.status import StatusKind, StatusOutcome, classify_status

__all__ = [
    "format_index_name",
    "template_pattern",
    "StatusKind",
    "StatusOutcome",
    "classify_status",
]
