"""批量写入模块.

该模块提供后台批量写入功能，包括：
- 预构建的写入请求（BulkOperation）
- 按操作数、字节数、时间间隔自动刷新的 BulkProcessor
- 批次失败的指数退避重试
- 按批次结果通知的监听器接口与结果队列

示例用法:
    >>> from elasticlink.bulk import BulkProcessor, BulkProcessorConfig
    >>> config = BulkProcessorConfig(bulk_actions=500, flush_interval=5)
    >>> with BulkProcessor(es_client, config) as processor:
    ...     processor.add(client.prepare_insert("users", "1", {"name": "Alice"}))
"""

from .exceptions import (
    BulkOperationError,
    BulkProcessorClosedError,
    BulkRetryExhaustedError,
    BulkValidationError,
)
from .listeners import BulkListener, LoggingBulkListener, QueueBulkListener
from .models import (
    BackoffPolicy,
    BulkAction,
    BulkErrorItem,
    BulkOperation,
    BulkOutcome,
    BulkProcessorConfig,
    BulkReport,
)
from .tool import BulkProcessor

__all__ = [
    "BulkAction",
    "BulkOperation",
    "BulkErrorItem",
    "BulkOutcome",
    "BulkReport",
    "BackoffPolicy",
    "BulkProcessorConfig",
    "BulkProcessor",
    "BulkListener",
    "LoggingBulkListener",
    "QueueBulkListener",
    "BulkOperationError",
    "BulkValidationError",
    "BulkRetryExhaustedError",
    "BulkProcessorClosedError",
]
