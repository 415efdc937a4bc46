"""elasticlink - 带命名空间的 Elasticsearch 客户端适配器.

主要功能:
    - ElasticSearchClient: 索引/模板管理、文档读写、按时间范围删除
    - BulkProcessor: 按数量、大小、时间间隔自动刷新的后台批量写入
    - ElasticLinkSettings: 基于环境变量的配置

使用示例:
    from elasticlink import ElasticSearchClient

    with ElasticSearchClient("localhost:9200", namespace="prod") as client:
        client.force_insert("segment", "abc", {"time_bucket": 1000})
        processor = client.create_bulk_processor(1000, 5, 10, 2)
        processor.add(client.prepare_insert("segment", "def", {"time_bucket": 1001}))
        processor.close()
"""

__version__ = "0.1.0"

# 导出客户端
from elasticlink.client import (
    DocumentVersion,
    ElasticSearchClient,
    GetResult,
    MultiGetResult,
    VersionConflictError,
)

# 导出批量写入组件
from elasticlink.bulk import (
    BackoffPolicy,
    BulkListener,
    BulkOperation,
    BulkOutcome,
    BulkProcessor,
    BulkProcessorConfig,
    BulkReport,
    QueueBulkListener,
)

# 导出配置
from elasticlink.config import ElasticLinkSettings
from elasticlink.connection import ClusterConnectionError, ConnectionConfig

# 导出异常
from elasticlink.exceptions import (
    ClientNotConnectedError,
    ConfigurationError,
    ElasticLinkError,
    UnexpectedStatusError,
)

__all__ = [
    # 版本
    "__version__",
    # 客户端
    "ElasticSearchClient",
    "GetResult",
    "MultiGetResult",
    "DocumentVersion",
    # 批量写入
    "BulkProcessor",
    "BulkProcessorConfig",
    "BackoffPolicy",
    "BulkOperation",
    "BulkOutcome",
    "BulkReport",
    "BulkListener",
    "QueueBulkListener",
    # 配置
    "ElasticLinkSettings",
    "ConnectionConfig",
    # 异常
    "ElasticLinkError",
    "ConfigurationError",
    "ClientNotConnectedError",
    "ClusterConnectionError",
    "UnexpectedStatusError",
    "VersionConflictError",
]
