"""客户端适配器模块.

ElasticSearchClient 把索引/模板管理、文档读写和批量写入翻译为对
Elasticsearch REST API 的调用，并为所有索引名加上命名空间前缀。

示例用法:
    >>> from elasticlink.client import ElasticSearchClient
    >>> client = ElasticSearchClient("es1:9200,es2:9200", namespace="prod")
    >>> client.connect()
    >>> client.is_exists_index("segment")
    False
    >>> client.shutdown()
"""

from .exceptions import VersionConflictError
from .models import DocumentVersion, GetResult, MultiGetResult
from .tool import ElasticSearchClient

__all__ = [
    "ElasticSearchClient",
    "GetResult",
    "MultiGetResult",
    "DocumentVersion",
    "VersionConflictError",
]
