"""环境变量配置模块.

配置加载顺序（优先级从高到低）：
  1. 环境变量（ELASTICLINK_ 前缀）
  2. .env 文件
  3. 默认值
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .bulk import BulkProcessorConfig
from .connection import ConnectionConfig


class ElasticLinkSettings(BaseSettings):
    """elasticlink 配置.

    示例:
        >>> settings = ElasticLinkSettings(cluster_nodes="es1:9200,es2:9200")
        >>> client = ElasticSearchClient.from_settings(settings)
        >>> client.connect()
        >>> processor = client.create_bulk_processor_with_config(settings.bulk_config())
    """

    model_config = SettingsConfigDict(
        env_prefix="ELASTICLINK_",
        env_file=".env",
        extra="ignore",
    )

    cluster_nodes: str = Field(default="localhost:9200", description="逗号分隔的 host:port 列表")
    namespace: str = Field(default="", description="索引名命名空间前缀")
    user: str | None = Field(default=None, description="Basic Auth 用户名")
    password: str | None = Field(default=None, description="Basic Auth 密码")
    scheme: str = Field(default="http", description="节点协议")
    request_timeout: float = Field(default=30, description="请求超时时间（秒）")

    bulk_actions: int = Field(default=1000, description="每批最大操作数")
    bulk_size: float = Field(default=20, description="每批最大字节数（MB）")
    flush_interval: float | None = Field(default=10, description="定时刷新间隔（秒）")
    concurrent_requests: int = Field(default=2, description="最大并发批次数")

    def connection_config(self) -> ConnectionConfig:
        return ConnectionConfig(request_timeout=self.request_timeout, scheme=self.scheme)

    def bulk_config(self) -> BulkProcessorConfig:
        return BulkProcessorConfig(
            bulk_actions=self.bulk_actions,
            bulk_size=self.bulk_size,
            flush_interval=self.flush_interval,
            concurrent_requests=self.concurrent_requests,
        )
