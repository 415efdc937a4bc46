"""集群连接工具模块.

提供节点字符串解析函数 parse_cluster_nodes 和连接句柄 ClusterConnection。
ClusterConnection 由适配器显式持有，open() 建立连接并探活，close() 释放
连接池资源，也可以作为上下文管理器使用。

使用示例:
    from elasticlink.connection import ClusterConnection, parse_cluster_nodes

    nodes = parse_cluster_nodes("es1:9200,es2:9200")
    with ClusterConnection(nodes) as conn:
        conn.client.info()
"""

from __future__ import annotations

import logging

from elasticsearch import Elasticsearch
from elasticsearch.exceptions import ApiError, TransportError

from ..exceptions import ClientNotConnectedError, ConfigurationError
from .exceptions import ClusterConnectionError
from .models import ClusterNode, ConnectionConfig, Credentials

logger = logging.getLogger(__name__)


def parse_cluster_nodes(nodes: str, scheme: str = "http") -> list[ClusterNode]:
    """解析逗号分隔的 ``host:port`` 节点字符串.

    Args:
        nodes: 节点字符串，例如 ``"es1:9200,es2:9200"``
        scheme: 节点协议

    Returns:
        按原顺序排列的节点列表

    Raises:
        ConfigurationError: 节点字符串为空、某个节点缺少端口或端口不是数字时抛出
    """
    if not nodes or not nodes.strip():
        raise ConfigurationError("集群节点字符串不能为空")

    logger.info(f"elasticsearch 集群节点: {nodes}")
    cluster_nodes: list[ClusterNode] = []
    for node in nodes.split(","):
        node = node.strip()
        if not node:
            raise ConfigurationError(f"集群节点字符串包含空节点: '{nodes}'")

        parts = node.split(":")
        if len(parts) != 2 or not parts[0]:
            raise ConfigurationError(f"节点 '{node}' 格式错误，应为 host:port")

        host, port = parts
        if not port.isdigit():
            raise ConfigurationError(f"节点 '{node}' 的端口不是数字: '{port}'")

        cluster_nodes.append(ClusterNode(host=host, port=int(port), scheme=scheme))

    return cluster_nodes


class ClusterConnection:
    """Elasticsearch 连接句柄.

    持有唯一的 Elasticsearch 客户端实例。open() 之前或 close() 之后访问
    client 会抛出 ClientNotConnectedError。

    Args:
        nodes: 集群节点列表
        credentials: Basic Auth 认证信息，默认不认证
        connection_config: 传输层配置，默认使用 ConnectionConfig 的默认值
    """

    def __init__(
        self,
        nodes: list[ClusterNode],
        credentials: Credentials | None = None,
        connection_config: ConnectionConfig | None = None,
    ) -> None:
        if not nodes:
            raise ConfigurationError("nodes 不能为空，请提供至少一个 ES 节点")
        self._nodes = nodes
        self._credentials = credentials or Credentials()
        self._connection_config = connection_config or ConnectionConfig()
        self._client: Elasticsearch | None = None

    @property
    def is_open(self) -> bool:
        return self._client is not None

    @property
    def client(self) -> Elasticsearch:
        """返回已建立的客户端.

        Raises:
            ClientNotConnectedError: 尚未 open() 或已 close()
        """
        if self._client is None:
            raise ClientNotConnectedError("Elasticsearch 客户端尚未连接，请先调用 connect()")
        return self._client

    def _create_client(self) -> Elasticsearch:
        """根据节点、认证和传输层配置创建 Elasticsearch 客户端实例."""
        config = self._connection_config
        kwargs: dict = {
            "hosts": [node.to_dict() for node in self._nodes],
            "request_timeout": config.request_timeout,
            "max_retries": config.max_retries,
            "retry_on_timeout": config.retry_on_timeout,
            "http_compress": config.http_compress,
        }

        # Basic Auth 认证，作用于所有节点
        basic_auth = self._credentials.as_basic_auth()
        if basic_auth is not None:
            kwargs["basic_auth"] = basic_auth

        # SSL/TLS 配置
        if config.scheme == "https":
            kwargs["verify_certs"] = config.verify_certs
            if config.ca_certs:
                kwargs["ca_certs"] = config.ca_certs

        return Elasticsearch(**kwargs)

    def open(self) -> Elasticsearch:
        """创建客户端并立即 ping 探活.

        Returns:
            已连接的 Elasticsearch 客户端

        Raises:
            ClusterConnectionError: 客户端构建失败或 ping 失败时抛出
        """
        try:
            client = self._create_client()
        except (ValueError, TypeError, TransportError) as e:
            raise ClusterConnectionError(f"创建 Elasticsearch 客户端失败: {e}") from e

        # ping 在请求失败时返回 False 而不是抛出异常
        if not client.ping():
            client.close()
            hosts = ",".join(f"{n.host}:{n.port}" for n in self._nodes)
            raise ClusterConnectionError(f"无法连接 Elasticsearch 集群: {hosts}")

        self._client = client
        return client

    def close(self) -> None:
        """关闭客户端并释放连接池资源.

        未打开时调用不做任何事。
        """
        if self._client is None:
            logger.debug("Elasticsearch 客户端未连接，忽略关闭请求")
            return
        client, self._client = self._client, None
        client.close()
        logger.info("Elasticsearch 客户端已关闭")

    def __enter__(self) -> ClusterConnection:
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    # ============================================================
    # 健康检查
    # ============================================================

    def health_check(self) -> dict:
        """检查集群健康状态.

        Returns:
            包含 cluster_name、status、number_of_nodes 的字典。
            集群不可达时 status 为 "unreachable"，并附带 error 字段。

        Raises:
            ClientNotConnectedError: 尚未连接
        """
        client = self.client
        try:
            health = client.cluster.health()
        except (ApiError, TransportError) as e:
            return {
                "cluster_name": "unknown",
                "status": "unreachable",
                "error": str(e),
            }
        return {
            "cluster_name": health.get("cluster_name", "unknown"),
            "status": health.get("status", "unknown"),
            "number_of_nodes": health.get("number_of_nodes", 0),
        }

    def is_healthy(self) -> bool:
        """集群状态为 green 或 yellow 时返回 True."""
        return self.health_check().get("status") in ("green", "yellow")
