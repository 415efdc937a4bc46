"""集群连接模块 - 节点字符串解析、认证信息与连接句柄生命周期管理.

主要组件:
    - ClusterConnection: 连接句柄，支持上下文管理器
    - parse_cluster_nodes: 解析 ``host:port,host:port`` 节点字符串
    - ClusterNode / Credentials / ConnectionConfig: 数据模型

使用示例:
    from elasticlink.connection import ClusterConnection, parse_cluster_nodes

    conn = ClusterConnection(parse_cluster_nodes("localhost:9200"))
    client = conn.open()
"""

from .exceptions import ClusterConnectionError
from .models import ClusterNode, ConnectionConfig, Credentials
from .tool import ClusterConnection, parse_cluster_nodes

__all__ = [
    # 连接句柄
    "ClusterConnection",
    "parse_cluster_nodes",
    # 模型
    "ClusterNode",
    "Credentials",
    "ConnectionConfig",
    # 异常
    "ClusterConnectionError",
]
