"""集群连接异常定义模块."""

from ..exceptions import ElasticLinkError


class ClusterConnectionError(ElasticLinkError):
    """集群连接异常.

    构建 Elasticsearch 客户端失败或 connect 时的 ping 探活失败时抛出。
    """

    pass
