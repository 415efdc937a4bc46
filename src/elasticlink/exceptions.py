"""elasticlink 异常定义模块."""


class ElasticLinkError(Exception):
    """elasticlink 基础异常类."""

    pass


class ConfigurationError(ElasticLinkError):
    """配置异常.

    集群节点字符串格式不合法（缺少端口、端口非数字、空节点）或
    连接参数越界时抛出。
    """

    pass


class ClientNotConnectedError(ElasticLinkError):
    """客户端未连接异常.

    在调用 connect() 之前（或 shutdown() 之后）执行索引/文档操作时抛出。
    """

    pass


class UnexpectedStatusError(ElasticLinkError):
    """非预期 HTTP 状态码异常.

    Attributes:
        status: 实际返回的 HTTP 状态码
    """

    def __init__(self, status: int, message: str | None = None):
        self.status = status
        super().__init__(message or f"非预期的 HTTP 状态码: {status}")
