"""集群连接数据模型定义模块.

提供连接相关的数据模型，包括：
- ClusterNode: 单个集群节点地址
- Credentials: Basic Auth 认证信息
- ConnectionConfig: 传输层配置
"""

from dataclasses import dataclass

from ..exceptions import ConfigurationError


@dataclass(frozen=True)
class ClusterNode:
    """集群节点地址.

    Attributes:
        host: 主机名或 IP
        port: 端口
        scheme: 协议，http 或 https
    """

    host: str
    port: int
    scheme: str = "http"

    def to_dict(self) -> dict:
        """转换为 Elasticsearch 客户端接受的节点字典."""
        return {"host": self.host, "port": self.port, "scheme": self.scheme}


@dataclass(frozen=True)
class Credentials:
    """Basic Auth 认证信息.

    user 与 password 均非空白时才视为启用认证，否则连接不带认证。
    """

    user: str | None = None
    password: str | None = None

    @property
    def enabled(self) -> bool:
        return bool(self.user and self.user.strip()) and bool(
            self.password and self.password.strip()
        )

    def as_basic_auth(self) -> tuple[str, str] | None:
        """返回 (user, password) 元组，未启用认证时返回 None."""
        if not self.enabled:
            return None
        return (self.user, self.password)  # type: ignore[return-value]


@dataclass
class ConnectionConfig:
    """传输层配置模型.

    Attributes:
        request_timeout: 请求超时时间（秒），默认 30，必须 >= 0
        max_retries: 传输层最大重试次数，默认 3，必须 >= 0
        retry_on_timeout: 超时是否重试，默认 True
        http_compress: 是否启用 HTTP 压缩，默认 False
        scheme: 节点协议，http 或 https，默认 http
        verify_certs: 是否验证 SSL 证书，默认 True
        ca_certs: CA 证书文件路径

    Raises:
        ConfigurationError: 当参数不合法时抛出

    Examples:
        >>> config = ConnectionConfig(request_timeout=60, scheme="https")
    """

    request_timeout: float = 30
    max_retries: int = 3
    retry_on_timeout: bool = True
    http_compress: bool = False
    scheme: str = "http"
    verify_certs: bool = True
    ca_certs: str | None = None

    def __post_init__(self) -> None:
        """校验传输层配置参数合法性."""
        if self.request_timeout < 0:
            raise ConfigurationError(
                f"request_timeout 必须 >= 0，当前值: {self.request_timeout}"
            )
        if self.max_retries < 0:
            raise ConfigurationError(
                f"max_retries 必须 >= 0，当前值: {self.max_retries}"
            )
        if self.scheme not in ("http", "https"):
            raise ConfigurationError(
                f"scheme 只能是 http 或 https，当前值: {self.scheme}"
            )
