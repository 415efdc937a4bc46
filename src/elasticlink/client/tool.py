"""Elasticsearch 客户端适配器核心类."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from elasticsearch import Elasticsearch
from elasticsearch.dsl import Search
from elasticsearch.exceptions import ApiError, ConflictError, NotFoundError

from ..bulk import (
    BackoffPolicy,
    BulkAction,
    BulkListener,
    BulkOperation,
    BulkProcessor,
    BulkProcessorConfig,
)
from ..connection import (
    ClusterConnection,
    ConnectionConfig,
    Credentials,
    parse_cluster_nodes,
)
from ..core import classify_status, format_index_name, template_pattern
from ..exceptions import ClientNotConnectedError
from ..typing import DocIdList, IndexMappings, IndexSettings, JsonDict
from .exceptions import VersionConflictError
from .models import DocumentVersion, GetResult, MultiGetResult

if TYPE_CHECKING:
    from ..config import ElasticLinkSettings

logger = logging.getLogger(__name__)


class ElasticSearchClient:
    """带命名空间的 Elasticsearch 客户端适配器.

    所有索引名和模板名在发出请求前都会加上命名空间前缀（见 format_index_name），
    调用方始终使用不带前缀的原始名称。

    使用顺序：构造 -> connect() -> 其他操作 -> shutdown()，也可以用 with 语句。

    Args:
        cluster_nodes: 逗号分隔的 ``host:port`` 节点字符串
        namespace: 命名空间前缀，为空时不加前缀
        user: Basic Auth 用户名
        password: Basic Auth 密码
        connection_config: 传输层配置

    Examples:
        >>> with ElasticSearchClient("localhost:9200", namespace="prod") as client:
        ...     client.create_index("segment", {"number_of_shards": 1}, {})
        ...     client.force_insert("segment", "abc", {"latency": 12})
        ...     client.get("segment", "abc").source
        {'latency': 12}
    """

    def __init__(
        self,
        cluster_nodes: str,
        namespace: str | None = None,
        user: str | None = None,
        password: str | None = None,
        connection_config: ConnectionConfig | None = None,
    ):
        self.cluster_nodes = cluster_nodes
        self.namespace = namespace or ""
        self.credentials = Credentials(user=user, password=password)
        self.connection_config = connection_config or ConnectionConfig()
        self._connection: ClusterConnection | None = None

    @classmethod
    def from_settings(cls, settings: ElasticLinkSettings) -> ElasticSearchClient:
        """根据 ElasticLinkSettings 构造客户端（不会自动连接）."""
        return cls(
            cluster_nodes=settings.cluster_nodes,
            namespace=settings.namespace,
            user=settings.user,
            password=settings.password,
            connection_config=settings.connection_config(),
        )

    # ============================================================
    # 连接生命周期
    # ============================================================

    def connect(self) -> None:
        """解析节点、建立连接并 ping 探活.

        Raises:
            ConfigurationError: 节点字符串格式错误，此时不会发出任何网络请求
            ClusterConnectionError: 客户端构建或探活失败
        """
        nodes = parse_cluster_nodes(self.cluster_nodes, self.connection_config.scheme)
        connection = ClusterConnection(nodes, self.credentials, self.connection_config)
        connection.open()
        if self._connection is not None:
            logger.warning("客户端重复连接，关闭旧连接")
            self._connection.close()
        self._connection = connection

    def shutdown(self) -> None:
        """关闭连接并释放连接池资源，未连接时只记录日志."""
        if self._connection is None:
            logger.debug("客户端未连接，忽略 shutdown")
            return
        connection, self._connection = self._connection, None
        connection.close()

    def __enter__(self) -> ElasticSearchClient:
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.shutdown()

    @property
    def connection(self) -> ClusterConnection:
        if self._connection is None:
            raise ClientNotConnectedError(
                "Elasticsearch 客户端尚未连接，请先调用 connect()"
            )
        return self._connection

    @property
    def es_client(self) -> Elasticsearch:
        """底层 Elasticsearch 客户端.

        Raises:
            ClientNotConnectedError: 尚未连接
        """
        return self.connection.client

    def format_index_name(self, index_name: str) -> str:
        return format_index_name(self.namespace, index_name)

    # ============================================================
    # 索引管理
    # ============================================================

    def create_index(
        self,
        index_name: str,
        settings: IndexSettings | None = None,
        mapping: IndexMappings | None = None,
    ) -> bool:
        """创建索引.

        索引已存在时由 Elasticsearch 返回的错误原样抛出。

        Args:
            index_name: 原始索引名
            settings: 索引设置
            mapping: 索引映射

        Returns:
            集群是否确认（acknowledged）
        """
        index_name = self.format_index_name(index_name)
        response = self.es_client.indices.create(
            index=index_name, settings=settings, mappings=mapping
        )
        acknowledged = bool(response.get("acknowledged", False))
        logger.debug(f"创建索引 {index_name} 完成, acknowledged: {acknowledged}")
        return acknowledged

    def get_index(self, index_name: str) -> JsonDict:
        """获取索引描述（aliases、mappings、settings）."""
        index_name = self.format_index_name(index_name)
        return self.es_client.indices.get(index=index_name)

    def delete_index(self, index_name: str) -> bool:
        """删除索引.

        Returns:
            集群是否确认（acknowledged）

        Raises:
            elasticsearch.NotFoundError: 索引不存在
        """
        index_name = self.format_index_name(index_name)
        response = self.es_client.indices.delete(index=index_name)
        acknowledged = bool(response.get("acknowledged", False))
        logger.debug(f"删除索引 {index_name} 完成, acknowledged: {acknowledged}")
        return acknowledged

    def is_exists_index(self, index_name: str) -> bool:
        """检查索引是否存在，不存在时返回 False 而不是抛出异常."""
        index_name = self.format_index_name(index_name)
        return bool(self.es_client.indices.exists(index=index_name))

    # ============================================================
    # 模板管理
    # ============================================================

    def is_exists_template(self, index_name: str) -> bool:
        """检查模板是否存在.

        Returns:
            200 返回 True，404 返回 False

        Raises:
            UnexpectedStatusError: 状态码既不是 200 也不是 404
        """
        index_name = self.format_index_name(index_name)
        try:
            status = self.es_client.indices.exists_template(name=index_name).meta.status
        except ApiError as e:
            status = e.meta.status
        return classify_status(status).to_bool()

    def create_template(
        self,
        index_name: str,
        settings: IndexSettings | None = None,
        mapping: IndexMappings | None = None,
    ) -> bool:
        """创建模板，index_patterns 为 ``{格式化后的名称}_*``.

        Returns:
            仅在 HTTP 200 时返回 True
        """
        index_name = self.format_index_name(index_name)
        response = self.es_client.indices.put_template(
            name=index_name,
            index_patterns=[template_pattern(index_name)],
            settings=settings,
            mappings=mapping,
        )
        logger.debug(f"创建模板 {index_name} 完成, status: {response.meta.status}")
        return response.meta.status == 200

    def delete_template(self, index_name: str) -> bool:
        """删除模板，仅在 HTTP 200 时返回 True."""
        index_name = self.format_index_name(index_name)
        response = self.es_client.indices.delete_template(name=index_name)
        logger.debug(f"删除模板 {index_name} 完成, status: {response.meta.status}")
        return response.meta.status == 200

    # ============================================================
    # 文档查询
    # ============================================================

    def search(self, index_name: str, query: JsonDict | Search) -> JsonDict:
        """在带命名空间的索引上执行查询.

        Args:
            index_name: 原始索引名
            query: 查询体字典，或 elasticsearch.dsl.Search 对象

        Returns:
            Elasticsearch 原始响应
        """
        index_name = self.format_index_name(index_name)
        if isinstance(query, Search):
            query = query.to_dict()
        return self.es_client.search(index=index_name, body=query)

    def get(self, index_name: str, doc_id: str) -> GetResult:
        """按 ID 获取单个文档.

        文档不存在时返回 ``GetResult(found=False)``；索引不存在时抛出
        elasticsearch.NotFoundError。
        """
        index_name = self.format_index_name(index_name)
        try:
            response = self.es_client.get(index=index_name, id=doc_id)
        except NotFoundError as e:
            if isinstance(e.body, dict) and e.body.get("found") is False:
                return GetResult(found=False, index=index_name, id=doc_id)
            raise
        return GetResult.from_hit(response)

    def multi_get(self, index_name: str, ids: DocIdList) -> MultiGetResult:
        """按 ID 批量获取文档，每个 ID 对应一个结果，部分缺失不视为失败."""
        index_name = self.format_index_name(index_name)
        response = self.es_client.mget(index=index_name, ids=list(ids))
        return MultiGetResult(
            docs=[GetResult.from_hit(hit) for hit in response.get("docs", [])]
        )

    # ============================================================
    # 文档写入
    # ============================================================

    def force_insert(self, index_name: str, doc_id: str, source: JsonDict) -> None:
        """写入文档并立即刷新，返回后即可读到."""
        operation = self.prepare_insert(index_name, doc_id, source)
        self.es_client.index(
            index=operation.index_name,
            id=operation.doc_id,
            document=operation.source,
            refresh=True,
        )

    def force_update(
        self,
        index_name: str,
        doc_id: str,
        source: JsonDict,
        version: DocumentVersion | None = None,
    ) -> None:
        """部分更新文档并立即刷新.

        Args:
            index_name: 原始索引名
            doc_id: 文档ID
            source: 需要更新的字段
            version: 期望的文档版本，通常取自 GetResult.document_version；
                提供时只有版本一致才会更新

        Raises:
            VersionConflictError: 文档当前版本与期望版本不一致
        """
        operation = self.prepare_update(index_name, doc_id, source)
        kwargs: dict[str, Any] = {}
        if version is not None:
            kwargs["if_seq_no"] = version.seq_no
            kwargs["if_primary_term"] = version.primary_term

        try:
            self.es_client.update(
                index=operation.index_name,
                id=operation.doc_id,
                doc=operation.source,
                refresh=True,
                **kwargs,
            )
        except ConflictError as e:
            raise VersionConflictError(operation.index_name, doc_id) from e

    def prepare_insert(
        self, index_name: str, doc_id: str, source: JsonDict
    ) -> BulkOperation:
        """构建写入请求但不执行，供 BulkProcessor 使用."""
        return BulkOperation(
            action=BulkAction.INDEX,
            index_name=self.format_index_name(index_name),
            doc_id=doc_id,
            source=source,
        )

    def prepare_update(
        self, index_name: str, doc_id: str, source: JsonDict
    ) -> BulkOperation:
        """构建部分更新请求但不执行，供 BulkProcessor 使用."""
        return BulkOperation(
            action=BulkAction.UPDATE,
            index_name=self.format_index_name(index_name),
            doc_id=doc_id,
            source=source,
        )

    def delete(
        self, index_name: str, time_bucket_column: str, end_time_bucket: int
    ) -> int:
        """删除 time_bucket_column <= end_time_bucket 的所有文档.

        使用 delete_by_query 且 conflicts=proceed，版本冲突的文档会被跳过。

        Returns:
            HTTP 状态码，由调用方自行解释
        """
        index_name = self.format_index_name(index_name)
        query = {"range": {time_bucket_column: {"lte": end_time_bucket}}}
        response = self.es_client.delete_by_query(
            index=index_name, query=query, conflicts="proceed"
        )
        logger.debug(
            f"delete_by_query 索引: {index_name}, 查询: {query}, "
            f"deleted: {response.get('deleted')}, "
            f"version_conflicts: {response.get('version_conflicts')}"
        )
        return response.meta.status

    # ============================================================
    # 批量写入
    # ============================================================

    def create_bulk_processor(
        self,
        bulk_actions: int,
        bulk_size: float,
        flush_interval: float | None,
        concurrent_requests: int,
        listener: BulkListener | None = None,
        backoff: BackoffPolicy | None = None,
    ) -> BulkProcessor:
        """创建并启动后台批量写入处理器.

        Args:
            bulk_actions: 每批最大操作数
            bulk_size: 每批最大字节数（MB）
            flush_interval: 定时刷新间隔（秒）
            concurrent_requests: 最大并发批次数
            listener: 批次监听器，默认记录日志
            backoff: 重试策略，默认 100ms 起步、重试 3 次的指数退避

        Returns:
            已启动的 BulkProcessor，使用完毕后需要调用 close()
        """
        config = BulkProcessorConfig(
            bulk_actions=bulk_actions,
            bulk_size=bulk_size,
            flush_interval=flush_interval,
            concurrent_requests=concurrent_requests,
            backoff=backoff or BackoffPolicy(),
        )
        return self.create_bulk_processor_with_config(config, listener)

    def create_bulk_processor_with_config(
        self,
        config: BulkProcessorConfig,
        listener: BulkListener | None = None,
    ) -> BulkProcessor:
        """使用现成的 BulkProcessorConfig 创建处理器.

        Examples:
            >>> settings = ElasticLinkSettings()
            >>> client = ElasticSearchClient.from_settings(settings)
            >>> client.connect()
            >>> processor = client.create_bulk_processor_with_config(settings.bulk_config())
        """
        return BulkProcessor(self.es_client, config, listener)
