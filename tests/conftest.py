"""测试公共 fixtures.

提供打了补丁的 Elasticsearch 客户端，以及构造 elastic_transport 响应和
ApiError 的工厂函数，测试不需要真实集群。
"""

from unittest.mock import patch

import pytest
from elastic_transport import (
    ApiResponseMeta,
    HeadApiResponse,
    HttpHeaders,
    NodeConfig,
    ObjectApiResponse,
)

from elasticlink.client import ElasticSearchClient

ES_PATCH_PATH = "elasticlink.connection.tool.Elasticsearch"


def _meta(status: int) -> ApiResponseMeta:
    return ApiResponseMeta(
        status=status,
        http_version="1.1",
        headers=HttpHeaders(),
        duration=0.0,
        node=NodeConfig("http", "localhost", 9200),
    )


@pytest.fixture
def make_meta():
    """构造指定状态码的 ApiResponseMeta."""
    return _meta


@pytest.fixture
def api_response():
    """构造 ObjectApiResponse: api_response(body, status=200)."""

    def _factory(body: dict, status: int = 200) -> ObjectApiResponse:
        return ObjectApiResponse(body=body, meta=_meta(status))

    return _factory


@pytest.fixture
def head_response():
    """构造 HEAD 请求的 HeadApiResponse: head_response(status)."""

    def _factory(status: int) -> HeadApiResponse:
        return HeadApiResponse(meta=_meta(status))

    return _factory


@pytest.fixture
def api_error():
    """构造 ApiError 子类实例: api_error(NotFoundError, 404, body)."""

    def _factory(error_cls, status: int, body: dict | None = None):
        return error_cls(message=f"status {status}", meta=_meta(status), body=body or {})

    return _factory


@pytest.fixture
def mock_es():
    """替换 Elasticsearch 构造函数，ping 默认成功."""
    with patch(ES_PATCH_PATH) as mock_cls:
        mock_cls.return_value.ping.return_value = True
        yield mock_cls


@pytest.fixture
def client(mock_es):
    """已连接、命名空间为 ns 的客户端."""
    es_client = ElasticSearchClient("localhost:9200", namespace="ns")
    es_client.connect()
    yield es_client
    es_client.shutdown()


@pytest.fixture
def es(client):
    """client 底层的 Elasticsearch mock."""
    return client.es_client
