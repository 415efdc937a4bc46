"""索引与模板管理单元测试."""

import pytest
from elasticsearch.exceptions import ApiError, NotFoundError

from elasticlink.exceptions import UnexpectedStatusError


class TestIndexOperations:
    """索引操作测试."""

    def test_create_index(self, client, es, api_response) -> None:
        """测试创建索引时加上命名空间前缀."""
        es.indices.create.return_value = api_response({"acknowledged": True})
        settings = {"number_of_shards": 2}
        mapping = {"properties": {"time_bucket": {"type": "long"}}}

        assert client.create_index("segment", settings, mapping) is True

        es.indices.create.assert_called_once_with(
            index="ns_segment", settings=settings, mappings=mapping
        )

    def test_create_index_not_acknowledged(self, client, es, api_response) -> None:
        es.indices.create.return_value = api_response({"acknowledged": False})
        assert client.create_index("segment", {}, {}) is False

    def test_create_index_error_propagates(self, client, es, api_error) -> None:
        from elasticsearch.exceptions import BadRequestError

        es.indices.create.side_effect = api_error(
            BadRequestError, 400, {"error": {"type": "resource_already_exists_exception"}}
        )
        with pytest.raises(BadRequestError):
            client.create_index("segment", {}, {})

    def test_get_index(self, client, es, api_response) -> None:
        body = {"ns_segment": {"aliases": {}, "mappings": {}, "settings": {}}}
        es.indices.get.return_value = api_response(body)

        result = client.get_index("segment")

        assert result["ns_segment"]["aliases"] == {}
        es.indices.get.assert_called_once_with(index="ns_segment")

    def test_is_exists_index(self, client, es, head_response) -> None:
        es.indices.exists.return_value = head_response(200)
        assert client.is_exists_index("segment") is True
        es.indices.exists.assert_called_once_with(index="ns_segment")

    def test_is_exists_index_missing(self, client, es, head_response) -> None:
        """测试索引不存在时返回 False 而不是抛出异常."""
        es.indices.exists.return_value = head_response(404)
        assert client.is_exists_index("segment") is False

    def test_delete_index(self, client, es, api_response) -> None:
        es.indices.delete.return_value = api_response({"acknowledged": True})
        assert client.delete_index("segment") is True
        es.indices.delete.assert_called_once_with(index="ns_segment")

    def test_delete_missing_index_propagates(self, client, es, api_error) -> None:
        es.indices.delete.side_effect = api_error(NotFoundError, 404)
        with pytest.raises(NotFoundError):
            client.delete_index("segment")


class TestTemplateOperations:
    """模板操作测试."""

    def test_create_template(self, client, es, api_response) -> None:
        """测试模板的 index_patterns 为格式化名称加 _*."""
        es.indices.put_template.return_value = api_response({"acknowledged": True})
        settings = {"number_of_shards": 1}
        mapping = {"properties": {}}

        assert client.create_template("segment", settings, mapping) is True

        es.indices.put_template.assert_called_once_with(
            name="ns_segment",
            index_patterns=["ns_segment_*"],
            settings=settings,
            mappings=mapping,
        )

    def test_create_template_non_200(self, client, es, api_response) -> None:
        es.indices.put_template.return_value = api_response({}, status=201)
        assert client.create_template("segment", {}, {}) is False

    def test_is_exists_template(self, client, es, head_response) -> None:
        es.indices.exists_template.return_value = head_response(200)
        assert client.is_exists_template("segment") is True
        es.indices.exists_template.assert_called_once_with(name="ns_segment")

    def test_is_exists_template_404(self, client, es, head_response) -> None:
        es.indices.exists_template.return_value = head_response(404)
        assert client.is_exists_template("segment") is False

    def test_is_exists_template_404_raised(self, client, es, api_error) -> None:
        es.indices.exists_template.side_effect = api_error(NotFoundError, 404)
        assert client.is_exists_template("segment") is False

    def test_is_exists_template_500(self, client, es, api_error) -> None:
        """测试 200/404 以外的状态码抛出 UnexpectedStatusError."""
        es.indices.exists_template.side_effect = api_error(ApiError, 500)
        with pytest.raises(UnexpectedStatusError) as exc_info:
            client.is_exists_template("segment")
        assert exc_info.value.status == 500

    def test_is_exists_template_unexpected_success_code(
        self, client, es, head_response
    ) -> None:
        es.indices.exists_template.return_value = head_response(204)
        with pytest.raises(UnexpectedStatusError):
            client.is_exists_template("segment")

    def test_delete_template(self, client, es, api_response) -> None:
        es.indices.delete_template.return_value = api_response({"acknowledged": True})
        assert client.delete_template("segment") is True
        es.indices.delete_template.assert_called_once_with(name="ns_segment")


class TestWithoutNamespace:
    """无命名空间时的名称处理测试."""

    def test_names_unchanged(self, mock_es, head_response) -> None:
        from elasticlink.client import ElasticSearchClient

        client = ElasticSearchClient("localhost:9200")
        client.connect()
        es = client.es_client
        es.indices.exists.return_value = head_response(200)

        client.is_exists_index("segment")

        es.indices.exists.assert_called_once_with(index="segment")
