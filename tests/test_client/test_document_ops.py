"""文档读写单元测试."""

import pytest
from elasticsearch.dsl import Search
from elasticsearch.exceptions import ConflictError, NotFoundError

from elasticlink.bulk import BulkAction
from elasticlink.client import DocumentVersion, GetResult, VersionConflictError


class TestGet:
    """get / multi_get 测试."""

    def test_get_found(self, client, es, api_response) -> None:
        es.get.return_value = api_response(
            {
                "_index": "ns_segment",
                "_id": "abc",
                "_version": 2,
                "_seq_no": 5,
                "_primary_term": 1,
                "found": True,
                "_source": {"latency": 12},
            }
        )

        result = client.get("segment", "abc")

        es.get.assert_called_once_with(index="ns_segment", id="abc")
        assert result.found
        assert result.source == {"latency": 12}
        assert result.version == 2
        assert result.document_version == DocumentVersion(seq_no=5, primary_term=1)

    def test_get_missing_document(self, client, es, api_error) -> None:
        """测试文档不存在时返回 found=False."""
        es.get.side_effect = api_error(
            NotFoundError, 404, {"_index": "ns_segment", "_id": "abc", "found": False}
        )

        result = client.get("segment", "abc")

        assert result == GetResult(found=False, index="ns_segment", id="abc")
        assert result.document_version is None

    def test_get_missing_index_propagates(self, client, es, api_error) -> None:
        es.get.side_effect = api_error(
            NotFoundError, 404, {"error": {"type": "index_not_found_exception"}}
        )
        with pytest.raises(NotFoundError):
            client.get("segment", "abc")

    def test_multi_get_partial(self, client, es, api_response) -> None:
        """测试部分 ID 缺失不视为失败."""
        es.mget.return_value = api_response(
            {
                "docs": [
                    {"_index": "ns_segment", "_id": "a", "found": True, "_source": {"v": 1}},
                    {"_index": "ns_segment", "_id": "b", "found": False},
                    {"_index": "ns_segment", "_id": "c", "found": True, "_source": {"v": 3}},
                ]
            }
        )

        result = client.multi_get("segment", ["a", "b", "c"])

        es.mget.assert_called_once_with(index="ns_segment", ids=["a", "b", "c"])
        assert len(result) == 3
        assert [doc.id for doc in result] == ["a", "b", "c"]
        assert [doc.source["v"] for doc in result.found()] == [1, 3]
        assert result.missing_ids() == ["b"]


class TestSearch:
    """search 测试."""

    def test_search_dict(self, client, es, api_response) -> None:
        query = {"query": {"term": {"service_id": 1}}, "size": 10}
        es.search.return_value = api_response({"hits": {"total": {"value": 0}, "hits": []}})

        result = client.search("segment", query)

        es.search.assert_called_once_with(index="ns_segment", body=query)
        assert result["hits"]["hits"] == []

    def test_search_dsl(self, client, es, api_response) -> None:
        """测试 elasticsearch.dsl.Search 会被转换为字典原样传递."""
        es.search.return_value = api_response({"hits": {"hits": []}})
        search = Search().filter("range", time_bucket={"gte": 100}).extra(size=5)

        client.search("segment", search)

        es.search.assert_called_once_with(index="ns_segment", body=search.to_dict())


class TestWrite:
    """force_insert / force_update / prepare_* 测试."""

    def test_force_insert_refreshes(self, client, es) -> None:
        client.force_insert("segment", "abc", {"latency": 12})

        es.index.assert_called_once_with(
            index="ns_segment", id="abc", document={"latency": 12}, refresh=True
        )

    def test_insert_then_get(self, client, es, api_response) -> None:
        """测试写入后立即可以读到相同内容."""
        stored = {}

        def fake_index(index, id, document, refresh):
            assert refresh is True
            stored[(index, id)] = document

        def fake_get(index, id):
            return api_response(
                {"_index": index, "_id": id, "found": True, "_source": stored[(index, id)]}
            )

        es.index.side_effect = fake_index
        es.get.side_effect = fake_get

        client.force_insert("segment", "abc", {"latency": 12, "service": "a"})

        assert client.get("segment", "abc").source == {"latency": 12, "service": "a"}

    def test_force_update(self, client, es) -> None:
        client.force_update("segment", "abc", {"latency": 20})

        es.update.assert_called_once_with(
            index="ns_segment", id="abc", doc={"latency": 20}, refresh=True
        )

    def test_force_update_with_version(self, client, es) -> None:
        client.force_update(
            "segment", "abc", {"latency": 20}, DocumentVersion(seq_no=7, primary_term=2)
        )

        es.update.assert_called_once_with(
            index="ns_segment",
            id="abc",
            doc={"latency": 20},
            refresh=True,
            if_seq_no=7,
            if_primary_term=2,
        )

    def test_force_update_version_conflict(self, client, es, api_error) -> None:
        """测试版本不一致时抛出 VersionConflictError."""
        es.update.side_effect = api_error(
            ConflictError, 409, {"error": {"type": "version_conflict_engine_exception"}}
        )

        with pytest.raises(VersionConflictError) as exc_info:
            client.force_update(
                "segment", "abc", {"latency": 20}, DocumentVersion(seq_no=1, primary_term=1)
            )

        assert exc_info.value.index_name == "ns_segment"
        assert exc_info.value.doc_id == "abc"
        assert isinstance(exc_info.value.__cause__, ConflictError)

    def test_prepare_insert(self, client, es) -> None:
        operation = client.prepare_insert("segment", "abc", {"latency": 12})

        assert operation.action == BulkAction.INDEX
        assert operation.index_name == "ns_segment"
        assert operation.doc_id == "abc"
        es.index.assert_not_called()

    def test_prepare_update(self, client, es) -> None:
        operation = client.prepare_update("segment", "abc", {"latency": 12})

        assert operation.action == BulkAction.UPDATE
        assert operation.index_name == "ns_segment"
        es.update.assert_not_called()


class TestDeleteByTimeBucket:
    """delete 测试."""

    def test_delete_range(self, client, es, api_response) -> None:
        """测试按 time_bucket <= 1000 删除且遇到冲突继续."""
        es.delete_by_query.return_value = api_response(
            {"deleted": 3, "version_conflicts": 1, "failures": []}
        )

        status = client.delete("segment", "timeBucket", 1000)

        assert status == 200
        es.delete_by_query.assert_called_once_with(
            index="ns_segment",
            query={"range": {"timeBucket": {"lte": 1000}}},
            conflicts="proceed",
        )

    def test_delete_returns_raw_status(self, client, es, api_response) -> None:
        es.delete_by_query.return_value = api_response({"deleted": 0}, status=202)
        assert client.delete("segment", "timeBucket", 1000) == 202
