"""ElasticSearchClient 使用示例.

本文件展示了如何使用 ElasticSearchClient 管理带命名空间的索引、读写文档，
以及通过 BulkProcessor 进行后台批量写入。
"""

import logging

from elasticlink import (
    DocumentVersion,
    ElasticSearchClient,
    QueueBulkListener,
    VersionConflictError,
)

logging.basicConfig(level=logging.INFO)

# 所有索引名都会被加上 "demo_" 前缀
client = ElasticSearchClient("localhost:9200", namespace="demo")


# ==================== 示例1：索引与模板 ====================
def example_index_management():
    """创建模板和索引."""
    settings = {"number_of_shards": 1, "number_of_replicas": 0}
    mapping = {
        "properties": {
            "service_id": {"type": "keyword"},
            "latency": {"type": "integer"},
            "time_bucket": {"type": "long"},
        }
    }

    # 模板匹配 demo_segment_*
    if not client.is_exists_template("segment"):
        client.create_template("segment", settings, mapping)

    if not client.is_exists_index("segment"):
        client.create_index("segment", settings, mapping)


# ==================== 示例2：文档读写 ====================
def example_documents():
    """立即可见的写入与乐观并发更新."""
    client.force_insert(
        "segment", "abc", {"service_id": "a", "latency": 12, "time_bucket": 900}
    )

    result = client.get("segment", "abc")
    print(f"found={result.found}, source={result.source}")

    # 基于读到的版本进行更新
    client.force_update("segment", "abc", {"latency": 15}, result.document_version)

    # 使用过期的版本会抛出 VersionConflictError
    try:
        client.force_update(
            "segment", "abc", {"latency": 99}, DocumentVersion(seq_no=0, primary_term=1)
        )
    except VersionConflictError as e:
        print(f"版本冲突: {e}")

    docs = client.multi_get("segment", ["abc", "missing"])
    print(f"缺失的文档: {docs.missing_ids()}")


# ==================== 示例3：后台批量写入 ====================
def example_bulk_processor():
    """每 500 条或 5MB 或 2 秒提交一次."""
    listener = QueueBulkListener()
    processor = client.create_bulk_processor(
        bulk_actions=500,
        bulk_size=5,
        flush_interval=2,
        concurrent_requests=2,
        listener=listener,
    )

    for i in range(1200):
        processor.add(
            client.prepare_insert(
                "segment",
                f"doc-{i}",
                {"service_id": "b", "latency": i % 100, "time_bucket": 1000 + i},
            )
        )
    processor.close(timeout=30)

    for report in listener.drain():
        print(
            f"批次 [{report.execution_id}] {report.outcome.value}: "
            f"{report.action_count} 个操作, 耗时 {report.took_ms}ms"
        )


# ==================== 示例4：查询与按时间删除 ====================
def example_search_and_delete():
    """查询后删除 time_bucket <= 1000 的文档."""
    response = client.search(
        "segment",
        {"query": {"range": {"time_bucket": {"lte": 1000}}}, "size": 0},
    )
    print(f"待删除文档数: {response['hits']['total']['value']}")

    status = client.delete("segment", "time_bucket", 1000)
    print(f"delete_by_query 状态码: {status}")


if __name__ == "__main__":
    client.connect()
    try:
        example_index_management()
        example_documents()
        example_bulk_processor()
        example_search_and_delete()
    finally:
        client.shutdown()
