"""批量写入数据模型定义模块."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from elasticsearch.helpers import expand_action

from .exceptions import BulkValidationError

_BYTES_PER_MB = 1024 * 1024


class BulkAction(Enum):
    """批量操作类型枚举."""

    INDEX = "index"
    UPDATE = "update"


@dataclass
class BulkOperation:
    """预构建的写入请求.

    由 ElasticSearchClient.prepare_insert / prepare_update 创建，index_name
    已经包含命名空间前缀。

    Attributes:
        action: 操作类型
        index_name: 实际索引名
        doc_id: 文档ID
        source: 文档内容（INDEX 为完整文档，UPDATE 为部分文档）
    """

    action: BulkAction
    index_name: str
    doc_id: str
    source: dict[str, Any]

    def __post_init__(self) -> None:
        if self.source is None:
            raise BulkValidationError(
                f"操作类型 {self.action.value} 需要提供 source 数据"
            )

    def to_action(self) -> dict[str, Any]:
        """转换为 elasticsearch.helpers 格式的操作字典."""
        action: dict[str, Any] = {
            "_op_type": self.action.value,
            "_index": self.index_name,
            "_id": self.doc_id,
        }
        # UPDATE 操作使用 doc 字段而非 _source
        if self.action == BulkAction.UPDATE:
            action["doc"] = self.source
        else:
            action["_source"] = self.source
        return action

    def to_lines(self) -> list[dict[str, Any]]:
        """转换为 _bulk 请求体中的行（元数据行 + 数据行）."""
        header, data = expand_action(self.to_action())
        if data is None:
            return [header]
        return [header, data]

    def estimated_size(self) -> int:
        """估算该操作在 _bulk 请求体中占用的字节数."""
        return sum(
            len(json.dumps(line, default=str).encode("utf-8")) + 1
            for line in self.to_lines()
        )


@dataclass
class BulkErrorItem:
    """批次中单个文档的失败信息.

    Attributes:
        index_name: 索引名称
        doc_id: 文档ID
        error_type: 错误类型
        error_reason: 错误原因
        status: HTTP状态码
        caused_by: 根本原因
        operation: 失败的操作类型
    """

    index_name: str
    doc_id: str | None
    error_type: str
    error_reason: str
    status: int
    caused_by: str | None = None
    operation: BulkAction | None = None

    @classmethod
    def from_item(cls, op_type: str, info: dict[str, Any]) -> BulkErrorItem:
        """从 _bulk 响应 items 中的单项解析."""
        error_info = info.get("error", {})
        if isinstance(error_info, str):
            error_info = {"type": "unknown", "reason": error_info}

        caused_by = None
        if "caused_by" in error_info:
            caused_by_info = error_info["caused_by"]
            caused_by = f"{caused_by_info.get('type', '')}: {caused_by_info.get('reason', '')}"

        try:
            operation = BulkAction(op_type)
        except ValueError:
            operation = None

        return cls(
            index_name=info.get("_index", ""),
            doc_id=info.get("_id"),
            error_type=error_info.get("type", "unknown"),
            error_reason=error_info.get("reason", "unknown error"),
            status=info.get("status", 0),
            caused_by=caused_by,
            operation=operation,
        )


class BulkOutcome(Enum):
    """批次执行结果分类."""

    SUCCESS = "success"
    PARTIAL_FAILURE = "partial_failure"
    FAILURE = "failure"


@dataclass
class BulkReport:
    """单个批次的执行报告，每个批次恰好产生一条.

    Attributes:
        execution_id: 批次执行ID，从 1 开始递增
        outcome: 执行结果分类
        action_count: 批次中的操作数
        took_ms: 耗时（毫秒），包含重试等待时间
        errors: 部分失败时每个失败文档的错误详情
        failure: 整批失败时的异常
    """

    execution_id: int
    outcome: BulkOutcome
    action_count: int
    took_ms: int = 0
    errors: list[BulkErrorItem] = field(default_factory=list)
    failure: BaseException | None = None

    def is_success(self) -> bool:
        return self.outcome is BulkOutcome.SUCCESS

    def get_error_summary(self) -> str:
        """获取错误摘要."""
        if self.failure is not None:
            return f"Batch failed: {self.failure}"
        if not self.errors:
            return "No errors"
        summary = f"Total errors: {len(self.errors)}\n"
        for i, error in enumerate(self.errors[:10], 1):  # 只显示前10个错误
            summary += (
                f"{i}. [{error.operation.value if error.operation else 'unknown'}] "
                f"Index: {error.index_name}, DocID: {error.doc_id}, "
                f"Status: {error.status}, Reason: {error.error_reason}\n"
            )
        if len(self.errors) > 10:
            summary += f"... and {len(self.errors) - 10} more errors\n"
        return summary


@dataclass
class BackoffPolicy:
    """批次提交失败时的指数退避策略，每次重试的等待时间翻倍.

    整批传输失败由 BulkProcessor 按 delays() 重试；被 429/503 拒绝的请求交给
    elasticsearch.helpers.streaming_bulk 以相同的初始等待和次数重试。

    Attributes:
        initial_delay: 首次重试前等待时间（秒），默认 0.1
        max_retries: 最大重试次数，默认 3
    """

    initial_delay: float = 0.1
    max_retries: int = 3

    def __post_init__(self) -> None:
        if self.initial_delay < 0:
            raise BulkValidationError(
                f"initial_delay 必须 >= 0，当前值: {self.initial_delay}"
            )
        if self.max_retries < 0:
            raise BulkValidationError(
                f"max_retries 必须 >= 0，当前值: {self.max_retries}"
            )

    def delays(self) -> list[float]:
        """返回每次重试前的等待时间列表."""
        return [
            self.initial_delay * (2**attempt)
            for attempt in range(self.max_retries)
        ]

    @classmethod
    def no_backoff(cls) -> BackoffPolicy:
        return cls(initial_delay=0, max_retries=0)


@dataclass
class BulkProcessorConfig:
    """批量写入处理器配置.

    Attributes:
        bulk_actions: 每批最大操作数，达到即刷新，默认 1000
        bulk_size: 每批最大字节数（MB），达到即刷新，默认 5
        flush_interval: 定时刷新间隔（秒），None 表示不启用定时刷新
        concurrent_requests: 最大并发批次数，0 表示在触发刷新的线程中同步执行
        backoff: 批次失败重试策略

    Raises:
        BulkValidationError: 当参数不合法时抛出
    """

    bulk_actions: int = 1000
    bulk_size: float = 5
    flush_interval: float | None = None
    concurrent_requests: int = 1
    backoff: BackoffPolicy = field(default_factory=BackoffPolicy)

    def __post_init__(self) -> None:
        if self.bulk_actions < 1:
            raise BulkValidationError(
                f"bulk_actions 必须 >= 1，当前值: {self.bulk_actions}"
            )
        if self.bulk_size <= 0:
            raise BulkValidationError(f"bulk_size 必须 > 0，当前值: {self.bulk_size}")
        if self.flush_interval is not None and self.flush_interval <= 0:
            raise BulkValidationError(
                f"flush_interval 必须 > 0，当前值: {self.flush_interval}"
            )
        if self.concurrent_requests < 0:
            raise BulkValidationError(
                f"concurrent_requests 必须 >= 0，当前值: {self.concurrent_requests}"
            )

    @property
    def bulk_size_bytes(self) -> int:
        return int(self.bulk_size * _BYTES_PER_MB)
