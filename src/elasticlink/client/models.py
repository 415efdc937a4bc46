"""客户端适配器数据模型定义模块."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class DocumentVersion:
    """文档版本，用于乐观并发控制.

    Attributes:
        seq_no: 文档序列号（_seq_no）
        primary_term: 主分片任期（_primary_term）
    """

    seq_no: int
    primary_term: int


@dataclass
class GetResult:
    """单文档查询结果.

    Attributes:
        found: 文档是否存在
        index: 实际索引名（已包含命名空间前缀）
        id: 文档ID
        source: 文档内容，未找到时为空字典
        version: 文档版本号
        seq_no: 序列号
        primary_term: 主分片任期
    """

    found: bool
    index: str
    id: str
    source: dict[str, Any] = field(default_factory=dict)
    version: int | None = None
    seq_no: int | None = None
    primary_term: int | None = None

    @property
    def document_version(self) -> DocumentVersion | None:
        """返回可用于 force_update 的版本信息，文档不存在时返回 None."""
        if not self.found or self.seq_no is None or self.primary_term is None:
            return None
        return DocumentVersion(seq_no=self.seq_no, primary_term=self.primary_term)

    @classmethod
    def from_hit(cls, hit: dict[str, Any]) -> GetResult:
        """从 get/mget 响应中的单个文档解析."""
        return cls(
            found=bool(hit.get("found", False)),
            index=hit.get("_index", ""),
            id=hit.get("_id", ""),
            source=hit.get("_source") or {},
            version=hit.get("_version"),
            seq_no=hit.get("_seq_no"),
            primary_term=hit.get("_primary_term"),
        )


@dataclass
class MultiGetResult:
    """批量文档查询结果，顺序与请求的 ID 顺序一致."""

    docs: list[GetResult] = field(default_factory=list)

    def __iter__(self):
        return iter(self.docs)

    def __len__(self) -> int:
        return len(self.docs)

    def found(self) -> list[GetResult]:
        """返回所有已找到的文档."""
        return [doc for doc in self.docs if doc.found]

    def missing_ids(self) -> list[str]:
        """返回所有未找到的文档ID."""
        return [doc.id for doc in self.docs if not doc.found]
