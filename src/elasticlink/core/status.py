"""HTTP 状态码分类模块.

把原始状态码转换为带标签的结果（FOUND / NOT_FOUND / UNEXPECTED），
调用方按标签分支处理所有情况，而不是直接比较整数。
"""

from dataclasses import dataclass
from enum import Enum

from ..exceptions import UnexpectedStatusError


class StatusKind(Enum):
    """状态分类枚举."""

    FOUND = "found"
    NOT_FOUND = "not_found"
    UNEXPECTED = "unexpected"


@dataclass(frozen=True)
class StatusOutcome:
    """带标签的状态结果.

    Attributes:
        kind: 状态分类
        code: 原始 HTTP 状态码
    """

    kind: StatusKind
    code: int

    @property
    def is_found(self) -> bool:
        return self.kind is StatusKind.FOUND

    def to_bool(self) -> bool:
        """FOUND 返回 True，NOT_FOUND 返回 False，其余抛出异常.

        Raises:
            UnexpectedStatusError: 状态码既不是 200 也不是 404
        """
        if self.kind is StatusKind.FOUND:
            return True
        if self.kind is StatusKind.NOT_FOUND:
            return False
        raise UnexpectedStatusError(
            self.code,
            f"请求的响应状态码应为 200 或 404，实际为 {self.code}",
        )


def classify_status(code: int) -> StatusOutcome:
    """将 HTTP 状态码归类为 StatusOutcome.

    Args:
        code: HTTP 状态码

    Returns:
        200 为 FOUND，404 为 NOT_FOUND，其他为 UNEXPECTED
    """
    if code == 200:
        return StatusOutcome(StatusKind.FOUND, code)
    if code == 404:
        return StatusOutcome(StatusKind.NOT_FOUND, code)
    return StatusOutcome(StatusKind.UNEXPECTED, code)
