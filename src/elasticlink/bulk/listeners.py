"""批次执行通知接口.

BulkProcessor 在每个批次开始前调用 before_bulk，结束后调用一次 after_bulk，
并传入带结果标签的 BulkReport。
"""

from __future__ import annotations

import logging
import queue

from .models import BulkOperation, BulkOutcome, BulkReport

logger = logging.getLogger(__name__)


class BulkListener:
    """批次执行监听器基类，默认不做任何事."""

    def before_bulk(self, execution_id: int, operations: list[BulkOperation]) -> None:
        pass

    def after_bulk(self, report: BulkReport) -> None:
        pass


class LoggingBulkListener(BulkListener):
    """按批次结果记录日志的监听器."""

    def before_bulk(self, execution_id: int, operations: list[BulkOperation]) -> None:
        logger.debug(f"执行批次 [{execution_id}]，包含 {len(operations)} 个请求")

    def after_bulk(self, report: BulkReport) -> None:
        if report.outcome is BulkOutcome.SUCCESS:
            logger.info(f"批次 [{report.execution_id}] 完成，耗时 {report.took_ms} 毫秒")
        elif report.outcome is BulkOutcome.PARTIAL_FAILURE:
            logger.warning(
                f"批次 [{report.execution_id}] 执行完成但有 {len(report.errors)} 个失败: "
                f"{report.get_error_summary()}"
            )
        else:
            logger.error(
                f"批次 [{report.execution_id}] 执行失败: {report.failure}",
                exc_info=report.failure,
            )


class QueueBulkListener(LoggingBulkListener):
    """把每个批次报告放入队列的监听器，调用方可以按结果流的方式消费.

    放入队列不会阻塞刷新线程；队列已满时记录警告并丢弃该报告。

    Args:
        maxsize: 队列最大长度，0 表示不限

    示例:
        >>> listener = QueueBulkListener()
        >>> processor = client.create_bulk_processor(1000, 5, 10, 2, listener=listener)
        >>> report = listener.reports.get(timeout=30)
    """

    def __init__(self, maxsize: int = 0):
        self.reports: queue.Queue[BulkReport] = queue.Queue(maxsize=maxsize)

    def after_bulk(self, report: BulkReport) -> None:
        super().after_bulk(report)
        try:
            self.reports.put_nowait(report)
        except queue.Full:
            logger.warning(f"报告队列已满，批次 [{report.execution_id}] 的报告未入队")

    def drain(self) -> list[BulkReport]:
        """取出当前队列中的所有报告."""
        drained: list[BulkReport] = []
        while True:
            try:
                drained.append(self.reports.get_nowait())
            except queue.Empty:
                return drained
