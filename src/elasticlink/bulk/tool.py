"""后台批量写入处理器."""

from __future__ import annotations

import itertools
import logging
import threading
import time
from collections.abc import Callable, Iterable
from concurrent.futures import Future, ThreadPoolExecutor, wait

from elasticsearch import Elasticsearch
from elasticsearch.exceptions import ApiError, TransportError
from elasticsearch.helpers import streaming_bulk

from .exceptions import BulkProcessorClosedError, BulkRetryExhaustedError
from .listeners import BulkListener, LoggingBulkListener
from .models import (
    BulkErrorItem,
    BulkOperation,
    BulkOutcome,
    BulkProcessorConfig,
    BulkReport,
)

logger = logging.getLogger(__name__)

# 可重试的状态码：请求被拒绝或集群暂不可用
_RETRYABLE_STATUSES = (429, 503)


class BulkProcessor:
    """后台批量写入处理器.

    累积预构建的写入请求，在以下任一条件满足时提交一个批次：

    - 缓冲的操作数达到 bulk_actions
    - 缓冲的估算字节数达到 bulk_size（MB）
    - 定时刷新线程每隔 flush_interval 秒触发
    - 显式调用 flush()

    concurrent_requests 为 0 时批次在触发刷新的线程中同步执行；大于 0 时
    批次提交到线程池，最多同时存在 concurrent_requests 个执行中的批次，
    超出时 add()/flush() 会阻塞等待。

    批次通过 elasticsearch.helpers.streaming_bulk 提交。整批传输错误以及
    429/503 拒绝会按 BackoffPolicy 重试：整批重试耗尽时以 FAILURE 报告，
    单文档重试耗尽时以 PARTIAL_FAILURE 报告，不会影响其他批次。
    close() 超时后仍在等待提交的批次也会以 FAILURE 报告。

    Args:
        es_client: Elasticsearch 客户端实例
        config: 处理器配置，默认使用 BulkProcessorConfig 的默认值
        listener: 批次监听器，默认 LoggingBulkListener
        sleep: 整批重试的等待函数，主要用于测试
    """

    def __init__(
        self,
        es_client: Elasticsearch,
        config: BulkProcessorConfig | None = None,
        listener: BulkListener | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.es_client = es_client
        self.config = config or BulkProcessorConfig()
        self.listener = listener or LoggingBulkListener()
        self._sleep = sleep

        self._lock = threading.Lock()
        self._buffer: list[BulkOperation] = []
        self._buffer_bytes = 0
        self._closed = False
        self._execution_ids = itertools.count(1)

        self._executor: ThreadPoolExecutor | None = None
        self._semaphore: threading.Semaphore | None = None
        self._futures: set[Future] = set()
        self._futures_lock = threading.Lock()
        if self.config.concurrent_requests > 0:
            self._executor = ThreadPoolExecutor(
                max_workers=self.config.concurrent_requests,
                thread_name_prefix="elasticlink-bulk",
            )
            self._semaphore = threading.Semaphore(self.config.concurrent_requests)

        self._stop_event = threading.Event()
        self._flush_thread: threading.Thread | None = None
        if self.config.flush_interval is not None:
            self._flush_thread = threading.Thread(
                target=self._flush_loop,
                name="elasticlink-bulk-flush",
                daemon=True,
            )
            self._flush_thread.start()

        logger.info(
            f"初始化批量写入处理器: bulk_actions={self.config.bulk_actions}, "
            f"bulk_size={self.config.bulk_size}MB, "
            f"flush_interval={self.config.flush_interval}, "
            f"concurrent_requests={self.config.concurrent_requests}"
        )

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def pending_count(self) -> int:
        """当前缓冲中尚未提交的操作数."""
        with self._lock:
            return len(self._buffer)

    # ============================================================
    # 入队与刷新
    # ============================================================

    def add(self, operation: BulkOperation) -> None:
        """添加一个预构建的写入请求.

        Raises:
            BulkProcessorClosedError: 处理器已关闭
        """
        with self._lock:
            if self._closed:
                raise BulkProcessorClosedError("BulkProcessor 已关闭，无法继续添加操作")
            self._buffer.append(operation)
            self._buffer_bytes += operation.estimated_size()
            batch = self._take_batch_if_full()
        if batch:
            self._execute(batch)

    def add_all(self, operations: Iterable[BulkOperation]) -> None:
        for operation in operations:
            self.add(operation)

    def flush(self) -> None:
        """立即提交缓冲中的所有操作."""
        with self._lock:
            batch = self._take_batch()
        if batch:
            self._execute(batch)

    def _take_batch_if_full(self) -> list[BulkOperation]:
        if (
            len(self._buffer) >= self.config.bulk_actions
            or self._buffer_bytes >= self.config.bulk_size_bytes
        ):
            return self._take_batch()
        return []

    def _take_batch(self) -> list[BulkOperation]:
        batch, self._buffer = self._buffer, []
        self._buffer_bytes = 0
        return batch

    def _flush_loop(self) -> None:
        interval = self.config.flush_interval
        while not self._stop_event.wait(interval):
            if self._closed:
                break
            self.flush()

    # ============================================================
    # 批次执行
    # ============================================================

    def _execute(self, batch: list[BulkOperation]) -> None:
        execution_id = next(self._execution_ids)
        self._notify_before(execution_id, batch)

        if self._executor is None:
            self._run_batch(execution_id, batch)
            return

        self._semaphore.acquire()
        try:
            future = self._executor.submit(self._run_batch, execution_id, batch)
        except RuntimeError as e:
            # close() 超时后线程池已关闭，等待中的批次直接以失败报告
            self._semaphore.release()
            logger.error(f"批次 [{execution_id}] 提交时线程池已关闭: {e}")
            failure = BulkProcessorClosedError(
                f"批次 [{execution_id}] 未能提交，BulkProcessor 已关闭: {e}"
            )
            self._notify_after(
                BulkReport(
                    execution_id=execution_id,
                    outcome=BulkOutcome.FAILURE,
                    action_count=len(batch),
                    failure=failure,
                )
            )
            return
        with self._futures_lock:
            self._futures.add(future)
        future.add_done_callback(self._on_batch_done)

    def _on_batch_done(self, future: Future) -> None:
        with self._futures_lock:
            self._futures.discard(future)
        self._semaphore.release()

    def _run_batch(self, execution_id: int, batch: list[BulkOperation]) -> BulkReport:
        """执行一个批次并通知监听器，不向调用方抛出异常."""
        start_time = time.monotonic()
        errors: list[BulkErrorItem] = []
        try:
            self._submit_with_retry(execution_id, batch, errors)
        except Exception as e:
            report = BulkReport(
                execution_id=execution_id,
                outcome=BulkOutcome.FAILURE,
                action_count=len(batch),
                took_ms=int((time.monotonic() - start_time) * 1000),
                errors=errors,
                failure=e,
            )
        else:
            report = BulkReport(
                execution_id=execution_id,
                outcome=BulkOutcome.PARTIAL_FAILURE if errors else BulkOutcome.SUCCESS,
                action_count=len(batch),
                took_ms=int((time.monotonic() - start_time) * 1000),
                errors=errors,
            )
        self._notify_after(report)
        return report

    def _submit_with_retry(
        self,
        execution_id: int,
        batch: list[BulkOperation],
        errors: list[BulkErrorItem],
    ) -> None:
        delays = iter(self.config.backoff.delays())
        attempt = 0

        while True:
            attempt += 1
            try:
                errors.extend(self._submit(batch))
                return
            except ApiError as e:
                # streaming_bulk 已按退避策略重试过 429/503
                if e.meta.status in _RETRYABLE_STATUSES:
                    raise BulkRetryExhaustedError(
                        f"批次 [{execution_id}] 重试次数耗尽: {e}"
                    ) from e
                raise
            except TransportError as e:
                delay = next(delays, None)
                if delay is None:
                    raise BulkRetryExhaustedError(
                        f"批次 [{execution_id}] 重试次数耗尽: {e}"
                    ) from e
                logger.warning(
                    f"批次 [{execution_id}] 提交失败，第 {attempt} 次重试: {e}"
                )
                self._sleep(delay)

    def _submit(self, operations: list[BulkOperation]) -> list[BulkErrorItem]:
        """通过 streaming_bulk 提交一个批次，返回最终失败的文档.

        整个批次作为一个 _bulk 请求发送；被 429/503 拒绝的文档由
        streaming_bulk 单独重试，重试耗尽后仍被拒绝的文档计入失败项。
        """
        backoff = self.config.backoff
        failed: list[BulkErrorItem] = []
        for ok, item in streaming_bulk(
            self.es_client,
            [operation.to_action() for operation in operations],
            chunk_size=len(operations),
            max_chunk_bytes=sum(op.estimated_size() for op in operations),
            raise_on_error=False,
            raise_on_exception=True,
            max_retries=backoff.max_retries,
            initial_backoff=backoff.initial_delay,
            retry_on_status=_RETRYABLE_STATUSES,
            yield_ok=False,
        ):
            if not ok:
                op_type, info = next(iter(item.items()))
                failed.append(BulkErrorItem.from_item(op_type, info))
        return failed

    # ============================================================
    # 通知
    # ============================================================

    def _notify_before(self, execution_id: int, batch: list[BulkOperation]) -> None:
        try:
            self.listener.before_bulk(execution_id, batch)
        except Exception:
            logger.exception(f"批次 [{execution_id}] 的 before_bulk 回调出错")

    def _notify_after(self, report: BulkReport) -> None:
        try:
            self.listener.after_bulk(report)
        except Exception:
            logger.exception(f"批次 [{report.execution_id}] 的 after_bulk 回调出错")

    # ============================================================
    # 生命周期管理
    # ============================================================

    def close(self, timeout: float | None = None) -> bool:
        """提交剩余操作，停止定时刷新，并等待执行中的批次完成.

        Args:
            timeout: 等待执行中批次的最长时间（秒），None 表示一直等待

        Returns:
            所有批次在超时前完成时返回 True
        """
        with self._lock:
            if self._closed:
                return True
            self._closed = True
            batch = self._take_batch()

        self._stop_event.set()
        if batch:
            self._execute(batch)
        if self._flush_thread is not None:
            self._flush_thread.join(timeout)

        if self._executor is None:
            return True

        with self._futures_lock:
            in_flight = set(self._futures)
        _, not_done = wait(in_flight, timeout=timeout)
        self._executor.shutdown(wait=not not_done)
        if not_done:
            logger.warning(f"关闭时仍有 {len(not_done)} 个批次未完成")
        return not not_done

    def __enter__(self) -> BulkProcessor:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
