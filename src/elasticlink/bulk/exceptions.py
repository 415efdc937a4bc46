"""批量写入异常定义模块."""

from ..exceptions import ElasticLinkError


class BulkOperationError(ElasticLinkError):
    """批量写入基础异常类."""

    pass


class BulkValidationError(BulkOperationError):
    """批量写入配置或操作项校验异常."""

    pass


class BulkRetryExhaustedError(BulkOperationError):
    """批次提交重试次数耗尽异常.

    不会直接抛给调用方，而是作为 BulkReport.failure 通知给监听器。
    """

    pass


class BulkProcessorClosedError(BulkOperationError):
    """向已关闭的 BulkProcessor 添加操作时抛出."""

    pass
