"""客户端适配器异常定义模块."""

from ..exceptions import ElasticLinkError


class VersionConflictError(ElasticLinkError):
    """乐观并发控制失败异常.

    带版本的 force_update 在文档当前版本与期望版本不一致时抛出，
    此时文档不会被修改。
    """

    def __init__(self, index_name: str, doc_id: str, message: str | None = None):
        self.index_name = index_name
        self.doc_id = doc_id
        super().__init__(
            message or f"文档版本冲突: index={index_name}, id={doc_id}"
        )
