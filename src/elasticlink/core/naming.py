"""索引名称命名空间处理模块."""


def format_index_name(namespace: str | None, index_name: str) -> str:
    """为索引/模板名称加上命名空间前缀.

    命名空间非空时返回 ``{namespace}_{index_name}``，否则原样返回。
    该函数是纯函数，所有触及索引名或模板名的调用路径都必须只调用一次。

    Args:
        namespace: 命名空间前缀，None 或空字符串表示不加前缀
        index_name: 调用方提供的原始索引名

    Returns:
        实际发送给 Elasticsearch 的索引名

    示例:
        >>> format_index_name("prod", "segment")
        'prod_segment'
        >>> format_index_name("", "segment")
        'segment'
    """
    if namespace:
        return f"{namespace}_{index_name}"
    return index_name


def template_pattern(formatted_name: str) -> str:
    """根据已格式化的模板名生成 index_patterns 匹配串."""
    return f"{formatted_name}_*"
