"""elasticlink 类型定义模块."""

from typing import Any, Dict, List

# 通用 JSON 文档类型（settings、mappings、文档 source、查询体）
JsonDict = Dict[str, Any]

# 索引设置类型
IndexSettings = Dict[str, Any]

# 索引映射类型
IndexMappings = Dict[str, Any]

# 文档 ID 列表类型
DocIdList = List[str]
