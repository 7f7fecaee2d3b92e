"""分析引擎异常定义"""
from typing import Optional


class AnalysisError(Exception):
    """分析引擎异常基类"""

    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class InvalidInputError(AnalysisError):
    """输入批次不合法（非列表、为空或记录结构缺失），整个调用直接失败"""

    def __init__(self, message: str, no_data: bool = False, index: Optional[int] = None):
        self.no_data = no_data
        self.index = index
        super().__init__(message)


class RecordProcessingError(AnalysisError):
    """单条记录处理失败，记录日志后跳过，批次继续"""

    def __init__(self, message: str, record_id: Optional[str] = None):
        self.record_id = record_id
        super().__init__(message)


class ComputationError(AnalysisError):
    """聚合过程中的意外错误，包装后向调用方抛出"""

    def __init__(self, message: str, stage: str = "analysis"):
        self.stage = stage
        super().__init__(f"{stage} failed: {message}")
