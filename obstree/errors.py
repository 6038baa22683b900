"""obstree 异常类型。"""


class ObsTreeError(Exception):
    """obstree 所有异常的基类。"""


class TransportError(ObsTreeError):
    """列表请求失败（网络错误或非 2xx 状态码）。不做重试。"""


class MalformedResponse(TransportError):
    """列表响应缺少必需字段或无法解析（如 IsTruncated=true 却没有 NextMarker）。"""
