"""
plateworks 自定义异常

异常层级:
    PlateworksError (基类)
    ├── InvalidGeometry         - 订单尺寸无效，无法计算面积
    ├── InvalidQuantity         - 补充桶数无效
    ├── InvalidSetting          - 台账参数无效
    ├── UnknownSubProcess       - 工序不在订单模板中
    ├── UnknownWorkflowTemplate - 工序模板不存在
    ├── IllegalTransition       - 状态流转不合法
    ├── PrepressIncomplete      - 制版工序尚未全部完成
    ├── DuplicateUsage          - 该订单已有药水消耗记录
    ├── OrderNotFound           - 订单不存在
    ├── ConcurrentUpdate        - 记录已被其他请求修改
    └── InsufficientInventory   - 药水库存不足（软错误，只作为警告返回）

校验类错误同步拒绝，不做部分写入；台账侧的失败不会回滚工序进度，
由工作流门面以警告形式返回给调用方。
"""

from typing import Any, Dict, Optional


class PlateworksError(Exception):
    """
    所有 plateworks 错误的基类。

    code 用于 API 响应中的 "error" 字段，status_code 为映射的 HTTP 状态码。
    """

    code = "plateworks_error"
    status_code = 400

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.code, "message": self.message, "details": self.details}


class InvalidGeometry(PlateworksError):
    """宽、高为零/负数或不是数字，订单不能以退化尺寸触发消耗。"""

    code = "invalid_geometry"

    def __init__(self, message: str, **details: Any):
        super().__init__(message, details)


class InvalidQuantity(PlateworksError):
    """补充桶数必须为正整数。"""

    code = "invalid_quantity"

    def __init__(self, barrel_count: Any):
        super().__init__(
            f"Barrel count must be a positive integer, got {barrel_count!r}",
            {"barrel_count": barrel_count},
        )
        self.barrel_count = barrel_count


class InvalidSetting(PlateworksError):
    code = "invalid_setting"

    def __init__(self, field: str, value: Any, reason: str):
        super().__init__(
            f"Invalid value for {field}: {reason}",
            {"field": field, "value": value},
        )
        self.field = field
        self.value = value


class UnknownSubProcess(PlateworksError):
    code = "unknown_sub_process"

    def __init__(self, name: str, allowed: Optional[list] = None):
        super().__init__(
            f"Unknown sub-process: {name}",
            {"sub_process": name, "allowed": allowed or []},
        )
        self.name = name


class UnknownWorkflowTemplate(PlateworksError):
    code = "unknown_workflow_template"

    def __init__(self, key: str):
        super().__init__(f"Unknown workflow template: {key}", {"template": key})
        self.key = key


class IllegalTransition(PlateworksError):
    code = "illegal_transition"

    def __init__(self, current: str, target: str, reason: Optional[str] = None):
        message = f"Cannot move order from {current!r} to {target!r}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message, {"current": current, "target": target})
        self.current = current
        self.target = target


class PrepressIncomplete(PlateworksError):
    code = "prepress_incomplete"

    def __init__(self, pending: list):
        super().__init__(
            "All prepress sub-processes must be completed first",
            {"pending": pending},
        )
        self.pending = pending


class DuplicateUsage(PlateworksError):
    """同一订单只能有一条消耗记录；existing_event_id 指向已存在的记录。"""

    code = "duplicate_usage"
    status_code = 409

    def __init__(self, order_id: int, existing_event_id: int):
        super().__init__(
            f"Usage already recorded for order {order_id}",
            {"order_id": order_id, "existing_event_id": existing_event_id},
        )
        self.order_id = order_id
        self.existing_event_id = existing_event_id


class OrderNotFound(PlateworksError):
    code = "order_not_found"
    status_code = 404

    def __init__(self, order_id: int):
        super().__init__("Order not found", {"order_id": order_id})
        self.order_id = order_id


class ConcurrentUpdate(PlateworksError):
    code = "concurrent_update"
    status_code = 409

    def __init__(self, entity: str):
        super().__init__(
            f"{entity} was modified by another request, retry the operation",
            {"entity": entity},
        )


class InsufficientInventory(PlateworksError):
    """
    本次消耗使库存变为负数。

    这是软错误：台账照常记录消耗并允许库存为负，
    由操作员补充药水，不阻塞生产流程。
    """

    code = "insufficient_inventory"

    def __init__(self, required: float, available: float):
        super().__init__(
            f"Insufficient processing solution: need {required:.2f} L, "
            f"only {available:.2f} L available",
            {
                "required": required,
                "available": available,
                "resolution": "Refill barrels to bring the ledger back above zero",
            },
        )
        self.required = required
        self.available = available
