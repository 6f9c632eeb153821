"""阈值配置加载：默认值 + JSON 配置文件覆盖"""

import json
import logging
import math
from dataclasses import asdict, fields
from typing import Optional

from models.data_models import MonitorConfig

logger = logging.getLogger(__name__)

# 默认阈值
DEFAULTS = asdict(MonitorConfig())

_INT_KEYS = {
    f.name for f in fields(MonitorConfig) if f.type is int
}


# 取值下限：(下限, 是否允许等于下限)
_LOWER_BOUNDS = {
    "ear_drowsy": (0.0, True),
    "ear_closed": (0.0, True),
    "mar_yawn": (0.0, True),
    "warning_margin": (0.0, True),
    "inference_throttle_ms": (0, True),
    "notification_throttle_ms": (0, True),
    "persistence_throttle_ms": (0, True),
    "event_log_capacity": (0, False),
    "poll_interval_ms": (0, False),
}


def _coerce(key, value):
    """按字段类型转换数值，非有限值或超出取值范围时抛出 ValueError。"""
    if isinstance(value, bool):
        raise ValueError(f"{key} 不能为布尔值")
    number = float(value)
    if not math.isfinite(number):
        raise ValueError(f"{key} 必须是有限数值")
    if key in _INT_KEYS:
        number = int(number)

    bound = _LOWER_BOUNDS.get(key)
    if bound is not None:
        low, inclusive = bound
        if number < low or (number == low and not inclusive):
            raise ValueError(f"{key} 超出取值范围")
    return number


def merge_config(config: MonitorConfig, overrides: Optional[dict]) -> MonitorConfig:
    """
    用字典中的值覆盖现有配置。

    缺失或为 null 的字段保留原值，未知字段忽略；非数值、非有限值
    或超出取值范围的字段记录警告并保留原值。
    """
    values = asdict(config)
    if not overrides:
        return MonitorConfig(**values)

    for key in DEFAULTS:
        if key not in overrides or overrides[key] is None:
            continue
        try:
            values[key] = _coerce(key, overrides[key])
        except (TypeError, ValueError):
            logger.warning("配置项 %s 的值无效: %r，保留 %r", key, overrides[key], values[key])

    if values["ear_closed"] > values["ear_drowsy"]:
        logger.warning(
            "ear_closed (%s) 大于 ear_drowsy (%s)，困倦区间为空",
            values["ear_closed"], values["ear_drowsy"],
        )

    return MonitorConfig(**values)


def load_config(config_path: Optional[str] = None) -> MonitorConfig:
    """从 JSON 配置文件加载阈值参数，缺失字段使用默认值。"""
    defaults = MonitorConfig()

    if config_path is None:
        return defaults

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        logger.warning("配置文件不存在 %s，使用默认阈值", config_path)
        return defaults
    except json.JSONDecodeError:
        logger.warning("配置文件格式错误 %s，使用默认阈值", config_path)
        return defaults

    if not isinstance(data, dict):
        logger.warning("配置文件顶层必须是对象 %s，使用默认阈值", config_path)
        return defaults

    return merge_config(defaults, data)
