"""
api_envelope.core.helpers
~~~~~~~~~~~~~~~~~~~~~~~~~

记录合并工具。
"""
from __future__ import annotations

from collections.abc import Mapping
from typing import Any


def default_params(
    defaults: Mapping[str, Any],
    params: Mapping[str, Any] | None = None,
) -> dict[str, Any]:
    """将 ``params`` 逐键覆盖到 ``defaults`` 上，返回新字典。

    浅合并：同名键以 ``params`` 为准，仅一侧存在的键均保留，
    两个输入都不会被修改。

    Args:
        defaults: 基础记录。
        params: 覆盖项，``None`` 视为空。

    Returns:
        合并后的新字典，键顺序为 ``defaults`` 在前、新增键在后。
    """
    merged = dict(defaults)
    if params:
        merged.update(params)
    return merged
