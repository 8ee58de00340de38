# context.py
"""
运行时配置的数据模型
"""
import os
from dataclasses import dataclass

from config import GlobalConfig


@dataclass(frozen=True)
class ReportRequest:
    """
    一次报告请求的输入参数。
    注意：不校验 from_date <= to_date，倒置的范围只会得到空结果。
    """

    project_path: str
    username: str
    from_date: str
    to_date: str
    csv_mode: bool = False

    @property
    def project_name(self) -> str:
        return os.path.basename(os.path.abspath(self.project_path))

    @property
    def since(self) -> str:
        return f"{self.from_date}T00:00:00"

    @property
    def until(self) -> str:
        return f"{self.to_date}T23:59:59"

    @property
    def is_single_day(self) -> bool:
        return self.from_date == self.to_date


@dataclass(frozen=True)
class RunContext:
    """
    封装一次运行所需的所有配置。
    这是从 CLI 传递到 Orchestrator 的唯一对象。
    """

    request: ReportRequest

    # --- 已解析的路径 ---
    template_path: str
    output_dir: str

    # --- 全局配置 ---
    global_config: GlobalConfig
