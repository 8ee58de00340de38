# config.py
"""
全局配置
- 路径、表格列宽、Git 命令格式等常量
- 通过 .env 提供可选覆盖 (REPORT_TEMPLATE_FILE / REPORT_OUTPUT_ROOT / LOG_LEVEL)
"""
import os
from typing import Optional

from dotenv import load_dotenv


# --- 脚本基础路径 ---
SCRIPT_BASE_PATH = os.path.abspath(os.path.dirname(__file__))
env_path = os.path.join(SCRIPT_BASE_PATH, ".env")
if os.path.exists(env_path):
    load_dotenv(env_path)
else:
    load_dotenv()


class GlobalConfig:
    """
    工作报告生成器的全局应用配置。
    """

    # --- 路径配置 ---
    SCRIPT_BASE_PATH: str = SCRIPT_BASE_PATH
    TEMPLATES_DIR_NAME: str = "templates"
    TEMPLATE_FILE_NAME: str = "report_template.txt"
    # 空字符串表示使用默认值 (templates/ 目录)
    TEMPLATE_FILE: str = os.getenv("REPORT_TEMPLATE_FILE", "")
    OUTPUT_ROOT: str = os.getenv("REPORT_OUTPUT_ROOT", "")

    # --- 日志 ---
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

    # --- Git 命令格式 ---
    # 字段分隔符使用 ASCII Unit Separator，记录之间由 -z 输出的 NUL 分隔
    # 作者名之后重复一次短哈希，作为作者与提交信息之间的边界标记
    FIELD_SEPARATOR: str = "\x1f"
    GIT_LOG_FORMAT: str = "%h%x1f%ad%x1f%an%x1f%h%x1f%s"
    GIT_AUTHORS_FORMAT: str = "%an"
    EXCLUDED_SUBJECT_PREFIXES: tuple = ("Merge branch", "Delete branch")

    # --- 日期 ---
    DATE_PATTERN: str = r"[0-9]{4}-[0-9]{2}-[0-9]{2}"
    DATE_INPUT_FORMAT: str = "%Y-%m-%d"
    DATE_DISPLAY_FORMAT: str = "%d/%m/%Y"

    # --- 表格格式 ---
    WRAP_WIDTH: int = 50
    DATE_WIDTH: int = 10
    HASH_WIDTH: int = 7
    MIN_NO_WIDTH: int = 2
    MIN_AUTHOR_WIDTH: int = 6
    TABLE_HEADERS: tuple = ("No", "Commit", "Author", "Commit Date", "Hash")
    NO_COMMITS_TEXT: str = "No commits found for this period."

    # --- 文件名 ---
    OUTPUT_FILENAME_PREFIX: str = "report"
    TEXT_EXTENSION: str = "txt"
    CSV_EXTENSION: str = "csv"

    def get_template_path(self, override: Optional[str] = None) -> str:
        """模板路径优先级: 命令行 > 环境变量 > 随包安装的 templates/ 目录"""
        if override:
            return os.path.abspath(override)
        if self.TEMPLATE_FILE:
            return os.path.abspath(self.TEMPLATE_FILE)
        return os.path.join(
            self.SCRIPT_BASE_PATH, self.TEMPLATES_DIR_NAME, self.TEMPLATE_FILE_NAME
        )

    def get_output_root(self, override: Optional[str] = None) -> str:
        """输出根目录优先级: 命令行 > 环境变量 > 脚本目录"""
        if override:
            return os.path.abspath(override)
        if self.OUTPUT_ROOT:
            return os.path.abspath(self.OUTPUT_ROOT)
        return self.SCRIPT_BASE_PATH
