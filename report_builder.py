# report_builder.py
"""
报告生成器
- 提交表格 (固定宽度、提交信息自动换行)
- CSV 输出
- Jinja2 模板渲染与文件保存
"""
import csv
import io
import logging
import os
from datetime import datetime
from typing import List, Dict, Optional, Sequence

from jinja2 import Environment, TemplateError, Undefined

from models import CommitRecord, FormattedTable
from config import GlobalConfig
from context import ReportRequest

logger = logging.getLogger(__name__)

# 模板是纯文本：只启用 {{ }} 变量语法，块与注释定界符设为文本中不会出现的序列
TEMPLATE_BLOCK_START = "\x00{%"
TEMPLATE_BLOCK_END = "%}\x00"
TEMPLATE_COMMENT_START = "\x00{#"
TEMPLATE_COMMENT_END = "#}\x00"


class PlaceholderUndefined(Undefined):
    """未知占位符按原样输出"""

    def __str__(self) -> str:
        return "{{%s}}" % self._undefined_name


# -------------------------------------------------------------------
# 表格格式化
# -------------------------------------------------------------------
def wrap_text(text: str, width: int) -> List[str]:
    """
    按单词贪心换行。
    不超过宽度的文本原样返回；超长的单个单词不拆分 (会溢出列宽)。
    """
    if len(text) <= width:
        return [text]

    lines: List[str] = []
    current = ""
    for word in text.split():
        if not current:
            current = word
        elif len(current + " " + word) <= width:
            current = current + " " + word
        else:
            lines.append(current)
            current = word
    if current:
        lines.append(current)
    return lines or [""]


def _format_row(cells: Sequence[str], widths: Sequence[int]) -> str:
    padded = [cell.ljust(width) for cell, width in zip(cells, widths)]
    return "| " + " | ".join(padded) + " |"


def compute_column_widths(
    commits: Sequence[CommitRecord], global_config: GlobalConfig
) -> tuple:
    """
    列宽: (No, Commit, Author, Commit Date, Hash)
    No 与 Author 取最小值与数据最大长度中的较大者，其余为固定宽度。
    """
    no_width = max(global_config.MIN_NO_WIDTH, len(str(len(commits))))
    author_width = max(
        [global_config.MIN_AUTHOR_WIDTH] + [len(c.author) for c in commits]
    )
    return (
        no_width,
        global_config.WRAP_WIDTH,
        author_width,
        global_config.DATE_WIDTH,
        global_config.HASH_WIDTH,
    )


def build_commit_table(
    commits: Sequence[CommitRecord], global_config: GlobalConfig
) -> FormattedTable:
    widths = compute_column_widths(commits, global_config)
    header = _format_row(global_config.TABLE_HEADERS, widths)
    separator = "| " + " | ".join("-" * width for width in widths) + " |"

    rows: List[str] = []
    for index, commit in enumerate(commits, start=1):
        lines = wrap_text(commit.message, global_config.WRAP_WIDTH)
        rows.append(
            _format_row(
                [str(index), lines[0], commit.author, commit.date, commit.hash],
                widths,
            )
        )
        # 续行只保留提交信息列
        for line in lines[1:]:
            rows.append(_format_row(["", line, "", "", ""], widths))

    return FormattedTable(header=header, separator=separator, rows=rows, widths=widths)


def generate_table_report(
    commits: Sequence[CommitRecord], global_config: GlobalConfig
) -> str:
    """生成表格文本；没有提交时返回固定提示语"""
    if not commits:
        return global_config.NO_COMMITS_TEXT
    return build_commit_table(commits, global_config).render()


def generate_csv_report(
    commits: Sequence[CommitRecord], global_config: GlobalConfig
) -> str:
    """生成 CSV 文本 (不换行、不截断)"""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(global_config.TABLE_HEADERS)
    for index, commit in enumerate(commits, start=1):
        writer.writerow([index, commit.message, commit.author, commit.date, commit.hash])
    return buffer.getvalue()


# -------------------------------------------------------------------
# 日期显示
# -------------------------------------------------------------------
def format_display_date(date_str: str, global_config: GlobalConfig) -> str:
    """YYYY-MM-DD -> DD/MM/YYYY；无法解析的日期原样返回"""
    try:
        parsed = datetime.strptime(date_str, global_config.DATE_INPUT_FORMAT)
    except ValueError:
        return date_str
    return parsed.strftime(global_config.DATE_DISPLAY_FORMAT)


def format_date_range(request: ReportRequest, global_config: GlobalConfig) -> str:
    from_display = format_display_date(request.from_date, global_config)
    if request.is_single_day:
        return from_display
    to_display = format_display_date(request.to_date, global_config)
    return f"{from_display} to {to_display}"


# -------------------------------------------------------------------
# 模板与文件
# -------------------------------------------------------------------
def load_template(template_path: str) -> Optional[str]:
    """读取模板文件内容"""
    try:
        with open(template_path, "r", encoding="utf-8") as f:
            return f.read()
    except FileNotFoundError:
        logger.error(f"❌ Template file not found at {template_path}")
        logger.error(
            "   Please ensure 'templates/report_template.txt' exists or pass --template"
        )
        return None
    except OSError as e:
        logger.error(f"❌ Failed to read template {template_path}: {e}")
        return None


def render_report(template_source: str, values: Dict[str, str]) -> Optional[str]:
    """
    使用 Jinja2 替换 {{PLACEHOLDER}} 占位符。
    关闭自动转义以原样插入；其余文本 (包括 {% 与 {#) 不做解释，未知占位符原样保留。
    """
    env = Environment(
        autoescape=False,
        undefined=PlaceholderUndefined,
        block_start_string=TEMPLATE_BLOCK_START,
        block_end_string=TEMPLATE_BLOCK_END,
        comment_start_string=TEMPLATE_COMMENT_START,
        comment_end_string=TEMPLATE_COMMENT_END,
    )
    try:
        template = env.from_string(template_source)
        return template.render(**values)
    except TemplateError as e:
        logger.error(f"❌ Template rendering failed: {e}")
        return None


def build_template_values(
    request: ReportRequest, date_range: str, commits_text: str
) -> Dict[str, str]:
    return {
        "USERNAME": request.username,
        "PROJECT_NAME": request.project_name,
        "DATE_RANGE": date_range,
        "FROM_DATE": request.from_date,
        "TO_DATE": request.to_date,
        "COMMITS": commits_text,
    }


def build_report_filename(request: ReportRequest, global_config: GlobalConfig) -> str:
    """report_<username>_<project>_<from>[_to_<to>].<ext>"""
    username = request.username.replace(os.sep, "_").replace("/", "_")
    name = (
        f"{global_config.OUTPUT_FILENAME_PREFIX}_{username}_"
        f"{request.project_name}_{request.from_date}"
    )
    if not request.is_single_day:
        name += f"_to_{request.to_date}"
    extension = (
        global_config.CSV_EXTENSION if request.csv_mode else global_config.TEXT_EXTENSION
    )
    return f"{name}.{extension}"


def ensure_output_dir(output_dir: str) -> bool:
    if os.path.isdir(output_dir):
        return True
    try:
        os.makedirs(output_dir, exist_ok=True)
    except OSError as e:
        logger.error(f"❌ Failed to create output directory {output_dir}: {e}")
        return False
    logger.info(f"✓ Created output directory: {output_dir}")
    return True


def save_report(content: str, full_path: str) -> Optional[str]:
    """保存报告到文件 (覆盖写入)"""
    try:
        with open(full_path, "w", encoding="utf-8", newline="") as f:
            f.write(content)
        logger.debug(f"报告已保存: {full_path}")
        return full_path
    except OSError as e:
        logger.error(f"❌ Failed to write report ({full_path}): {e}")
        return None
