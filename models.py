from dataclasses import dataclass, field
from typing import List, Optional, Tuple


@dataclass(frozen=True)
class CommitRecord:
    """Git提交数据模型 (一行报告数据)"""

    hash: str
    date: str
    author: str
    message: str

    def is_auto_generated(self, prefixes: Tuple[str, ...]) -> bool:
        """自动生成的合并/删除分支提交"""
        return any(self.message.startswith(prefix) for prefix in prefixes)


@dataclass
class FormattedTable:
    """渲染后的提交表格 (只读的派生数据)"""

    header: str
    separator: str
    rows: List[str]
    widths: Tuple[int, ...]

    def render(self) -> str:
        return "\n".join([self.header, self.separator] + self.rows)


@dataclass
class ReportResult:
    """一次运行的结果摘要"""

    report_path: str
    output_dir: str
    project_name: str
    date_range: str
    total_commits: int
    matched_authors: List[str] = field(default_factory=list)
    possible_authors: Optional[List[str]] = None
