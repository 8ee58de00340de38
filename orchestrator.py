# orchestrator.py
"""
业务逻辑编排器
校验 -> 查询提交 -> (未找到时搜索相似作者) -> 格式化 -> 写入报告文件
"""
import logging
import os
from typing import List, Optional

from context import RunContext
from models import CommitRecord, ReportResult
import git_utils
import report_builder

from data_sources.base import DataSource
from data_sources.local_git import LocalGitDataSource

logger = logging.getLogger(__name__)


class ReportOrchestrator:
    """
    负责执行报告生成的核心业务流程。
    """

    def __init__(self, context: RunContext, data_source: Optional[DataSource] = None):
        self.context = context
        self.request = context.request
        self.global_config = context.global_config
        self.data_source = data_source or LocalGitDataSource(context)

    def run(self) -> Optional[ReportResult]:
        """
        执行核心业务流程。
        返回 None 表示环境错误 (目录/仓库/模板/写入失败)，此时不会生成报告文件。
        """
        # --- 1. 验证数据源 ---
        if not self.data_source.validate():
            return None

        # --- 2. 加载模板 (CSV 模式不需要) ---
        template_source: Optional[str] = None
        if not self.request.csv_mode:
            template_source = report_builder.load_template(self.context.template_path)
            if template_source is None:
                return None

        # --- 3. 准备输出目录 ---
        if not report_builder.ensure_output_dir(self.context.output_dir):
            return None
        report_path = os.path.join(
            self.context.output_dir,
            report_builder.build_report_filename(self.request, self.global_config),
        )
        date_range = report_builder.format_date_range(self.request, self.global_config)

        # --- 4. 获取提交 ---
        commits = self.data_source.get_commits()
        matched_authors = sorted({commit.author for commit in commits})

        # --- 5. 未找到提交时给出作者提示 ---
        possible_authors = None
        if not commits:
            possible_authors = self._report_possible_authors()

        # --- 6. 生成报告内容 ---
        content = self._build_content(commits, template_source, date_range)
        if content is None:
            return None

        # --- 7. 保存 ---
        if not report_builder.save_report(content, report_path):
            return None

        result = ReportResult(
            report_path=report_path,
            output_dir=self.context.output_dir,
            project_name=self.request.project_name,
            date_range=date_range,
            total_commits=len(commits),
            matched_authors=matched_authors,
            possible_authors=possible_authors,
        )
        self._log_summary(result)
        return result

    def _build_content(
        self,
        commits: List[CommitRecord],
        template_source: Optional[str],
        date_range: str,
    ) -> Optional[str]:
        if self.request.csv_mode:
            return report_builder.generate_csv_report(commits, self.global_config)

        commits_text = report_builder.generate_table_report(commits, self.global_config)
        values = report_builder.build_template_values(
            self.request, date_range, commits_text
        )
        return report_builder.render_report(template_source, values)

    def _report_possible_authors(self) -> List[str]:
        """
        未找到提交时，列出仓库中包含搜索词的作者名；
        一个都没有时列出全部作者。
        """
        term = self.request.username
        logger.warning(
            f"⚠️ No commits found for author matching '{term}' in "
            f"'{self.request.project_path}' between {self.request.from_date} "
            f"and {self.request.to_date}"
        )
        logger.info("🔍 Searching for possible author names in the repository...")

        all_authors = self.data_source.get_authors()
        possible = git_utils.find_similar_authors(all_authors, term)

        if possible:
            logger.info(f"Found these author names containing '{term}':")
            for author in possible:
                logger.info(f"   {author}")
            logger.info(
                "Tip: Your search already uses partial matching. If you see your name above,"
            )
            logger.info("     there might be no commits in the specified date range.")
            return possible

        logger.info(f"No authors found matching '{term}'")
        logger.info("All authors in this repository:")
        for author in all_authors:
            logger.info(f"   {author}")
        return []

    def _log_summary(self, result: ReportResult):
        logger.info("=" * 50)
        logger.info("✓ Work report generated successfully!")
        logger.info(f"  File: {result.report_path}")
        logger.info(f"  Directory: {result.output_dir}")
        logger.info(f"  Repository: {result.project_name}")
        if result.matched_authors:
            logger.info(f"  Author(s) matched: {', '.join(result.matched_authors)}")
        logger.info(f"  Search term: {self.request.username}")
        logger.info(f"  Period: {result.date_range}")
        logger.info(f"  Commits: {result.total_commits}")
        logger.info("=" * 50)
