import logging
import os
from typing import List

from .base import DataSource
from models import CommitRecord
from context import RunContext
import git_utils

logger = logging.getLogger(__name__)


class LocalGitDataSource(DataSource):
    """
    本地 Git 数据源实现。
    通过调用 git 命令行工具分析本地仓库。
    """

    def __init__(self, context: RunContext):
        self.context = context

    def validate(self) -> bool:
        repo_path = self.context.request.project_path
        if not os.path.isdir(repo_path):
            logger.error(f"❌ Directory '{repo_path}' does not exist")
            return False
        if not git_utils.is_git_repository(repo_path):
            logger.error(f"❌ '{repo_path}' is not a git repository")
            return False
        return True

    def get_commits(self) -> List[CommitRecord]:
        cfg = self.context.global_config
        log_output = git_utils.get_git_log(self.context)
        if log_output is None:
            logger.warning("⚠️ git log failed, treating as no commits")
            return []
        commits = git_utils.parse_git_log(log_output, cfg.FIELD_SEPARATOR)
        return git_utils.filter_commits(
            commits, self.context.request.username, cfg.EXCLUDED_SUBJECT_PREFIXES
        )

    def get_authors(self) -> List[str]:
        return git_utils.get_all_authors(self.context)
