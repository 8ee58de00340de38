from abc import ABC, abstractmethod
from typing import List
from models import CommitRecord


class DataSource(ABC):
    """
    数据源抽象基类
    定义了获取提交数据的标准接口，Orchestrator 不直接依赖 git 命令行。
    """

    @abstractmethod
    def validate(self) -> bool:
        """
        验证数据源是否可用。
        例如：本地路径是否存在且为 Git 仓库。
        """
        pass

    @abstractmethod
    def get_commits(self) -> List[CommitRecord]:
        """
        获取指定作者、指定日期范围内的提交列表 (由旧到新)。
        查询失败时返回空列表。
        """
        pass

    @abstractmethod
    def get_authors(self) -> List[str]:
        """
        获取仓库所有分支上去重、排序后的作者名 (用于未找到提交时的提示)。
        """
        pass
