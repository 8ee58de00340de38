import subprocess
import logging
import re
from typing import Optional, List, Iterable

from config import GlobalConfig
from context import RunContext
from models import CommitRecord

logger = logging.getLogger(__name__)


def run_git_command(
    args: List[str], repo_path: str, context: str = "执行Git命令"
) -> Optional[str]:
    """
    统一的Git命令执行函数
    - 参数以列表形式传入，作者等用户输入不经过 shell
    - 非零退出码、git 不存在均返回 None
    """
    cmd = ["git", "-C", repo_path] + list(args)
    try:
        logger.debug(f"执行命令: {' '.join(cmd)}")
        result = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
        )
        if result.returncode != 0:
            logger.debug(f"{context}失败: {result.stderr.strip()}")
            return None
        logger.debug(f"{context}成功，输出 {len(result.stdout)} 个字符")
        return result.stdout
    except FileNotFoundError:
        logger.error("❌ git executable not found on PATH")
        return None
    except OSError as e:
        logger.error(f"{context}出错: {e}")
        return None


def is_git_repository(repo_path: str) -> bool:
    """检查指定路径是否为Git仓库"""
    return run_git_command(["rev-parse", "--git-dir"], repo_path, "检查Git仓库") is not None


def build_log_args(context: RunContext) -> List[str]:
    """组装按作者和日期范围查询的 git log 参数"""
    request = context.request
    cfg = context.global_config
    return [
        "log",
        "--all",
        f"--since={request.since}",
        f"--until={request.until}",
        f"--author={request.username}",
        "--regexp-ignore-case",
        "--fixed-strings",
        "--date=short",
        "--reverse",
        "-z",
        f"--pretty=format:{cfg.GIT_LOG_FORMAT}",
    ]


def get_git_log(context: RunContext) -> Optional[str]:
    """获取Git提交历史 (原始输出)"""
    return run_git_command(
        build_log_args(context), context.request.project_path, "获取Git提交历史"
    )


def encode_commit_record(record: CommitRecord, separator: str) -> str:
    """
    将提交编码为单条记录 (与 GIT_LOG_FORMAT 输出一致)：
    hash, date, author, hash, message
    作者名之后重复的 hash 是边界标记，作者与提交信息都可以包含分隔符。
    """
    for name in ("hash", "date"):
        value = getattr(record, name)
        if not value or separator in value or "\0" in value:
            raise ValueError(f"{name} is empty or contains a reserved delimiter: {value!r}")
    for name in ("author", "message"):
        if "\0" in getattr(record, name):
            raise ValueError(f"{name} contains a NUL byte")
    marker = separator + record.hash + separator
    if (separator + record.author + marker).find(marker) != len(record.author) + 1:
        raise ValueError(f"author contains the record boundary marker: {record.author!r}")
    return separator.join(
        [record.hash, record.date, record.author, record.hash, record.message]
    )


def parse_single_commit(line: str, separator: str) -> Optional[CommitRecord]:
    """解析单条提交记录；格式异常 (含日期不合法) 的记录跳过"""
    parts = line.split(separator, 2)
    if len(parts) < 3 or not parts[0]:
        logger.warning(f"提交格式异常: {line!r}")
        return None
    commit_hash, date, rest = parts
    if re.fullmatch(GlobalConfig.DATE_PATTERN, date) is None:
        logger.warning(f"提交日期异常，已跳过: {line!r}")
        return None

    # 作者名截止到重复的 hash
    remainder = separator + rest
    marker = separator + commit_hash + separator
    boundary = remainder.find(marker)
    if boundary < 0:
        logger.warning(f"提交格式异常 (缺少边界标记): {line!r}")
        return None
    return CommitRecord(
        hash=commit_hash,
        date=date,
        author=remainder[1:boundary],
        message=remainder[boundary + len(marker):],
    )


def parse_git_log(log_output: Optional[str], separator: str) -> List[CommitRecord]:
    """解析 `git log -z` 的输出"""
    commits: List[CommitRecord] = []
    if not log_output or not log_output.strip("\0\n"):
        logger.debug("Git日志输出为空")
        return commits
    for chunk in log_output.split("\0"):
        # -z 模式下记录之间可能残留换行
        entry = chunk.strip("\n")
        if not entry:
            continue
        commit = parse_single_commit(entry, separator)
        if commit:
            commits.append(commit)
    logger.debug(f"成功解析 {len(commits)} 个提交")
    return commits


def matches_author(author: str, search_term: str) -> bool:
    """大小写不敏感的作者名子串匹配"""
    return search_term.casefold() in author.casefold()


def filter_commits(
    commits: Iterable[CommitRecord], search_term: str, excluded_prefixes: tuple
) -> List[CommitRecord]:
    """过滤自动生成的提交，并确保作者名 (而非邮箱) 匹配搜索词"""
    kept = []
    for commit in commits:
        if commit.is_auto_generated(excluded_prefixes):
            logger.debug(f"已跳过自动生成的提交 {commit.hash}: {commit.message}")
            continue
        if not matches_author(commit.author, search_term):
            logger.debug(f"已跳过仅邮箱匹配的提交 {commit.hash} ({commit.author})")
            continue
        kept.append(commit)
    return kept


def get_all_authors(context: RunContext) -> List[str]:
    """获取所有分支上去重、排序后的作者名"""
    output = run_git_command(
        ["log", "--all", f"--pretty=format:{context.global_config.GIT_AUTHORS_FORMAT}"],
        context.request.project_path,
        "获取作者列表",
    )
    if not output:
        return []
    return sorted({line for line in output.splitlines() if line.strip()})


def find_similar_authors(authors: Iterable[str], search_term: str) -> List[str]:
    return [author for author in authors if matches_author(author, search_term)]
