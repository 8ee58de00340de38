# cli.py
"""
命令行界面 (Interface) 层
负责参数解析、日期校验以及 RunContext 的组装。
"""
import argparse
import logging
import os
import re
from typing import List, Optional

from config import GlobalConfig
from context import ReportRequest, RunContext
from orchestrator import ReportOrchestrator

logger = logging.getLogger(__name__)

USAGE_EXAMPLES = """\
Example: report-generator /path/to/repo john.doe 2024-08-30
Example: report-generator /path/to/repo john.doe 2024-08-30 2024-08-31
Example: report-generator /path/to/repo john.doe 2024-08-30 2024-08-31 --csv"""


def setup_parser() -> argparse.ArgumentParser:
    """
    负责所有 argparse 的定义。
    """
    parser = argparse.ArgumentParser(
        prog="report-generator",
        description="Generate a work report from one author's git commits.",
        epilog=USAGE_EXAMPLES,
        formatter_class=argparse.RawTextHelpFormatter,
    )

    parser.add_argument("project_directory", help="Path to the git repository.")
    parser.add_argument(
        "username",
        help="Author search term (case-insensitive partial match on author name).",
    )
    parser.add_argument("from_date", help="Start date, YYYY-MM-DD (inclusive).")
    parser.add_argument(
        "to_date",
        nargs="?",
        default=None,
        help="End date, YYYY-MM-DD (inclusive).\n(default: same as from_date)",
    )

    parser.add_argument(
        "--csv", action="store_true", help="Write a CSV file instead of a text report."
    )
    parser.add_argument(
        "--template",
        type=str,
        default=None,
        help="Report template file (table mode only).\n"
        "(default: REPORT_TEMPLATE_FILE or templates/report_template.txt next to the tool)",
    )
    parser.add_argument(
        "--output-dir",
        type=str,
        default=None,
        help="Root directory for reports; a per-project folder is created inside.\n"
        "(default: REPORT_OUTPUT_ROOT or the tool's own directory)",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging."
    )

    return parser


def is_valid_date(value: str, global_config: GlobalConfig) -> bool:
    """只校验 YYYY-MM-DD 格式，不校验日期是否真实存在"""
    return re.fullmatch(global_config.DATE_PATTERN, value) is not None


def build_context(args: argparse.Namespace, global_config: GlobalConfig) -> RunContext:
    to_date = args.to_date or args.from_date
    request = ReportRequest(
        project_path=args.project_directory,
        username=args.username,
        from_date=args.from_date,
        to_date=to_date,
        csv_mode=args.csv,
    )
    output_root = global_config.get_output_root(args.output_dir)
    return RunContext(
        request=request,
        template_path=global_config.get_template_path(args.template),
        output_dir=os.path.join(output_root, request.project_name),
        global_config=global_config,
    )


def run_cli(argv: Optional[List[str]] = None) -> int:
    """
    主入口点，返回进程退出码。
    """

    # 1. 解析 Args (参数缺失时 argparse 以状态码 2 退出)
    parser = setup_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    global_config = GlobalConfig()

    # 2. 日期格式校验
    if not is_valid_date(args.from_date, global_config):
        logger.error("❌ Invalid date format for FROM_DATE. Use YYYY-MM-DD")
        return 1
    if args.to_date and not is_valid_date(args.to_date, global_config):
        logger.error("❌ Invalid date format for TO_DATE. Use YYYY-MM-DD")
        return 1

    # 3. 组装 RunContext
    run_context = build_context(args, global_config)
    logger.debug(f"RunContext: {run_context}")

    # 4. 运行 Orchestrator
    orchestrator = ReportOrchestrator(run_context)
    result = orchestrator.run()
    if result is None:
        return 1
    return 0
