import os
import shutil
import subprocess
import tempfile
import unittest
from unittest import mock

from config import GlobalConfig
from context import ReportRequest, RunContext
from data_sources.local_git import LocalGitDataSource
from orchestrator import ReportOrchestrator

LONG_SUBJECT = (
    "Update very long documentation text that exceeds the fifty "
    "character wrap threshold for sure"
)


@unittest.skipUnless(shutil.which("git"), "git 不可用")
class TestLocalGitDataSource(unittest.TestCase):
    """针对临时仓库的集成测试"""

    def setUp(self):
        self.tmp_dir = tempfile.mkdtemp()
        self.repo = os.path.join(self.tmp_dir, "demo-repo")
        os.makedirs(self.repo)
        self._git("init", "-q")

        self._commit("jane", "jane@example.com", "2025-01-01T12:00:00", "Fix bug")
        self._commit("Jane Smith", "jane@example.com", "2025-01-02T12:00:00", LONG_SUBJECT)
        self._commit("jane", "jane@example.com", "2025-01-03T12:00:00", "Delete branch old-feature")
        self._commit("Bob", "janefan@example.com", "2025-01-02T13:00:00", "Email-only match")
        self._commit("jane", "jane@example.com", "2025-02-01T12:00:00", "Outside range | piped")

    def tearDown(self):
        shutil.rmtree(self.tmp_dir, ignore_errors=True)

    def _git(self, *args, env=None):
        subprocess.run(
            ["git", "-C", self.repo] + list(args),
            check=True,
            capture_output=True,
            env=env,
        )

    def _commit(self, name, email, date, message):
        env = dict(os.environ)
        env.update(
            {
                "GIT_AUTHOR_NAME": name,
                "GIT_AUTHOR_EMAIL": email,
                "GIT_AUTHOR_DATE": date,
                "GIT_COMMITTER_NAME": name,
                "GIT_COMMITTER_EMAIL": email,
                "GIT_COMMITTER_DATE": date,
            }
        )
        self._git(
            "-c", "commit.gpgsign=false", "commit", "--allow-empty", "-q", "-m", message,
            env=env,
        )

    def _context(self, username="jane", from_date="2025-01-01", to_date="2025-01-03",
                 csv_mode=False):
        request = ReportRequest(self.repo, username, from_date, to_date, csv_mode)
        config = GlobalConfig()
        return RunContext(
            request=request,
            template_path=config.get_template_path(),
            output_dir=os.path.join(self.tmp_dir, "out", request.project_name),
            global_config=config,
        )

    def test_validate(self):
        self.assertTrue(LocalGitDataSource(self._context()).validate())

    def test_validate_rejects_plain_directory(self):
        plain = os.path.join(self.tmp_dir, "plain")
        os.makedirs(plain)
        context = self._context()
        context = RunContext(
            request=ReportRequest(plain, "jane", "2025-01-01", "2025-01-01"),
            template_path=context.template_path,
            output_dir=context.output_dir,
            global_config=context.global_config,
        )
        with mock.patch.dict(os.environ, {"GIT_CEILING_DIRECTORIES": self.tmp_dir}):
            with self.assertLogs("data_sources.local_git", level="ERROR"):
                self.assertFalse(LocalGitDataSource(context).validate())

    def test_commits_are_filtered_and_ordered(self):
        commits = LocalGitDataSource(self._context()).get_commits()
        self.assertEqual([c.message for c in commits], ["Fix bug", LONG_SUBJECT])
        self.assertEqual([c.date for c in commits], ["2025-01-01", "2025-01-02"])
        self.assertEqual(commits[1].author, "Jane Smith")
        self.assertTrue(all(len(c.hash) >= 7 for c in commits))

    def test_inverted_range_yields_nothing(self):
        source = LocalGitDataSource(self._context(from_date="2025-01-03", to_date="2025-01-01"))
        self.assertEqual(source.get_commits(), [])

    def test_subject_with_pipe_survives(self):
        source = LocalGitDataSource(self._context(from_date="2025-02-01", to_date="2025-02-01"))
        self.assertEqual([c.message for c in source.get_commits()], ["Outside range | piped"])

    def test_get_authors(self):
        authors = LocalGitDataSource(self._context()).get_authors()
        self.assertEqual(authors, ["Bob", "Jane Smith", "jane"])

    def test_end_to_end_table_report(self):
        result = ReportOrchestrator(self._context()).run()

        self.assertEqual(result.total_commits, 2)
        self.assertEqual(result.matched_authors, ["Jane Smith", "jane"])
        with open(result.report_path, "r", encoding="utf-8") as f:
            content = f.read()
        self.assertNotIn("Delete branch", content)
        self.assertNotIn("Email-only", content)
        table_rows = [line for line in content.splitlines() if line.startswith("| ")]
        # 表头 + 分隔线 + 1 行 + 至少 2 行 (换行的长提交)
        self.assertGreaterEqual(len(table_rows), 5)

    def test_end_to_end_no_commits(self):
        with self.assertLogs("orchestrator", level="INFO"):
            result = ReportOrchestrator(self._context(username="zed")).run()
        self.assertEqual(result.total_commits, 0)
        self.assertEqual(result.possible_authors, [])
        with open(result.report_path, "r", encoding="utf-8") as f:
            self.assertIn("No commits found for this period.", f.read())


if __name__ == "__main__":
    unittest.main()
