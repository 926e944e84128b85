import unittest

from commit_suggester.diff.intake import (
    ChangeStats,
    ChangeSummary,
    IntakeError,
    collect_change_summary,
    parse_file_list,
    parse_numstat,
)
from commit_suggester.vcs.git_client import GitError


class FakeSource:
    def __init__(self, diff="", files="", numstat="", error=None):
        self.diff = diff
        self.files = files
        self.numstat = numstat
        self.error = error
        self.calls = []

    def get_staged_diff(self):
        self.calls.append("diff")
        if self.error is not None:
            raise self.error
        return self.diff

    def get_staged_files(self):
        self.calls.append("files")
        return self.files

    def get_staged_numstat(self):
        self.calls.append("numstat")
        return self.numstat


class TestParsers(unittest.TestCase):
    def test_parse_file_list_drops_blank_lines_and_keeps_order(self) -> None:
        text = "src/b.py\n\nsrc/a.py\n  \nREADME.md\n"
        self.assertEqual(parse_file_list(text), ["src/b.py", "src/a.py", "README.md"])

    def test_parse_file_list_empty(self) -> None:
        self.assertEqual(parse_file_list(""), [])

    def test_parse_numstat_sums_lines(self) -> None:
        text = "10\t2\tsrc/a.py\n3\t1\tsrc/b.py\n"
        self.assertEqual(parse_numstat(text), ChangeStats(additions=13, deletions=3))

    def test_parse_numstat_binary_and_garbage_count_as_zero(self) -> None:
        text = "-\t-\tlogo.png\n5\tx\tsrc/a.py\ngarbage\n\n2\t4\tsrc/b.py\n"
        self.assertEqual(parse_numstat(text), ChangeStats(additions=7, deletions=4))

    def test_parse_numstat_without_tab(self) -> None:
        self.assertEqual(parse_numstat("7\n"), ChangeStats(additions=7, deletions=0))


class TestCollectChangeSummary(unittest.TestCase):
    def test_collects_all_three_facts_in_order(self) -> None:
        source = FakeSource(
            diff="diff --git a/src/a.py b/src/a.py\n+x = 1\n",
            files="src/a.py\nsrc/b.py\n",
            numstat="1\t0\tsrc/a.py\n2\t3\tsrc/b.py\n",
        )
        summary = collect_change_summary(source)
        self.assertEqual(source.calls, ["diff", "files", "numstat"])
        self.assertEqual(summary.files, ("src/a.py", "src/b.py"))
        self.assertEqual(summary.diff_text, source.diff)
        self.assertEqual(summary.stats, ChangeStats(additions=3, deletions=3))

    def test_empty_diff_is_a_valid_summary(self) -> None:
        summary = collect_change_summary(FakeSource())
        self.assertEqual(summary, ChangeSummary())
        self.assertEqual(summary.stats.additions, 0)

    def test_collaborator_failure_raises_intake_error(self) -> None:
        source = FakeSource(error=GitError("fatal: not a git repository"))
        with self.assertRaises(IntakeError) as ctx:
            collect_change_summary(source)
        self.assertIn("not a git repository", str(ctx.exception))

    def test_os_error_raises_intake_error(self) -> None:
        with self.assertRaises(IntakeError):
            collect_change_summary(FakeSource(error=FileNotFoundError("git")))

    def test_summary_is_immutable(self) -> None:
        summary = collect_change_summary(FakeSource(files="a.py\n"))
        with self.assertRaises(AttributeError):
            summary.files = ("b.py",)  # type: ignore[misc]


if __name__ == "__main__":
    unittest.main()
