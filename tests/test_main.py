import unittest
from unittest.mock import mock_open, patch

from chapter_aligner.main import main
from chapter_aligner.models import LocalChapter, RemoteChapter
from chapter_aligner.utils import ChapterSourceError


LOCAL = [
    LocalChapter("Chapter 1", 0, 600000),
    LocalChapter("Chapter 2", 600000, 1200000),
]
REMOTE = [
    RemoteChapter("Introduction", 0, 600000),
    RemoteChapter("The Journey Begins", 600000, 600000),
]


@patch("chapter_aligner.main.setup_logging")
@patch("chapter_aligner.main.print_suggestions")
@patch("chapter_aligner.main.os.path.exists", return_value=True)
@patch("chapter_aligner.main.load_remote_chapters", return_value=REMOTE)
@patch("chapter_aligner.main.load_local_chapters", return_value=LOCAL)
class TestMainIntegration(unittest.TestCase):

    @patch("chapter_aligner.main.save_chapters")
    @patch("chapter_aligner.main.save_report")
    def test_align_and_apply(self, mock_save_report, mock_save_chapters, mock_local, mock_remote,
                             mock_exists, mock_print, mock_logging):
        argv = ["chapter-align", "local.json", "catalog.json", "--output", "out", "--apply", "renamed.json"]
        with patch("sys.argv", argv):
            main()

        mock_print.assert_called_once()
        result = mock_save_report.call_args[0][0]
        self.assertEqual(mock_save_report.call_args[0][1], "out")
        self.assertTrue(result.needs_update)

        renamed, path = mock_save_chapters.call_args[0]
        self.assertEqual(path, "renamed.json")
        self.assertEqual([c.title for c in renamed], ["Introduction", "The Journey Begins"])

    @patch("chapter_aligner.main.save_chapters")
    @patch("chapter_aligner.main.review_suggestions", return_value=[1])
    def test_review_rejections_are_applied(self, mock_review, mock_save_chapters, mock_local,
                                           mock_remote, mock_exists, mock_print, mock_logging):
        argv = ["chapter-align", "local.json", "catalog.json", "--review", "--apply", "renamed.json"]
        with patch("sys.argv", argv):
            main()

        mock_review.assert_called_once()
        mock_print.assert_not_called()
        renamed, _ = mock_save_chapters.call_args[0]
        self.assertEqual([c.title for c in renamed], ["Introduction", "Chapter 2"])

    @patch("builtins.print")
    def test_analyze_only(self, mock_builtin_print, mock_local, mock_remote, mock_exists,
                          mock_print, mock_logging):
        with patch("sys.argv", ["chapter-align", "local.json", "--analyze-only"]):
            main()

        mock_remote.assert_not_called()
        output = mock_builtin_print.call_args[0][0]
        self.assertIn('"needs_update": true', output)

    def test_remote_required(self, mock_local, mock_remote, mock_exists, mock_print, mock_logging):
        with patch("sys.argv", ["chapter-align", "local.json"]):
            with self.assertRaises(SystemExit) as ctx:
                main()
        self.assertEqual(ctx.exception.code, 1)

    def test_invalid_config_exits(self, mock_local, mock_remote, mock_exists, mock_print, mock_logging):
        with patch("sys.argv", ["chapter-align", "local.json", "catalog.json", "--time-window", "0"]):
            with self.assertRaises(SystemExit) as ctx:
                main()
        self.assertEqual(ctx.exception.code, 1)
        mock_local.assert_not_called()

    @patch("chapter_aligner.main.logger")
    @patch("chapter_aligner.config.open", new_callable=mock_open, read_data='{"insert_cost": "high"}')
    def test_non_numeric_config_file_exits(self, mock_file, mock_logger, mock_local, mock_remote,
                                           mock_exists, mock_print, mock_logging):
        argv = ["chapter-align", "local.json", "catalog.json", "--config", "settings.json"]
        with patch("sys.argv", argv):
            with self.assertRaises(SystemExit) as ctx:
                main()
        self.assertEqual(ctx.exception.code, 1)
        mock_logger.error.assert_called_once()
        self.assertIn("insert_cost", mock_logger.error.call_args[0][0])
        mock_local.assert_not_called()

    def test_unreadable_source_exits(self, mock_local, mock_remote, mock_exists, mock_print, mock_logging):
        mock_remote.side_effect = ChapterSourceError("bad payload")
        with patch("sys.argv", ["chapter-align", "local.json", "catalog.json"]):
            with self.assertRaises(SystemExit) as ctx:
                main()
        self.assertEqual(ctx.exception.code, 1)

    def test_invalid_asin_exits(self, mock_local, mock_remote, mock_exists, mock_print, mock_logging):
        with patch("sys.argv", ["chapter-align", "local.json", "catalog.json", "--asin", "nope"]):
            with self.assertRaises(SystemExit) as ctx:
                main()
        self.assertEqual(ctx.exception.code, 1)

    def test_missing_local_exits(self, mock_local, mock_remote, mock_exists, mock_print, mock_logging):
        mock_exists.return_value = False
        with patch("sys.argv", ["chapter-align", "local.json", "catalog.json"]):
            with self.assertRaises(SystemExit) as ctx:
                main()
        self.assertEqual(ctx.exception.code, 1)


if __name__ == "__main__":
    unittest.main()
