import pathlib
import unittest
from unittest.mock import mock_open, patch

from chapter_aligner.models import AlignedChapter, AlignmentResult, LocalChapter, MatchKind
from chapter_aligner.output_manager import (format_report_rows, get_output_dir, save_chapters,
                                            save_report)


def sample_result():
    return AlignmentResult(
        aligned=(
            AlignedChapter(0, 0, 65000, "Chapter 1", "Introduction", 0.9, MatchKind.MATCHED, 0),
            AlignedChapter(1, 65000, 60000, "Bonus", "", 0.0, MatchKind.INSERTED),
            AlignedChapter(2, 125000, 60000, "Chapter 3", "The End", 1.0, MatchKind.MATCHED, 1),
        ),
        overall_confidence=0.95,
        needs_update=True,
        chapter_count_match=False,
    )


class TestOutputManager(unittest.TestCase):

    def test_get_output_dir(self):
        self.assertEqual(get_output_dir("My Book: Part 1", "B00ABCDEFG"),
                         pathlib.Path("repo") / "My Book Part 1 [B00ABCDEFG]")
        self.assertEqual(get_output_dir("", None), pathlib.Path("repo") / "Untitled")

    def test_format_report_rows(self):
        rows = format_report_rows(sample_result())
        self.assertEqual(rows[0]["start_time"], "00:00:00")
        self.assertEqual(rows[0]["confidence"], "0.90")
        self.assertEqual(rows[1]["confidence"], "")
        self.assertEqual(rows[2]["start_time"], "00:02:05")

    @patch('chapter_aligner.output_manager.pathlib.Path.mkdir')
    @patch('chapter_aligner.output_manager.open', new_callable=mock_open)
    @patch('chapter_aligner.output_manager.json.dump')
    def test_save_report(self, mock_json_dump, mock_file, mock_mkdir):
        json_path = save_report(sample_result(), pathlib.Path("out"))

        self.assertEqual(json_path, pathlib.Path("out") / "chapter_alignment.json")
        mock_mkdir.assert_called_once_with(parents=True, exist_ok=True)

        args, _ = mock_json_dump.call_args
        data = args[0]
        self.assertEqual(len(data["chapters"]), 3)
        self.assertEqual(data["chapters"][1]["kind"], "INSERTED")
        self.assertTrue(data["needs_update"])

        handle = mock_file()
        written_content = "".join(call.args[0] for call in handle.write.call_args_list)
        self.assertIn("**Overall Confidence:** 0.95", written_content)
        self.assertIn("| 0 | 00:00:00 | Chapter 1 | Introduction | 0.90 | MATCHED |", written_content)
        self.assertIn("| 1 | 00:01:05 | Bonus |  |  | INSERTED |", written_content)

    @patch('chapter_aligner.output_manager.pathlib.Path.mkdir')
    @patch('chapter_aligner.output_manager.open', new_callable=mock_open)
    @patch('chapter_aligner.output_manager.json.dump')
    def test_save_chapters(self, mock_json_dump, mock_file, mock_mkdir):
        save_chapters([LocalChapter("Introduction", 0, 65000)], pathlib.Path("out/chapters.json"))
        args, _ = mock_json_dump.call_args
        self.assertEqual(args[0], [{"title": "Introduction", "start_ms": 0, "end_ms": 65000}])


if __name__ == "__main__":
    unittest.main()
