import unittest

from chapter_aligner.config import AlignmentConfig, ConfigurationError
from chapter_aligner.models import LocalChapter
from chapter_aligner.placeholder import analyze, is_placeholder_title


def chapters_from_titles(titles):
    return [LocalChapter(title=t, start_ms=i * 1000, end_ms=(i + 1) * 1000) for i, t in enumerate(titles)]


class TestIsPlaceholderTitle(unittest.TestCase):

    def test_generic_names(self):
        generic = [
            "Chapter 1", "Chapter 12", "chapter 1", "CHAPTER 5",
            "Chapter One", "chapter ten",
            "Track 01", "Track 5",
            "Part 1", "Part One", "Part Two", "Part 3",
            "1", "01", "12", "1.", "01 -",
            "", "   ",
        ]
        for name in generic:
            with self.subTest(name=name):
                self.assertTrue(is_placeholder_title(name))

    def test_descriptive_names(self):
        descriptive = [
            "The Boy Who Lived", "Prologue", "Epilogue", "Introduction",
            "Chapter One: The Beginning", "Opening Credits", "The End",
            "Foreword by Stephen King", "Chapter 11 - The Return",
        ]
        for name in descriptive:
            with self.subTest(name=name):
                self.assertFalse(is_placeholder_title(name))


class TestAnalyze(unittest.TestCase):

    def test_threshold_cases(self):
        cases = [
            (["Chapter 1", "Chapter 2", "Chapter 3"], 3, True),
            (["Prologue", "The Beginning", "The End"], 0, False),
            (["Chapter 1", "Chapter 2", "The Climax", "Chapter 4"], 3, True),
            (["Prologue", "The Beginning", "Chapter 3", "The End"], 1, False),
            # Exactly at the threshold counts
            (["Chapter 1", "Prologue"], 1, True),
        ]
        for titles, want_count, want_update in cases:
            with self.subTest(titles=titles):
                result = analyze(chapters_from_titles(titles))
                self.assertEqual(result.total, len(titles))
                self.assertEqual(result.placeholder_count, want_count)
                self.assertEqual(result.needs_update, want_update)

    def test_any_empty_title_needs_update(self):
        result = analyze(chapters_from_titles(["Prologue", "", "The End", "Epilogue"]))
        self.assertEqual(result.placeholder_count, 1)
        self.assertAlmostEqual(result.placeholder_ratio, 0.25)
        self.assertTrue(result.needs_update)

    def test_empty_input(self):
        result = analyze([])
        self.assertEqual(result.total, 0)
        self.assertFalse(result.needs_update)

    def test_custom_threshold(self):
        titles = ["Chapter 1", "Prologue", "The End", "Epilogue"]
        self.assertFalse(analyze(chapters_from_titles(titles)).needs_update)
        config = AlignmentConfig(needs_update_threshold=0.25)
        self.assertTrue(analyze(chapters_from_titles(titles), config).needs_update)

    def test_invalid_config(self):
        with self.assertRaises(ConfigurationError):
            analyze(chapters_from_titles(["Prologue"]), AlignmentConfig(needs_update_threshold=-1))


if __name__ == "__main__":
    unittest.main()
