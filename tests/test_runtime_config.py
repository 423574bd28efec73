import os
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from bibrecon.runtime_config import CONFIG_PATH_ENV, MatchingConfig, load_runtime_config


class RuntimeConfigTests(unittest.TestCase):
    def _load(self, text: str):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "runtime.toml"
            path.write_text(text, encoding="utf-8")
            return load_runtime_config(path)

    def test_missing_file_uses_defaults(self) -> None:
        cfg = load_runtime_config(Path("/nonexistent/runtime.toml"))
        self.assertEqual(cfg.matching, MatchingConfig())
        self.assertEqual(cfg.formatting.doi_url_prefix, "https://doi.org/")
        self.assertEqual(cfg.diagnostics.possible_duplicate_min_ratio, 88)

    def test_reads_sections(self) -> None:
        cfg = self._load(
            "[matching]\nyear_window = 2\ntitle_similar_ratio = 0.3\n"
            "[formatting]\narxiv_url_abs_prefix = \"https://export.arxiv.org/abs/\"\n"
            "[diagnostics]\npossible_duplicate_min_ratio = 95\n"
        )
        self.assertEqual(cfg.matching.year_window, 2)
        self.assertEqual(cfg.matching.title_similar_ratio, 0.3)
        self.assertEqual(cfg.matching.author_similar_max_edits, 2)
        self.assertEqual(cfg.formatting.arxiv_url_abs_prefix, "https://export.arxiv.org/abs/")
        self.assertEqual(cfg.diagnostics.possible_duplicate_min_ratio, 95)

    def test_invalid_values_fall_back(self) -> None:
        cfg = self._load(
            "[matching]\nyear_window = -1\ntitle_very_similar_ratio = \"high\"\n"
            "[formatting]\ndoi_url_prefix = \"  \"\n"
            "[diagnostics]\npossible_duplicate_min_ratio = 150\n"
        )
        self.assertEqual(cfg.matching.year_window, 5)
        self.assertEqual(cfg.matching.title_very_similar_ratio, 0.1)
        self.assertEqual(cfg.formatting.doi_url_prefix, "https://doi.org/")
        self.assertEqual(cfg.diagnostics.possible_duplicate_min_ratio, 88)

    def test_zero_allowed_for_window_and_edit_limits(self) -> None:
        cfg = self._load(
            "[matching]\nyear_window = 0\ntitle_similar_max_edits = 0\n"
            "author_similar_max_edits = 0\nmax_compare_bytes = 0\n"
        )
        self.assertEqual(cfg.matching.year_window, 0)
        self.assertEqual(cfg.matching.title_similar_max_edits, 0)
        self.assertEqual(cfg.matching.author_similar_max_edits, 0)
        self.assertEqual(cfg.matching.max_compare_bytes, 255)

    def test_unparsable_file_uses_defaults(self) -> None:
        cfg = self._load("[matching\nyear_window = ")
        self.assertEqual(cfg.matching, MatchingConfig())

    def test_path_from_environment(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "custom.toml"
            path.write_text("[matching]\nyear_window = 9\n", encoding="utf-8")
            with patch.dict(os.environ, {CONFIG_PATH_ENV: str(path)}):
                cfg = load_runtime_config()
        self.assertEqual(cfg.matching.year_window, 9)


if __name__ == "__main__":
    unittest.main()
