"""
Tests for settings loading and saving.
"""
import json
from pathlib import Path

from booklist.settings import Settings, load_settings, save_settings


class TestSettings:
    """Test cases for Settings persistence."""

    def test_defaults_written_on_first_load(self, tmp_path):
        path = tmp_path / "conf" / "booklist-settings.json"

        settings = load_settings(path)

        assert settings == Settings()
        assert json.loads(path.read_text())["api_url"] == "http://localhost:5001"

    def test_round_trip(self, tmp_path):
        path = tmp_path / "settings.json"
        original = Settings(api_url="https://books.example", timeout=3.5,
                            send_image_on_update=True, log_path="/tmp/x.log")
        save_settings(original, path)

        assert load_settings(path) == original

    def test_partial_file_uses_defaults(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text(json.dumps({"api_url": "https://books.example"}))

        settings = load_settings(path)

        assert settings.api_url == "https://books.example"
        assert settings.timeout == 10.0
        assert settings.send_image_on_update is False

    def test_corrupt_file_falls_back(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text("{not json")

        assert load_settings(path) == Settings()

    def test_resolve_log_path(self, tmp_path):
        absolute = tmp_path / "log.jsonl"
        assert Settings(log_path=str(absolute)).resolve_log_path() == absolute.resolve()
        relative = Settings().resolve_log_path()
        assert relative.is_absolute()
        assert relative.parts[-2:] == ("data", "booklist.log")
        assert ".booklist" in relative.parts

    def test_resolve_log_path_expands_home(self):
        resolved = Settings(log_path="~/logs/b.log").resolve_log_path()
        assert resolved == (Path.home() / "logs" / "b.log").resolve()

    def test_activity_path(self, tmp_path, booklist_dir):
        assert Settings().resolve_activity_path() == (booklist_dir / "data" / "activity.log").resolve()
        path = tmp_path / "settings.json"
        save_settings(Settings(activity_path=str(tmp_path / "changes.jsonl")), path)

        assert load_settings(path).resolve_activity_path() == (tmp_path / "changes.jsonl").resolve()
