"""
Tests for atomic JSON output and raw document loading
"""

import json

import pytest

from migration_burndown.exceptions import BurndownDataError
from migration_burndown.utils.atomic_json import atomic_json_save, load_json_document


class TestAtomicJsonSave:
    """Tests for atomic_json_save()"""

    def test_writes_json(self, tmp_path):
        output = tmp_path / "report.json"

        assert atomic_json_save({"environments": [], "generatedAt": 1}, output) is True

        assert json.loads(output.read_text(encoding="utf-8")) == {"environments": [], "generatedAt": 1}

    def test_creates_missing_directories(self, tmp_path):
        output = tmp_path / ".tmp" / "burndown" / "report.json"

        atomic_json_save({"ok": True}, output)

        assert output.exists()

    def test_overwrites_existing_file(self, tmp_path):
        output = tmp_path / "report.json"
        output.write_text('{"old": true}', encoding="utf-8")

        atomic_json_save({"new": True}, output)

        assert json.loads(output.read_text(encoding="utf-8")) == {"new": True}

    def test_no_temp_files_left(self, tmp_path):
        atomic_json_save({"ok": True}, tmp_path / "report.json")

        assert [p.name for p in tmp_path.iterdir()] == ["report.json"]

    def test_unserializable_data_cleans_up(self, tmp_path):
        output = tmp_path / "report.json"

        with pytest.raises(TypeError):
            atomic_json_save({"bad": object()}, output)

        assert list(tmp_path.iterdir()) == []


class TestLoadJsonDocument:
    """Tests for load_json_document()"""

    def test_loads_object(self, tmp_path):
        path = tmp_path / "burndown.json"
        path.write_text(json.dumps({"environments": []}), encoding="utf-8")

        assert load_json_document(path) == {"environments": []}

    def test_accepts_string_path(self, tmp_path):
        path = tmp_path / "burndown.json"
        path.write_text("{}", encoding="utf-8")

        assert load_json_document(str(path)) == {}

    def test_empty_file_is_empty_document(self, tmp_path):
        path = tmp_path / "burndown.json"
        path.write_text("  \n", encoding="utf-8")

        assert load_json_document(path) == {}

    def test_missing_file(self, tmp_path):
        with pytest.raises(BurndownDataError, match="not found"):
            load_json_document(tmp_path / "missing.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "burndown.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(BurndownDataError, match="Invalid JSON"):
            load_json_document(path)

    def test_non_object_document(self, tmp_path):
        path = tmp_path / "burndown.json"
        path.write_text("[1, 2]", encoding="utf-8")

        with pytest.raises(BurndownDataError, match="JSON object"):
            load_json_document(path)
