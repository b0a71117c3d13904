"""
Tests for the command-line interface.

Tests:
- `lingo vocab` reads the store the server writes to
"""

from argparse import Namespace

import pytest

from .. import cli
from ..api import app as app_module
from ..providers import JsonFileVocabularyStore


class TestVocabCommand:
    """Tests for cmd_vocab."""

    def test_reads_default_store_of_the_server(self, tmp_path, monkeypatch, capsys):
        """Pairs stored by the service show up with no directory configured."""
        monkeypatch.setattr(app_module, "LINGO_VOCAB_DIR", None)
        monkeypatch.setenv("HOME", str(tmp_path))

        service = app_module.build_service()
        assert isinstance(service.vocabulary_store, JsonFileVocabularyStore)
        service.vocabulary_store.append_pair("u1", "sky", "cielo")

        cli.cmd_vocab(Namespace(user_id="u1", dir=None))

        out = capsys.readouterr().out
        assert "sky" in out
        assert "cielo" in out
        assert "1 word(s)" in out

    def test_reads_configured_directory(self, tmp_path, monkeypatch, capsys):
        monkeypatch.setattr(app_module, "LINGO_VOCAB_DIR", str(tmp_path / "vocab"))

        app_module.build_service().vocabulary_store.append_pair("u1", "cat", "gato")
        cli.cmd_vocab(Namespace(user_id="u1", dir=None))

        assert "gato" in capsys.readouterr().out

    def test_dir_flag_overrides_environment(self, tmp_path, monkeypatch, capsys):
        monkeypatch.setattr(app_module, "LINGO_VOCAB_DIR", str(tmp_path / "server"))
        JsonFileVocabularyStore(store_dir=tmp_path / "other").append_pair("u1", "dog", "perro")

        cli.cmd_vocab(Namespace(user_id="u1", dir=str(tmp_path / "other")))

        assert "perro" in capsys.readouterr().out

    def test_unknown_user(self, tmp_path, monkeypatch, capsys):
        monkeypatch.setattr(app_module, "LINGO_VOCAB_DIR", str(tmp_path))
        cli.cmd_vocab(Namespace(user_id="nobody", dir=None))
        assert "No words stored for nobody" in capsys.readouterr().out

    def test_unreadable_store_exits(self, tmp_path, monkeypatch):
        monkeypatch.setattr(app_module, "LINGO_VOCAB_DIR", str(tmp_path))
        store = JsonFileVocabularyStore(store_dir=tmp_path)
        store.append_pair("u1", "cat", "gato")
        next(tmp_path.glob("*.json")).write_text("{broken", encoding="utf-8")

        with pytest.raises(SystemExit):
            cli.cmd_vocab(Namespace(user_id="u1", dir=None))
