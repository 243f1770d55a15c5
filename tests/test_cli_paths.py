from pathlib import Path

import pytest


def test_working_document_default(tmp_path, monkeypatch):
    """Test the working document defaults to the current directory."""
    monkeypatch.chdir(tmp_path)
    from decisiontree.cli.paths import working_document_path

    assert Path(working_document_path(None)) == tmp_path / "decision_tree.json"
    assert working_document_path("other.yaml") == "other.yaml"


def test_resolve_export_path_default(tmp_path, monkeypatch):
    """Test default export path generation."""
    monkeypatch.chdir(tmp_path)
    from decisiontree.cli.paths import exports_dir, resolve_export_path

    assert Path(resolve_export_path(None)) == exports_dir() / "decision_tree.json"
    assert Path(resolve_export_path(None, "yaml")) == exports_dir() / "decision_tree.yaml"


def test_resolve_export_path_simple(tmp_path, monkeypatch):
    """Test resolve export path with a bare name."""
    monkeypatch.chdir(tmp_path)
    from decisiontree.cli.paths import exports_dir, resolve_export_path

    assert Path(resolve_export_path("mytree")) == exports_dir() / "mytree.json"
    assert Path(resolve_export_path("mytree.yml", "yaml")) == exports_dir() / "mytree.yml"


def test_resolve_export_path_nested(tmp_path, monkeypatch):
    """Test resolve export path keeps an explicit directory."""
    monkeypatch.chdir(tmp_path)
    from decisiontree.cli.paths import resolve_export_path

    assert resolve_export_path("out/tree.json") == str(Path("out/tree.json"))


def test_find_document_in_exports(tmp_path, monkeypatch):
    """Test find_document falls back to exports/ and adds extensions."""
    monkeypatch.chdir(tmp_path)
    from decisiontree.cli.paths import exports_dir, find_document

    exports_dir().mkdir()
    (exports_dir() / "saved.yaml").write_text("id: s\nnodeType: start\n")

    assert Path(find_document("saved")) == exports_dir() / "saved.yaml"
    assert Path(find_document("saved.yaml")) == exports_dir() / "saved.yaml"


def test_find_document_missing(tmp_path, monkeypatch):
    """Test find_document raises for unknown documents."""
    monkeypatch.chdir(tmp_path)
    from decisiontree.cli.paths import find_document

    with pytest.raises(FileNotFoundError):
        find_document("nowhere")
