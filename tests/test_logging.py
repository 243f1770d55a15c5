import logging

import pytest

from decisiontree.core.tree.errors import StructuralConstraintError
from decisiontree.io import TreeDocumentError
from decisiontree.utils.logging import log_calls


def test_accepted_mutation_logged(editor, caplog):
    """Accepted mutations log at INFO."""
    with caplog.at_level(logging.INFO, logger="decisiontree"):
        editor.add_node(editor.tree.root.id, "decision", {"name": "D"})

    assert any("Added decision node" in r.getMessage() for r in caplog.records)


def test_rejected_mutation_logged_as_warning(editor, caplog):
    """Rejected edits log a warning and are re-raised."""
    with caplog.at_level(logging.DEBUG, logger="decisiontree"):
        with pytest.raises(StructuralConstraintError):
            editor.delete_node(editor.tree.root.id)

    warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
    assert any("Cannot delete start node" in r.getMessage() for r in warnings)


def test_unexpected_error_logged_with_traceback(caplog):
    """Other errors log at ERROR with exc_info and are re-raised."""

    @log_calls("decisiontree.test")
    def explode():
        raise ValueError("boom")

    with caplog.at_level(logging.DEBUG, logger="decisiontree.test"):
        with pytest.raises(ValueError):
            explode()

    errors = [r for r in caplog.records if r.levelno == logging.ERROR]
    assert errors and errors[0].exc_info is not None


def test_rejected_document_logged_as_warning(editor, tmp_path, caplog):
    """A malformed import logs a warning without a traceback."""
    bad = tmp_path / "bad.json"
    bad.write_text('{"nodeType": "decision", "name": "oops"}')

    with caplog.at_level(logging.DEBUG, logger="decisiontree"):
        with pytest.raises(TreeDocumentError):
            editor.import_document(bad)

    assert not [r for r in caplog.records if r.levelno >= logging.ERROR]
    warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
    assert any("import_document rejected" in r.getMessage() for r in warnings)
