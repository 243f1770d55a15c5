"""
Unit tests for CLI commands.

Tests cover:
- new / show / options commands
- add / edit / delete / normalize commands
- samples / sample / import / export / validate commands
"""

import json

import pytest
from typer.testing import CliRunner

from decisiontree.cli.app import app

runner = CliRunner()


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    """Run every command from an empty temporary directory."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def expert_tree(workdir):
    """Working document holding the expert-alone sample."""
    result = runner.invoke(app, ["sample", "expert_alone"])
    assert result.exit_code == 0
    return workdir / "decision_tree.json"


def _load(path):
    return json.loads(path.read_text())


def _find(data, node_id):
    if data["id"] == node_id:
        return data
    for child in data.get("children", []):
        found = _find(child, node_id)
        if found is not None:
            return found
    return None


class TestNewAndShow:
    """Tests for new and show commands."""

    def test_new_creates_document(self, workdir):
        result = runner.invoke(app, ["new"])

        assert result.exit_code == 0
        data = _load(workdir / "decision_tree.json")
        assert data["nodeType"] == "start"
        assert data["children"] == []

    def test_new_refuses_overwrite(self, workdir):
        runner.invoke(app, ["new"])
        result = runner.invoke(app, ["new"])
        assert result.exit_code == 1
        assert "already exists" in result.stdout

    def test_new_force(self, expert_tree):
        result = runner.invoke(app, ["new", "--force"])
        assert result.exit_code == 0
        assert _load(expert_tree)["children"] == []

    def test_show_missing_document(self, workdir):
        result = runner.invoke(app, ["show"])
        assert result.exit_code == 1
        assert "Path not found" in result.stdout

    def test_show_sample(self, expert_tree):
        result = runner.invoke(app, ["show", "--no-ids"])

        assert result.exit_code == 0
        assert "Review case" in result.stdout
        assert "620.00" in result.stdout

    def test_options(self, expert_tree):
        result = runner.invoke(app, ["options", "ea-review"])

        assert result.exit_code == 0
        assert "action" in result.stdout
        assert "exit" in result.stdout

    def test_unknown_node(self, expert_tree):
        result = runner.invoke(app, ["options", "zzz"])
        assert result.exit_code == 2


class TestEditing:
    """Tests for add, edit, delete and normalize commands."""

    def test_add_decision_under_start(self, workdir):
        runner.invoke(app, ["new"])
        root_id = _load(workdir / "decision_tree.json")["id"]

        result = runner.invoke(app, ["add", root_id[:8], "decision", "--name", "Choose"])

        assert result.exit_code == 0
        assert "Added" in result.stdout
        child = _load(workdir / "decision_tree.json")["children"][0]
        assert child["name"] == "Choose"
        assert child["nodeType"] == "decision"
        assert child["probability"] == 1
        assert child["time"] == 1

    def test_add_disallowed_type(self, expert_tree):
        before = expert_tree.read_text()
        result = runner.invoke(app, ["add", "ea-review", "outcome"])

        assert result.exit_code == 1
        assert "Rejected" in result.stdout
        assert "children of type 'outcome'" in result.stdout
        assert expert_tree.read_text() == before

    def test_add_uses_suggested_probability(self, expert_tree):
        result = runner.invoke(app, ["add", "ea-review", "action", "-n", "Ask AI", "-c", "5"])

        assert result.exit_code == 0
        review = _find(_load(expert_tree), "ea-review")
        added = review["children"][-1]
        assert added["name"] == "Ask AI"
        assert added["probability"] == 0
        assert added["time"] == 2

    def test_edit_cost(self, expert_tree):
        result = runner.invoke(app, ["edit", "ea-expert", "--cost", "300"])

        assert result.exit_code == 0
        assert "720.00" in result.stdout
        assert _load(expert_tree)["expected_cost"] == pytest.approx(720)

    def test_edit_out_of_range(self, expert_tree):
        before = expert_tree.read_text()
        result = runner.invoke(app, ["edit", "ea-correct", "-p", "1.5", "--cost=-3"])

        assert result.exit_code == 1
        assert "between 0 and 1" in result.stdout
        assert "greater than or equal to 0" in result.stdout
        assert expert_tree.read_text() == before

    def test_edit_invalid_group_warns(self, expert_tree):
        result = runner.invoke(app, ["edit", "ea-correct", "-p", "0.5"])

        assert result.exit_code == 0
        assert "Warning" in result.stdout
        assert "not available" in result.stdout
        data = _load(expert_tree)
        assert data["expected_cost"] is None
        assert _find(data, "ea-wrong")["valid_prob"] is False

    def test_delete_start_rejected(self, expert_tree):
        result = runner.invoke(app, ["delete", "ea-start"])
        assert result.exit_code == 1
        assert "Cannot delete start node" in result.stdout

    def test_delete_subtree(self, expert_tree):
        result = runner.invoke(app, ["delete", "ea-follow-up"])

        assert result.exit_code == 0
        assert "Deleted 6 node(s)" in result.stdout
        data = _load(expert_tree)
        assert _find(data, "ea-second-opinion") is None
        assert data["expected_cost"] == pytest.approx(200 + 0.15 * 1000)

    def test_normalize(self, expert_tree):
        runner.invoke(app, ["edit", "ea-correct", "-p", "0.5"])
        result = runner.invoke(app, ["normalize", "ea-expert"])

        assert result.exit_code == 0
        data = _load(expert_tree)
        assert _find(data, "ea-correct")["probability"] == pytest.approx(0.5 / 0.65)
        assert data["expected_cost"] is not None

    def test_normalize_leaf_rejected(self, expert_tree):
        result = runner.invoke(app, ["normalize", "ea-decline"])
        assert result.exit_code == 1


class TestSamplesImportExport:
    """Tests for samples, sample, import, export and validate commands."""

    def test_samples_listed(self, workdir):
        result = runner.invoke(app, ["samples"])

        assert result.exit_code == 0
        assert "expert_alone" in result.stdout
        assert "ai_delegate" in result.stdout

    def test_sample_loaded(self, workdir):
        result = runner.invoke(app, ["sample", "ai_delegate"])

        assert result.exit_code == 0
        assert "AI-Delegate Tree" in result.stdout
        assert _load(workdir / "decision_tree.json")["expected_cost"] == pytest.approx(181)

    def test_unknown_sample(self, workdir):
        result = runner.invoke(app, ["sample", "nope"])
        assert result.exit_code == 2
        assert "Sample not found" in result.stdout

    def test_export_json_default(self, expert_tree):
        result = runner.invoke(app, ["export"])

        assert result.exit_code == 0
        exported = expert_tree.parent / "exports" / "decision_tree.json"
        assert _load(exported)["expected_cost"] == pytest.approx(620)

    def test_export_yaml(self, expert_tree):
        result = runner.invoke(app, ["export", "-o", "mine", "--format", "yaml"])

        assert result.exit_code == 0
        assert (expert_tree.parent / "exports" / "mine.yaml").exists()

    def test_export_bad_format(self, expert_tree):
        result = runner.invoke(app, ["export", "--format", "xml"])
        assert result.exit_code == 2

    def test_import_replaces_document(self, expert_tree):
        runner.invoke(app, ["export", "-o", "backup"])
        runner.invoke(app, ["new", "--force"])

        result = runner.invoke(app, ["import", "backup"])

        assert result.exit_code == 0
        assert "Imported 13 node(s)" in result.stdout
        assert _load(expert_tree)["expected_cost"] == pytest.approx(620)

    def test_import_invalid_keeps_document(self, expert_tree):
        bad = expert_tree.parent / "bad.json"
        bad.write_text(json.dumps({"id": "x", "nodeType": "action"}))
        before = expert_tree.read_text()

        result = runner.invoke(app, ["import", str(bad)])

        assert result.exit_code == 1
        assert "Failed to load tree" in result.stdout
        assert expert_tree.read_text() == before

    def test_import_missing(self, workdir):
        result = runner.invoke(app, ["import", "nothing_here"])
        assert result.exit_code == 1

    def test_validate_ok(self, expert_tree):
        result = runner.invoke(app, ["validate"])

        assert result.exit_code == 0
        assert "All validations passed" in result.stdout
        assert "620.00" in result.stdout

    def test_validate_reports_errors(self, workdir):
        bad = workdir / "bad.json"
        bad.write_text(json.dumps({"id": "s", "nodeType": "start", "cost": 4}))

        result = runner.invoke(app, ["validate", str(bad)])

        assert result.exit_code == 1
        assert "Validation errors detected" in result.stdout

    def test_validate_warns_on_probabilities(self, expert_tree):
        runner.invoke(app, ["edit", "ea-correct", "-p", "0.5"])
        result = runner.invoke(app, ["validate"])

        assert result.exit_code == 0
        assert "do not sum to 1" in result.stdout
        assert "not available" in result.stdout
