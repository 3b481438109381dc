"""
Tests for the click CLI.
"""

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from skillbook.cli import EXIT_CONFIG_ERROR, EXIT_FAILED, EXIT_NOT_FOUND, main


@pytest.fixture
def skills_root(tmp_path: Path) -> Path:
    alpha = tmp_path / "alpha"
    (alpha / "references").mkdir(parents=True)
    (alpha / "SKILL.md").write_text(
        "---\nname: alpha\ndescription: guide for widgets\nlicense: MIT\n---\n"
        "# Alpha\n\nRead [layers](references/layers.md) and [gone](references/gone.md).\n",
        encoding="utf-8",
    )
    (alpha / "references" / "layers.md").write_text(
        "# Layer reference\n\nLayers.\n", encoding="utf-8"
    )
    beta = tmp_path / "beta"
    beta.mkdir()
    (beta / "SKILL.md").write_text(
        "---\nname: beta\ndescription: guide for gadgets\n---\nBeta body.\n",
        encoding="utf-8",
    )
    return tmp_path


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


def _invoke(runner: CliRunner, root: Path, *args: str):
    return runner.invoke(main, ["--quiet", "--root", str(root), *args])


class TestList:
    def test_lists_skills(self, runner: CliRunner, skills_root: Path):
        result = _invoke(runner, skills_root, "list")
        assert result.exit_code == 0
        assert "alpha" in result.output
        assert "guide for gadgets" in result.output
        assert "layers.md" not in result.output

    def test_list_all_includes_references(self, runner: CliRunner, skills_root: Path):
        result = _invoke(runner, skills_root, "list", "--all")
        assert "alpha/references/layers.md" in result.output
        assert "(reference)" in result.output

    def test_empty_root(self, runner: CliRunner, tmp_path: Path):
        result = _invoke(runner, tmp_path, "list")
        assert result.exit_code == 0
        assert "No skills found" in result.output

    def test_reports_malformed(self, runner: CliRunner, skills_root: Path):
        broken = skills_root / "broken"
        broken.mkdir()
        (broken / "SKILL.md").write_text("---\nname: broken\n---\n", encoding="utf-8")
        result = _invoke(runner, skills_root, "list")
        assert result.exit_code == 0
        assert "Skipped broken/SKILL.md" in result.output

    def test_duplicate_names_fail(self, runner: CliRunner, skills_root: Path):
        dup = skills_root / "dup"
        dup.mkdir()
        (dup / "SKILL.md").write_text(
            "---\nname: alpha\ndescription: again\n---\n", encoding="utf-8"
        )
        result = _invoke(runner, skills_root, "list")
        assert result.exit_code == EXIT_FAILED
        assert "alpha" in result.output


class TestMatch:
    def test_match(self, runner: CliRunner, skills_root: Path):
        result = _invoke(runner, skills_root, "match", "widgets")
        assert result.exit_code == 0
        assert "alpha" in result.output
        assert "beta" not in result.output

    def test_no_match(self, runner: CliRunner, skills_root: Path):
        result = _invoke(runner, skills_root, "match", "gizmos")
        assert result.exit_code == 0
        assert "No matching skills" in result.output

    def test_json_output(self, runner: CliRunner, skills_root: Path):
        result = _invoke(runner, skills_root, "match", "guide", "--json", "--limit", "1")
        data = json.loads(result.output)
        assert data == [{"name": "alpha", "overlap": 1, "matched": ["guide"]}]

    def test_min_overlap_option(self, runner: CliRunner, skills_root: Path):
        result = _invoke(runner, skills_root, "match", "guide widgets", "--min-overlap", "2", "--json")
        assert [c["name"] for c in json.loads(result.output)] == ["alpha"]


class TestShow:
    def test_show_body(self, runner: CliRunner, skills_root: Path):
        result = _invoke(runner, skills_root, "show", "beta")
        assert result.exit_code == 0
        assert "Beta body." in result.output

    def test_show_references(self, runner: CliRunner, skills_root: Path):
        result = _invoke(runner, skills_root, "show", "alpha", "--references")
        assert result.exit_code == 0
        assert "references/layers.md -> alpha/references/layers.md: Layer reference" in result.output
        assert "references/gone.md -> NOT FOUND" in result.output

    def test_show_unknown(self, runner: CliRunner, skills_root: Path):
        result = _invoke(runner, skills_root, "show", "gamma")
        assert result.exit_code == EXIT_NOT_FOUND


class TestProperties:
    def test_read_properties(self, runner: CliRunner, skills_root: Path):
        result = _invoke(runner, skills_root, "read-properties", "alpha")
        assert result.exit_code == 0
        assert json.loads(result.output) == {
            "name": "alpha",
            "description": "guide for widgets",
            "license": "MIT",
        }

    def test_read_properties_unknown(self, runner: CliRunner, skills_root: Path):
        result = _invoke(runner, skills_root, "read-properties", "gamma")
        assert result.exit_code == EXIT_NOT_FOUND

    def test_to_prompt_all(self, runner: CliRunner, skills_root: Path):
        result = _invoke(runner, skills_root, "to-prompt")
        assert result.exit_code == 0
        assert result.output.count("<skill>") == 2

    def test_to_prompt_selected(self, runner: CliRunner, skills_root: Path):
        result = _invoke(runner, skills_root, "to-prompt", "beta")
        assert result.output.count("<skill>") == 1
        assert "<name>beta</name>" in result.output


class TestConfigCommands:
    def test_validate_config(self, runner: CliRunner, tmp_path: Path):
        path = tmp_path / "skillbook.yaml"
        path.write_text("matcher:\n  min_token_overlap: 2\n", encoding="utf-8")
        result = runner.invoke(main, ["--quiet", "--config", str(path), "validate-config"])
        assert result.exit_code == 0
        assert "Valid configuration" in result.output
        assert "Min token overlap: 2" in result.output

    def test_invalid_config(self, runner: CliRunner, tmp_path: Path):
        path = tmp_path / "skillbook.yaml"
        path.write_text("matcher:\n  min_token_overlap: 0\n", encoding="utf-8")
        result = runner.invoke(main, ["--quiet", "--config", str(path), "validate-config"])
        assert result.exit_code == EXIT_CONFIG_ERROR

    def test_missing_root(self, runner: CliRunner, tmp_path: Path):
        result = _invoke(runner, tmp_path / "nope", "list")
        assert result.exit_code == EXIT_CONFIG_ERROR

    def test_version(self, runner: CliRunner):
        result = runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert "skillbook" in result.output
