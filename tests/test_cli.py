"""Tests for CLI module."""

import json
import shutil
import tempfile
from pathlib import Path
from unittest.mock import Mock, patch

from click.testing import CliRunner
from rich.console import Console

from fitdeck.cli import cli

DECK_YAML = """slides:
  - title: Strategy 2025
    subtitle: Annual planning
  - title: Market
    body: Demand keeps growing across every region we serve today
    bullets:
      - North
      - South
      - East
  - title: Thank you
"""


class TestCLI:
    """Tests for CLI functionality."""

    def setup_method(self):
        """Set up test fixtures."""
        self.runner = CliRunner()
        self.temp_dir = Path(tempfile.mkdtemp())

        self.deck = self.temp_dir / "deck.yaml"
        self.deck.write_text(DECK_YAML)

        self.console_patch = patch("fitdeck.cli.console", Console(width=200))
        self.console_patch.start()

    def teardown_method(self):
        """Clean up test fixtures."""
        self.console_patch.stop()
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def test_cli_version(self):
        result = self.runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "version" in result.output.lower()

    def test_cli_help(self):
        result = self.runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "fitdeck" in result.output
        for command in ("design", "palettes", "contrast", "layouts"):
            assert command in result.output

    def test_layouts(self):
        result = self.runner.invoke(cli, ["layouts"])

        assert result.exit_code == 0
        assert "two-column" in result.output
        assert "300-550px" in result.output

    def test_palettes(self):
        result = self.runner.invoke(cli, ["palettes"])

        assert result.exit_code == 0
        assert "corporate-blue" in result.output
        assert "education-indigo" in result.output

    def test_contrast_pass(self):
        result = self.runner.invoke(cli, ["contrast", "#000000", "#FFFFFF"])

        assert result.exit_code == 0
        assert "21.0:1" in result.output
        assert "PASS" in result.output

    def test_contrast_fail_with_fix(self):
        result = self.runner.invoke(cli, ["contrast", "#767676", "#FFFFFF", "--fix", "7"])

        assert result.exit_code == 0
        assert "FAIL" in result.output
        assert "Adjusted:" in result.output

    def test_contrast_unreachable_fix(self):
        result = self.runner.invoke(cli, ["contrast", "#777777", "#777777", "--fix", "7"])

        assert result.exit_code == 0
        assert "Could not reach 7:1" in result.output

    def test_contrast_escapes_markup_in_colors(self):
        result = self.runner.invoke(cli, ["contrast", "[bold]", "#FFFFFF"])

        assert result.exit_code == 0
        assert "[bold] on #FFFFFF" in result.output

    def test_contrast_large_aa(self):
        result = self.runner.invoke(cli, ["contrast", "#767676", "#FFFFFF", "--size", "large", "--level", "AA"])

        assert result.exit_code == 0
        assert "Required: 3:1" in result.output

    def test_design_table(self):
        result = self.runner.invoke(cli, ["design", str(self.deck)])

        assert result.exit_code == 0
        assert "title-centered" in result.output
        assert "content-focused" in result.output
        assert "Corporate Blue" in result.output

    def test_design_json(self):
        result = self.runner.invoke(cli, ["design", str(self.deck), "--json", "--palette", "tech-purple"])

        assert result.exit_code == 0
        designs = json.loads(result.output)
        assert [d["layout"]["key"] for d in designs] == ["title-centered", "content-focused", "title-centered"]
        assert designs[0]["palette"]["id"] == "tech-purple"
        assert designs[1]["overflow"]["strategy"]["mode"] == "none"

    def test_design_with_config(self):
        config = self.temp_dir / "design.yaml"
        config.write_text("palette: finance-green\n")

        result = self.runner.invoke(cli, ["design", str(self.deck), "--json", "--config", str(config)])

        assert result.exit_code == 0
        assert json.loads(result.output)[0]["palette"]["id"] == "finance-green"

    def test_design_invalid_config(self):
        config = self.temp_dir / "design.yaml"
        config.write_text("summarizer_temperature: hot\n")

        result = self.runner.invoke(cli, ["design", str(self.deck), "--config", str(config)])

        assert result.exit_code == 1
        assert "Invalid design config" in result.output

    def test_design_invalid_deck(self):
        deck = self.temp_dir / "bad.yaml"
        deck.write_text("title: missing slides\n")

        result = self.runner.invoke(cli, ["design", str(deck)])

        assert result.exit_code == 1
        assert "'slides' list" in result.output

    def test_design_non_utf8_deck(self):
        deck = self.temp_dir / "latin1.yaml"
        deck.write_bytes("slides:\n  - title: Caf\u00e9\n".encode("latin-1"))

        result = self.runner.invoke(cli, ["design", str(deck)])

        assert result.exit_code == 1
        assert "Could not read" in result.output

    def test_design_summarize_missing_api_key(self):
        with patch.dict("os.environ", {}, clear=True):
            result = self.runner.invoke(cli, ["design", str(self.deck), "--summarize"])

        assert result.exit_code == 1
        assert "OPENAI_API_KEY" in result.output

    @patch.dict("os.environ", {"OPENAI_API_KEY": "test_key"})
    @patch("fitdeck.cli.OpenAI")
    def test_design_summarize(self, mock_openai):
        mock_client = Mock()
        mock_response = Mock()
        mock_response.choices = [Mock()]
        mock_response.choices[0].message.content = "Context matters."
        mock_client.chat.completions.create.return_value = mock_response
        mock_openai.return_value = mock_client

        deck = self.temp_dir / "prose.yaml"
        deck.write_text(
            "slides:\n"
            "  - title: Opening\n"
            "  - title: Background\n"
            f"    body: {' '.join(['context'] * 500)}\n"
            "  - title: Closing\n"
        )

        result = self.runner.invoke(cli, ["design", str(deck), "--json", "--summarize", "--model", "gpt-4o-mini"])

        assert result.exit_code == 0
        designs = json.loads(result.output)
        assert designs[1]["overflow"]["result"] == "Context matters."
        mock_openai.assert_called_once_with(api_key="test_key")
        assert mock_client.chat.completions.create.call_args[1]["model"] == "gpt-4o-mini"
