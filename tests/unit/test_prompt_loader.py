"""Tests for system prompt and user message template loading."""

from pathlib import Path

import pytest

from narrative_audit.generation.exceptions import GenerationError
from narrative_audit.generation.prompt_loader import load_system_prompt, load_user_message_template


class TestLoadSystemPrompt:
    def test_loads_default_prompt(self) -> None:
        prompt = load_system_prompt()
        assert "Executive Summary" in prompt
        assert "SAFETY RULES" in prompt

    def test_loads_custom_prompt(self, tmp_path: Path) -> None:
        custom = tmp_path / "prompt.md"
        custom.write_text("Be brief.")
        assert load_system_prompt(custom) == "Be brief."

    def test_missing_file_raises_error(self) -> None:
        with pytest.raises(GenerationError, match="Failed to load system prompt"):
            load_system_prompt(Path("/nonexistent/prompt.md"))


class TestLoadUserMessageTemplate:
    def test_loads_default_template(self) -> None:
        assert "{extracted_text}" in load_user_message_template()

    def test_template_without_placeholder_is_rejected(self, tmp_path: Path) -> None:
        custom = tmp_path / "user.txt"
        custom.write_text("No placeholder here")
        with pytest.raises(GenerationError, match="must contain"):
            load_user_message_template(custom)

    def test_missing_file_raises_error(self) -> None:
        with pytest.raises(GenerationError, match="Failed to load user message template"):
            load_user_message_template(Path("/nonexistent/user.txt"))
