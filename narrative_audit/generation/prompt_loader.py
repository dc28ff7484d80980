from pathlib import Path

from narrative_audit.generation.exceptions import GenerationError

_DEFAULT_PROMPT_DIR = Path(__file__).parent / "prompts"


def load_system_prompt(path: Path | None = None) -> str:
    """Load the diagnostic system prompt.

    Args:
        path: Path to the prompt file.
              Defaults to the bundled diagnostic_system_prompt.md.

    Raises:
        GenerationError: if the file cannot be read.
    """
    if path is None:
        path = _DEFAULT_PROMPT_DIR / "diagnostic_system_prompt.md"
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise GenerationError(f"Failed to load system prompt: {exc}") from exc


def load_user_message_template(path: Path | None = None) -> str:
    """Load the user message template; it must contain an {extracted_text} placeholder.

    Raises:
        GenerationError: if the file cannot be read or lacks the placeholder.
    """
    if path is None:
        path = _DEFAULT_PROMPT_DIR / "user_message.txt"
    try:
        template = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise GenerationError(f"Failed to load user message template: {exc}") from exc
    if "{extracted_text}" not in template:
        raise GenerationError("User message template must contain {extracted_text}")
    return template
