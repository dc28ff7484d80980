"""Example generation client adapter.

Use this module as a reference when implementing new provider adapters.
Implement BaseGenerationClient and register the provider in ReportGeneratorFactory.
"""

from narrative_audit.generation.client_base import BaseGenerationClient
from narrative_audit.generation.models import ModelResponse


class ExampleClientAdapter(BaseGenerationClient):
    """Returns a fixed markdown report without any network call.

    Token usage is approximated from prompt length so cost accounting still
    produces plausible numbers in local runs.
    """

    REPORT_TEMPLATE = (
        "# Narrative Diagnostic Report\n\n"
        "## Section 1: Executive Summary\n\n"
        "This is a locally generated example report. "
        "It analysed {characters} characters of material.\n\n"
        "## Section 6: Action Plan\n\n"
        "- Configure a real generation provider\n"
    )

    def create_message(
        self,
        *,
        model: str,
        max_tokens: int,
        temperature: float,
        system_prompt: str,
        user_message: str,
    ) -> ModelResponse:
        _ = model, max_tokens, temperature
        text = self.REPORT_TEMPLATE.format(characters=len(user_message))
        return ModelResponse(
            text=text,
            input_tokens=(len(system_prompt) + len(user_message)) // 4,
            output_tokens=len(text) // 4,
        )
