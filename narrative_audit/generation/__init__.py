from narrative_audit.generation.client_base import BaseGenerationClient
from narrative_audit.generation.factory import ReportGeneratorFactory
from narrative_audit.generation.models import GeneratedReport, GenerationFailure
from narrative_audit.generation.pricing import compute_cost, estimate_cost
from narrative_audit.generation.report_generator import ReportGenerator

__all__ = [
    "BaseGenerationClient",
    "GeneratedReport",
    "GenerationFailure",
    "ReportGenerator",
    "ReportGeneratorFactory",
    "compute_cost",
    "estimate_cost",
]
