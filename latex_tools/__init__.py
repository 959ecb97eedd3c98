from .postprocessor import LaTeXIssue, LaTeXPostProcessor, PostProcessResult, process_response
from .validator import LatexValidationResult, LatexValidator
from .response_validator import AIResponseValidator, ResponseValidation

__all__ = [
    "LaTeXIssue",
    "LaTeXPostProcessor",
    "PostProcessResult",
    "process_response",
    "LatexValidationResult",
    "LatexValidator",
    "AIResponseValidator",
    "ResponseValidation",
]
