"""
Safety checks for LaTeX that will be rendered in the browser.

Rejects commands that can reach files, URLs or macro definitions, as well as
script payloads smuggled into math. Commands outside the KaTeX subset we use
only produce warnings.
"""

import re
from typing import List, Optional

from pydantic import BaseModel, Field

ALLOWED_COMMANDS = frozenset([
    # Basic math
    "frac", "dfrac", "tfrac", "sqrt", "root",
    # Trigonometry
    "sin", "cos", "tan", "sec", "csc", "cot", "arcsin", "arccos", "arctan",
    # Logarithms
    "log", "ln", "lg",
    # Greek letters
    "alpha", "beta", "gamma", "delta", "epsilon", "theta", "lambda", "mu",
    "pi", "sigma", "phi", "omega",
    # Symbols and comparison
    "infty", "cdot", "times", "div", "pm", "mp",
    "leq", "geq", "neq", "approx", "equiv", "lt", "gt",
    # Calculus
    "sum", "prod", "int", "lim", "partial",
    # Brackets
    "left", "right", "bigl", "bigr", "Bigl", "Bigr",
    # Formatting
    "text", "textbf", "textit", "mathbf", "mathit", "mathrm", "displaystyle", "textstyle",
    "quad", "qquad", "textcolor", "color",
    # Arrows
    "rightarrow", "leftarrow", "Rightarrow", "Leftarrow", "leftrightarrow",
    # Sets
    "in", "notin", "subset", "subseteq", "cup", "cap", "emptyset",
    # Dots
    "ldots", "cdots", "vdots", "ddots",
    # Matrices
    "begin", "end", "pmatrix", "bmatrix", "vmatrix",
    # Accents
    "hat", "bar", "dot", "ddot", "vec", "tilde", "overline", "underline",
])

FORBIDDEN_COMMANDS = (
    "href", "url", "includegraphics", "input", "include", "write", "immediate",
    "openin", "openout", "def", "let", "newcommand", "renewcommand",
    "providecommand", "gdef", "edef", "xdef", "read", "csname", "expandafter",
    "noexpand", "loop", "repeat", "ifx", "iftrue", "iffalse",
)

MAX_LATEX_LENGTH = 10000

_SUSPICIOUS_PATTERNS = [
    (re.compile(r"javascript:", re.IGNORECASE), "JavaScript protocol detected"),
    (re.compile(r"data:text/html", re.IGNORECASE), "HTML data URI detected"),
    (re.compile(r"<script", re.IGNORECASE), "Script tag detected"),
    (re.compile(r"on\w+\s*=", re.IGNORECASE), "Event handler detected"),
]

_COMMAND = re.compile(r"\\([a-zA-Z]+)")


def _forbidden_pattern(cmd: str) -> "re.Pattern[str]":
    return re.compile(r"\\" + cmd + r"(?![a-zA-Z])")


class LatexValidationResult(BaseModel):
    valid: bool
    errors: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)
    sanitized: Optional[str] = None


class LatexValidator:

    @classmethod
    def validate(cls, latex: str) -> LatexValidationResult:
        """Validate a LaTeX string for safety and well-formedness."""
        errors: List[str] = []
        warnings: List[str] = []

        if len(latex) > MAX_LATEX_LENGTH:
            errors.append(f"LaTeX exceeds maximum length of {MAX_LATEX_LENGTH} characters")
            return LatexValidationResult(valid=False, errors=errors)

        if not latex.strip():
            errors.append("LaTeX string is empty")
            return LatexValidationResult(valid=False, errors=errors)

        for cmd in FORBIDDEN_COMMANDS:
            if _forbidden_pattern(cmd).search(latex):
                errors.append(f"Forbidden command detected: \\{cmd}")
        if errors:
            return LatexValidationResult(valid=False, errors=errors)

        brace_error = cls._check_brace_balance(latex)
        if brace_error:
            return LatexValidationResult(valid=False, errors=[brace_error])

        for pattern, message in _SUSPICIOUS_PATTERNS:
            if pattern.search(latex):
                errors.append(f"Security risk: {message}")

        for cmd in cls.extract_commands(latex):
            if cmd not in ALLOWED_COMMANDS:
                warnings.append(f"Unrecognized command: \\{cmd} - may not render as expected")

        if errors:
            return LatexValidationResult(valid=False, errors=errors, warnings=warnings)

        return LatexValidationResult(valid=True, warnings=warnings, sanitized=cls.sanitize(latex))

    @staticmethod
    def sanitize(latex: str) -> str:
        clean = re.sub(r"<[^>]*>", "", latex)
        for cmd in FORBIDDEN_COMMANDS:
            clean = re.sub(r"\\" + cmd + r"\b", "", clean)
        clean = re.sub(r"data:[^,]*,", "", clean)
        clean = re.sub(r"javascript:", "", clean, flags=re.IGNORECASE)
        return clean.strip()

    @staticmethod
    def _check_brace_balance(latex: str) -> Optional[str]:
        depth = 0
        escaped = False
        for i, char in enumerate(latex):
            if escaped:
                escaped = False
                continue
            if char == "\\" and i + 1 < len(latex):
                escaped = True
                continue
            if char == "{":
                depth += 1
            elif char == "}":
                depth -= 1
                if depth < 0:
                    return "Too many closing braces"
        if depth > 0:
            return "Unclosed opening braces"
        return None

    @staticmethod
    def extract_commands(latex: str) -> List[str]:
        """Command names in order of first appearance."""
        seen = []
        for name in _COMMAND.findall(latex):
            if name not in seen:
                seen.append(name)
        return seen

    @classmethod
    def validate_batch(cls, expressions: List[str]) -> List[dict]:
        return [{"latex": latex, "result": cls.validate(latex)} for latex in expressions]

    @classmethod
    def is_valid(cls, latex: str) -> bool:
        return cls.validate(latex).valid
