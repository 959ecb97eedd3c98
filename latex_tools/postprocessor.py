"""
LaTeX post-processor for AI tutor replies.

Model output often mixes Unicode math symbols, legacy ``\\(``/``\\[``
delimiters and display blocks glued to prose. KaTeX renders none of those
well, so replies are cleaned here before they reach the client. Problems
that cannot be fixed safely (``?`` placeholders) are reported, not changed.
"""

import re
from typing import List, Literal, Optional

from pydantic import BaseModel, Field


class LaTeXIssue(BaseModel):
    type: Literal["error", "warning"]
    message: str
    line: Optional[int] = None
    original: Optional[str] = None
    fixed: Optional[str] = None


class PostProcessResult(BaseModel):
    cleaned: str
    issues: List[LaTeXIssue] = Field(default_factory=list)
    changed: bool = False


# (symbol, command, readable name)
UNICODE_SYMBOLS = [
    ("·", r"\cdot", "middle dot"),
    ("±", r"\pm", "plus-minus"),
    ("π", r"\pi", "pi"),
    ("θ", r"\theta", "theta"),
    ("α", r"\alpha", "alpha"),
    ("β", r"\beta", "beta"),
    ("∞", r"\infty", "infinity"),
    ("≤", r"\leq", "less than or equal"),
    ("≥", r"\geq", "greater than or equal"),
    ("×", r"\times", "times"),
    ("÷", r"\div", "division"),
]

# Symbols checked by validate_expression (alpha and beta are left out)
_EXPRESSION_SYMBOLS = [entry for entry in UNICODE_SYMBOLS if entry[0] not in ("α", "β")]

MAX_PASSES = 10

_MATH_SPAN = re.compile(r"\$\$[^$]+?\$\$|\$[^$]+?\$")
# Dollar spans plus the legacy \( \) and \[ \] forms, which pass 4 converts later
_ANY_MATH_SPAN = re.compile(r"\$\$[^$]+?\$\$|\$[^$]+?\$|\\\(.+?\\\)|\\\[.+?\\\]", re.DOTALL)
_STRAY_PI = re.compile(r"(?<!\$)π(?!\$)")
_PAREN_DELIMITERS = re.compile(r"\\\((.+?)\\\)", re.DOTALL)
_BRACKET_DELIMITERS = re.compile(r"\\\[(.+?)\\\]", re.DOTALL)
_DISPLAY_BLOCK = re.compile(r"\$\$[^$]+?\$\$")


class LaTeXPostProcessor:
    """Fixes the LaTeX mistakes models commonly make."""

    @classmethod
    def process_response(cls, content: str) -> PostProcessResult:
        cleaned = content
        issues: List[LaTeXIssue] = []

        # 1. Unicode symbols inside math spans
        for symbol, command, _name in UNICODE_SYMBOLS:
            before = cleaned
            cleaned = cls._replace_in_math(cleaned, symbol, command)
            if cleaned != before:
                issues.append(LaTeXIssue(type="warning", message=f"Replaced plain text {symbol} with {command}"))

        # 2. Stray pi in prose
        wrapped = cls._wrap_stray_pi(cleaned)
        if wrapped != cleaned:
            cleaned = wrapped
            issues.append(LaTeXIssue(type="warning", message="Wrapped plain text π with LaTeX delimiters"))

        # 3. Placeholder question marks are reported only
        placeholder = next((m.group(0) for m in _MATH_SPAN.finditer(cleaned) if "?" in m.group(0)), None)
        if placeholder is not None:
            issues.append(
                LaTeXIssue(
                    type="error",
                    message="Found question marks (?) used as placeholders in LaTeX expressions",
                    original=placeholder,
                )
            )

        # 4. Legacy delimiters
        replaced = _PAREN_DELIMITERS.sub(lambda m: f"${m.group(1)}$", cleaned)
        if replaced != cleaned:
            cleaned = replaced
            issues.append(LaTeXIssue(type="warning", message=r"Replaced \( \) delimiters with $ $"))

        replaced = _BRACKET_DELIMITERS.sub(lambda m: f"\n\n$${m.group(1)}$$\n\n", cleaned)
        if replaced != cleaned:
            cleaned = replaced
            issues.append(LaTeXIssue(type="warning", message=r"Replaced \[ \] delimiters with $$ $$"))

        # 5. Display math glued to surrounding text
        reflowed = cls._reflow_display_math(cleaned)
        if reflowed != cleaned:
            cleaned = reflowed
            issues.append(
                LaTeXIssue(type="warning", message="Fixed display math to be on its own line with blank lines")
            )

        return PostProcessResult(cleaned=cleaned, issues=issues, changed=cleaned != content)

    @staticmethod
    def _replace_in_math(text: str, symbol: str, command: str) -> str:
        # A command directly followed by a letter would read as a different control word
        before_letter = re.compile(re.escape(symbol) + r"(?=[A-Za-z])")

        def fix_span(match):
            span = before_letter.sub(lambda _m: command + " ", match.group(0))
            return span.replace(symbol, command)

        for _ in range(MAX_PASSES):
            updated = _ANY_MATH_SPAN.sub(fix_span, text)
            if updated == text:
                break
            text = updated
        return text

    @staticmethod
    def _wrap_stray_pi(text: str) -> str:
        parts = []
        last = 0
        for match in _ANY_MATH_SPAN.finditer(text):
            parts.append(_STRAY_PI.sub(lambda _m: r"$\pi$", text[last:match.start()]))
            parts.append(match.group(0))
            last = match.end()
        parts.append(_STRAY_PI.sub(lambda _m: r"$\pi$", text[last:]))
        return "".join(parts)

    @staticmethod
    def _reflow_display_math(text: str) -> str:
        parts = []
        last = 0
        for match in _DISPLAY_BLOCK.finditer(text):
            start, end = match.span()
            parts.append(text[last:start])
            if start > 0 and text[start - 1] != "\n":
                parts.append("\n\n")
            parts.append(match.group(0))
            if end < len(text) and text[end] != "\n":
                parts.append("\n\n")
            last = end
        parts.append(text[last:])
        return "".join(parts)

    @staticmethod
    def validate_expression(latex: str) -> List[LaTeXIssue]:
        """Check a single expression for patterns KaTeX will not render."""
        issues: List[LaTeXIssue] = []

        for symbol, command, name in _EXPRESSION_SYMBOLS:
            if symbol in latex:
                issues.append(
                    LaTeXIssue(
                        type="error",
                        message=f'Contains plain text {name} symbol "{symbol}" - should use {command}',
                        original=latex,
                    )
                )

        if "?" in latex:
            issues.append(
                LaTeXIssue(
                    type="error",
                    message="Contains question mark (?) - should use complete expressions",
                    original=latex,
                )
            )

        if r"\(" in latex or r"\)" in latex:
            issues.append(LaTeXIssue(type="error", message=r"Uses \( \) delimiters - should use $ $", original=latex))

        if r"\[" in latex or r"\]" in latex:
            issues.append(
                LaTeXIssue(type="error", message=r"Uses \[ \] delimiters - should use $$ $$", original=latex)
            )

        return issues

    @staticmethod
    def generate_report(result: PostProcessResult) -> str:
        if not result.issues:
            return "No LaTeX issues found. All expressions should render correctly."

        errors = [issue for issue in result.issues if issue.type == "error"]
        warnings = [issue for issue in result.issues if issue.type == "warning"]

        report = ""
        if errors:
            report += f"ERRORS ({len(errors)}):\n"
            for idx, error in enumerate(errors, 1):
                report += f"{idx}. {error.message}\n"
                if error.original:
                    report += f"   Original: {error.original[:100]}\n"
            report += "\n"

        if warnings:
            report += f"WARNINGS ({len(warnings)}):\n"
            for idx, warning in enumerate(warnings, 1):
                report += f"{idx}. {warning.message}\n"

        return report


def process_response(content: str) -> PostProcessResult:
    return LaTeXPostProcessor.process_response(content)
