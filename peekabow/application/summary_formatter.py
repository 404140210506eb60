from typing import Iterable

NO_ISSUES_MESSAGE = "😄  No Issue"


def format_summary(lines: Iterable[str]) -> str:
    """Joins summary lines with newlines, or returns NO_ISSUES_MESSAGE when there are none."""
    summary = "\n".join(lines).removesuffix("\n")
    return summary or NO_ISSUES_MESSAGE
