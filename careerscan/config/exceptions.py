"""Exceptions raised while loading scanner configuration."""

from typing import List, Optional


class ConfigurationError(Exception):
    """
    Raised when the YAML file or the environment cannot be turned into a
    usable configuration.

    Configuration problems are fatal at startup. The error collects every
    problem found so the operator can fix them in one pass, together with
    hints on how to do so.
    """

    def __init__(
        self,
        message: str,
        errors: Optional[List[str]] = None,
        suggestions: Optional[List[str]] = None,
    ):
        """
        Initialize ConfigurationError.

        Args:
            message: Headline describing what failed
            errors: Individual problems found
            suggestions: Hints for fixing the problems
        """
        self.message = message
        self.errors = list(errors or [])
        self.suggestions = list(suggestions or [])
        super().__init__(self._render())

    def _render(self) -> str:
        lines = [self.message]

        if self.errors:
            lines.append("\nProblems found:")
            lines.extend(f"  {n}. {error}" for n, error in enumerate(self.errors, 1))

        if self.suggestions:
            lines.append("\nHow to fix:")
            lines.extend(f"  - {hint}" for hint in self.suggestions)

        return "\n".join(lines)

    def __str__(self) -> str:
        return self._render()
