"""Completion result model."""

from dataclasses import dataclass


@dataclass(frozen=True)
class CompletionResult:
    """Outcome of a completion; ``content`` is None when nothing was extracted."""

    content: str | None

    @classmethod
    def empty(cls) -> "CompletionResult":
        return cls(content=None)

    @property
    def has_content(self) -> bool:
        return self.content is not None

    @property
    def text(self) -> str:
        return self.content if self.content is not None else ""
