"""Data models for headings and the table-of-contents tree."""

from pydantic import BaseModel, Field


class HeadingRecord(BaseModel):
    """Heading found in a converted document, in document order."""

    document: str  # source stem, spaces replaced with underscores
    anchor: str | None = None
    text: str
    level: int = Field(ge=1, le=5)


class TOCNode(BaseModel):
    """Node of the table-of-contents tree.

    Placeholder nodes stand in for heading levels that were skipped between a
    parent and a deeper child; they carry no text and no anchor.
    """

    level: int
    text: str = ""
    document: str = ""
    anchor: str | None = None
    placeholder: bool = False
    children: list["TOCNode"] = Field(default_factory=list)

    @property
    def href(self) -> str | None:
        if self.anchor is None or self.placeholder:
            return None
        return f"{self.document}.xhtml#{self.anchor}"

    def depth(self) -> int:
        return 1 + max((child.depth() for child in self.children), default=0)


class TOCForest(BaseModel):
    """Root of the table of contents: the ordered top-level nodes."""

    children: list[TOCNode] = Field(default_factory=list)

    def depth(self) -> int:
        return max((node.depth() for node in self.children), default=0)

    def walk(self):
        """Yield (depth, node) pairs depth-first in reading order."""
        stack = [(1, node) for node in reversed(self.children)]
        while stack:
            depth, node = stack.pop()
            yield depth, node
            stack.extend((depth + 1, child) for child in reversed(node.children))
