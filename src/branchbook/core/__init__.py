"""
Core document model for branchbook.

This package contains the book tree produced by the parser and consumed by
runtimes and renderers.
"""

from branchbook.core.document import (
    AddItem,
    Book,
    ChangeState,
    Chapter,
    ConditionalBlock,
    DocumentNode,
    Element,
    ElementType,
    ElseBlock,
    IfBlock,
    Link,
    Paragraph,
    RemoveItem,
    Section,
)

__all__ = [
    "AddItem",
    "Book",
    "ChangeState",
    "Chapter",
    "ConditionalBlock",
    "DocumentNode",
    "Element",
    "ElementType",
    "ElseBlock",
    "IfBlock",
    "Link",
    "Paragraph",
    "RemoveItem",
    "Section",
]
