"""
Document tree for branchbook scripts.

A parsed script becomes a single Book owning its chapters, each chapter
owning its sections, and each section owning an ordered list of elements and
outgoing links. Conditional blocks own their own element lists. Links refer
to other sections by id only and are never resolved here.

Models serialize with camelCase aliases (``ifCondition``, ``chapterId``,
``sectionId``) when dumped with ``by_alias=True`` and accept either spelling
on input.
"""

from collections.abc import Iterator
from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ElementType(str, Enum):
    """Discriminant of section elements."""

    PARAGRAPH = "paragraph"
    STATE = "state"
    ADD_ITEM = "addItem"
    REMOVE_ITEM = "removeItem"
    IF = "if"
    ELSE = "else"


class DocumentNode(BaseModel):
    """Base class for all document tree nodes."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Paragraph(DocumentNode):
    type: Literal[ElementType.PARAGRAPH] = ElementType.PARAGRAPH
    text: str


class ChangeState(DocumentNode):
    """State mutation; the modifier is interpreted by the runtime."""

    type: Literal[ElementType.STATE] = ElementType.STATE
    id: str
    modifier: str


class AddItem(DocumentNode):
    type: Literal[ElementType.ADD_ITEM] = ElementType.ADD_ITEM
    id: str


class RemoveItem(DocumentNode):
    type: Literal[ElementType.REMOVE_ITEM] = ElementType.REMOVE_ITEM
    id: str


class IfBlock(DocumentNode):
    """Conditional branch; the condition is kept as opaque text."""

    type: Literal[ElementType.IF] = ElementType.IF
    condition: str
    elements: list["Element"] = Field(default_factory=list)


class ElseBlock(DocumentNode):
    """Alternative branch, carrying the condition of the If it pairs with."""

    type: Literal[ElementType.ELSE] = ElementType.ELSE
    if_condition: str
    elements: list["Element"] = Field(default_factory=list)


Element = Annotated[
    Union[Paragraph, ChangeState, AddItem, RemoveItem, IfBlock, ElseBlock],
    Field(discriminator="type"),
]

ConditionalBlock = IfBlock | ElseBlock


class Link(DocumentNode):
    """Labelled reference to a section, by chapter and section id."""

    title: str
    chapter_id: str
    section_id: str


class Section(DocumentNode):
    id: str
    title: str
    elements: list[Element] = Field(default_factory=list)
    next: list[Link] = Field(default_factory=list)

    def iter_elements(self) -> Iterator[Element]:
        """
        Walk elements depth-first, descending into conditional branches.

        Returns:
            Iterator over every element in source order
        """

        def _walk(elements: list[Element]) -> Iterator[Element]:
            for element in elements:
                yield element
                if isinstance(element, (IfBlock, ElseBlock)):
                    yield from _walk(element.elements)

        return _walk(self.elements)


class Chapter(DocumentNode):
    id: str
    title: str
    sections: list[Section] = Field(default_factory=list)


class Book(DocumentNode):
    """Root of a parsed script."""

    title: str
    chapters: list[Chapter] = Field(default_factory=list)

    def get_chapter(self, chapter_id: str) -> Chapter | None:
        """Return the first chapter with the given id, or None."""
        return next((c for c in self.chapters if c.id == chapter_id), None)

    def get_section(self, chapter_id: str, section_id: str) -> Section | None:
        """
        Look up a section the way a link addresses it.

        Params:
            chapter_id: Id of the owning chapter
            section_id: Id of the section within that chapter

        Returns:
            The first matching section, or None when either id is unknown
        """
        chapter = self.get_chapter(chapter_id)
        if chapter is None:
            return None
        return next((s for s in chapter.sections if s.id == section_id), None)

    def iter_sections(self) -> Iterator[tuple[Chapter, Section]]:
        """Yield (chapter, section) pairs in source order."""
        for chapter in self.chapters:
            for section in chapter.sections:
                yield chapter, section


IfBlock.model_rebuild()
ElseBlock.model_rebuild()
Section.model_rebuild()
