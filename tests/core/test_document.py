"""
Tests for the book document tree.

Focus Areas:
1. Serialization with camelCase aliases
2. Validation of dumped trees back into models
3. Navigation helpers used by runtimes
"""

import pytest
from pydantic import ValidationError

from branchbook.core.document import (
    AddItem,
    Book,
    ChangeState,
    Chapter,
    ElementType,
    ElseBlock,
    IfBlock,
    Link,
    Paragraph,
    RemoveItem,
    Section,
)


@pytest.fixture
def book():
    """A small book with a conditional section and links."""
    return Book(
        title="The Cave",
        chapters=[
            Chapter(
                id="c1",
                title="Into the Dark",
                sections=[
                    Section(
                        id="s1",
                        title="Entrance",
                        elements=[
                            Paragraph(text="It is dark."),
                            IfBlock(
                                condition="has torch",
                                elements=[Paragraph(text="A door."), AddItem(id="key")],
                            ),
                            ElseBlock(if_condition="has torch", elements=[RemoveItem(id="hope")]),
                            ChangeState(id="visited", modifier="true"),
                        ],
                        next=[Link(title="Go on", chapter_id="c1", section_id="s2")],
                    ),
                    Section(id="s2", title="Tunnel"),
                ],
            ),
            Chapter(id="c2", title="Below"),
        ],
    )


class TestSerialization:
    """Tests for dumping and loading the tree."""

    def test_dump_uses_camel_case_aliases(self, book):
        """Wire names match the runtime's camelCase fields."""
        data = book.model_dump(by_alias=True)
        section = data["chapters"][0]["sections"][0]

        assert section["next"][0] == {"title": "Go on", "chapterId": "c1", "sectionId": "s2"}
        assert section["elements"][2]["ifCondition"] == "has torch"
        assert section["elements"][2]["type"] == "else"

    def test_element_type_discriminants(self, book):
        """Each element carries its ElementType value."""
        elements = book.chapters[0].sections[0].elements

        assert [e.type for e in elements] == [
            ElementType.PARAGRAPH,
            ElementType.IF,
            ElementType.ELSE,
            ElementType.STATE,
        ]
        assert elements[1].elements[1].type == ElementType.ADD_ITEM

    def test_wire_discriminants_load_as_element_types(self):
        """Plain strings from JSON select the model and compare as ElementType."""
        section = Section.model_validate_json(
            '{"id": "s", "title": "t", "elements": ['
            '{"type": "addItem", "id": "torch"},'
            '{"type": "else", "ifCondition": "dark", "elements": []}]}'
        )

        add_item, else_block = section.elements
        assert isinstance(add_item, AddItem)
        assert isinstance(else_block, ElseBlock)
        assert add_item.type == ElementType.ADD_ITEM
        assert else_block.type == ElementType.ELSE
        assert RemoveItem(id="torch").type is ElementType.REMOVE_ITEM

    def test_dumped_json_validates_back(self, book):
        """A JSON dump with aliases loads into an equal tree."""
        payload = book.model_dump_json(by_alias=True)

        assert Book.model_validate_json(payload) == book

    def test_field_names_are_accepted_on_input(self):
        """Python field names work alongside the aliases."""
        link = Link.model_validate({"title": "x", "chapter_id": "c", "section_id": "s"})

        assert link == Link.model_validate({"title": "x", "chapterId": "c", "sectionId": "s"})

    def test_unknown_element_type_is_rejected(self):
        """The element union is closed."""
        with pytest.raises(ValidationError):
            Section.model_validate(
                {"id": "s", "title": "t", "elements": [{"type": "goto", "id": "x"}]}
            )


class TestNavigation:
    """Tests for lookup helpers on the tree."""

    def test_get_section(self, book):
        """Sections are addressed the way links address them."""
        link = book.chapters[0].sections[0].next[0]

        assert book.get_section(link.chapter_id, link.section_id).title == "Tunnel"

    def test_get_section_unknown_ids(self, book):
        """Unknown chapter or section ids return None."""
        assert book.get_section("c9", "s1") is None
        assert book.get_section("c1", "s9") is None
        assert book.get_chapter("c9") is None

    def test_iter_sections(self, book):
        """Sections are yielded with their chapter in source order."""
        pairs = [(c.id, s.id) for c, s in book.iter_sections()]

        assert pairs == [("c1", "s1"), ("c1", "s2")]

    def test_iter_elements_descends_into_branches(self, book):
        """Branch bodies are walked right after their block."""
        walked = list(book.chapters[0].sections[0].iter_elements())

        assert [e.type for e in walked] == [
            ElementType.PARAGRAPH,
            ElementType.IF,
            ElementType.PARAGRAPH,
            ElementType.ADD_ITEM,
            ElementType.ELSE,
            ElementType.REMOVE_ITEM,
            ElementType.STATE,
        ]
