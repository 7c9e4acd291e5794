"""Tests for ConstraintViolationList and ConstraintValidator."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel

from fastapi_param_converter.validation import (
    Constraint,
    ConstraintValidator,
    ConstraintViolation,
    ConstraintViolationList,
    Validator,
)


@dataclass
class Author:
    name: str


@dataclass
class Comment:
    text: str


@dataclass
class Post:
    name: str
    body: str
    author: Author | None = None
    comments: list[Comment] = field(default_factory=list)
    related: Any = None


class Tag(BaseModel):
    label: str


def _not_blank(value: Any) -> bool:
    return bool(value)


def _validator() -> ConstraintValidator:
    return (
        ConstraintValidator()
        .register(
            Post,
            Constraint("name", _not_blank, "Name should not be blank."),
            Constraint(
                "body",
                lambda v: len(v) >= 10,
                "Body is too short.",
                groups=("Posting",),
                code="too_short",
            ),
        )
        .register(Author, Constraint("name", _not_blank, "Author needs a name."))
        .register(Comment, Constraint("text", _not_blank, "Comment is empty."))
    )


class TestConstraintViolationList:
    def test_empty_is_falsy(self) -> None:
        violations = ConstraintViolationList()
        assert not violations
        assert len(violations) == 0

    def test_add_and_index(self) -> None:
        violations = ConstraintViolationList()
        violation = ConstraintViolation("bad", "name")
        violations.add(violation)
        assert violations
        assert violations[0] is violation
        assert list(violations) == [violation]

    def test_extend_and_slice(self) -> None:
        violations = ConstraintViolationList([ConstraintViolation("a")])
        violations.extend([ConstraintViolation("b"), ConstraintViolation("c")])
        tail = violations[1:]
        assert isinstance(tail, ConstraintViolationList)
        assert [v.message for v in tail] == ["b", "c"]

    def test_by_property(self) -> None:
        violations = ConstraintViolationList(
            [
                ConstraintViolation("blank", "name"),
                ConstraintViolation("short", "name"),
                ConstraintViolation("short", "body"),
            ]
        )
        assert violations.by_property() == {
            "name": ["blank", "short"],
            "body": ["short"],
        }

    def test_to_list(self) -> None:
        violations = ConstraintViolationList(
            [ConstraintViolation("short", "body", "x", code="too_short")]
        )
        assert violations.to_list() == [
            {"message": "short", "property_path": "body", "code": "too_short"}
        ]

    def test_equality(self) -> None:
        assert ConstraintViolationList([ConstraintViolation("a")]) == (
            ConstraintViolationList([ConstraintViolation("a")])
        )


class TestConstraintValidator:
    def test_satisfies_protocol(self) -> None:
        assert isinstance(ConstraintValidator(), Validator)

    def test_valid_object(self) -> None:
        violations = _validator().validate(Post("Post 1", "This is a blog post"))
        assert not violations

    def test_default_group_when_groups_is_none(self) -> None:
        violations = _validator().validate(Post("", "short"), None, False, False)
        assert [v.property_path for v in violations] == ["name"]
        assert violations[0].message == "Name should not be blank."
        assert violations[0].invalid_value == ""

    def test_named_group(self) -> None:
        violations = _validator().validate(Post("", "short"), ["Posting"])
        assert [v.property_path for v in violations] == ["body"]
        assert violations[0].code == "too_short"

    def test_several_groups(self) -> None:
        violations = _validator().validate(Post("", "short"), ["Default", "Posting"])
        assert len(violations) == 2

    def test_object_level_constraint(self) -> None:
        validator = ConstraintValidator().register(
            Post, Constraint("", lambda p: p.name != p.body, "Name equals body.")
        )
        violations = validator.validate(Post("same", "same"))
        assert violations[0].property_path == ""

    def test_constraints_inherited(self) -> None:
        class DraftPost(Post):
            pass

        violations = _validator().validate(DraftPost("", "This is a blog post"))
        assert len(violations) == 1

    def test_nested_ignored_without_traverse(self) -> None:
        post = Post("Post 1", "This is a blog post", author=Author(""))
        assert not _validator().validate(post, None, False, False)

    def test_traverse_validates_nested_objects(self) -> None:
        post = Post("Post 1", "This is a blog post", author=Author(""))
        violations = _validator().validate(post, None, True, False)
        assert [v.property_path for v in violations] == ["author.name"]

    def test_traverse_without_deep_skips_collections(self) -> None:
        post = Post("Post 1", "This is a blog post", comments=[Comment("")])
        assert not _validator().validate(post, None, True, False)

    def test_deep_descends_into_collections(self) -> None:
        post = Post(
            "Post 1",
            "This is a blog post",
            comments=[Comment("nice"), Comment("")],
            related={"first": Comment("")},
        )
        violations = _validator().validate(post, None, True, True)
        assert [v.property_path for v in violations] == [
            "comments[1].text",
            "related[first].text",
        ]

    def test_cycles_are_visited_once(self) -> None:
        post = Post("", "This is a blog post")
        post.related = post
        violations = _validator().validate(post, None, True, True)
        assert len(violations) == 1

    def test_self_referencing_list(self) -> None:
        items: list[Any] = []
        items.append(items)
        post = Post("Post 1", "This is a blog post", related=items)
        assert not _validator().validate(post, None, True, True)

    def test_pydantic_model_fields(self) -> None:
        validator = ConstraintValidator().register(
            Tag, Constraint("label", _not_blank, "Label is required.")
        )
        post = Post("Post 1", "This is a blog post", related=[Tag(label="")])
        violations = validator.validate(post, None, True, True)
        assert [v.property_path for v in violations] == ["related[0].label"]

    def test_unregistered_type_has_no_violations(self) -> None:
        assert not ConstraintValidator().validate(object())
