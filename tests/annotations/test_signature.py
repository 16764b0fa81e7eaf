"""Tests for ipcgen.annotations.signature."""

from __future__ import annotations

from ipcgen.annotations.signature import parse_params, render_signature, split_params
from ipcgen.models import Dropped, Parsed, ParsedParam


def test_render_signature_preserves_declaration_order() -> None:
    signature = render_signature("a: number, b: string")

    assert signature.params == (ParsedParam("a", "number"), ParsedParam("b", "string"))
    assert signature.definitions == "a: number, b: string"
    assert signature.names == "a, b"
    assert signature.dropped == ()


def test_whitespace_is_normalised_around_names_and_types() -> None:
    signature = render_signature("  id :   string ,\n  count:number  ")

    assert signature.definitions == "id: string, count: number"
    assert signature.names == "id, count"


def test_empty_parameter_list_renders_empty_strings() -> None:
    signature = render_signature("")

    assert signature.params == ()
    assert signature.definitions == ""
    assert signature.names == ""


def test_blank_entries_are_ignored() -> None:
    assert split_params("a: number,, ,b: string,") == ["a: number", "b: string"]


def test_malformed_entries_are_dropped() -> None:
    results = parse_params("untyped, a: number, : string, b:, c: Record<string: number>")

    assert results == [
        Dropped("untyped"),
        Parsed(ParsedParam("a", "number")),
        Dropped(": string"),
        Dropped("b:"),
        Dropped("c: Record<string: number>"),
    ]


def test_generic_commas_split_naively() -> None:
    signature = render_signature("items: Map<string, number>, flag: boolean")

    assert signature.names == "items, flag"
    assert signature.definitions == "items: Map<string, flag: boolean"
    assert signature.dropped == ("number>",)


def test_duplicate_parameter_names_are_kept() -> None:
    assert render_signature("a: number, a: string").names == "a, a"
