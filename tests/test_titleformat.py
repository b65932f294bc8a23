from __future__ import annotations

import pytest

from lyricbar.titleformat import TemplateError, compile_format


def test_fields_are_substituted():
    fmt = compile_format('lyrics.sh "%artist%" "%title%"')
    meta = {"artist": "Foo", "title": "Bar"}
    assert fmt.evaluate(meta.get) == 'lyrics.sh "Foo" "Bar"'
    assert fmt.fields == ("artist", "title")


def test_missing_fields_become_empty():
    fmt = compile_format("get %artist%-%album%")
    assert fmt.evaluate({"artist": "Foo"}.get) == "get Foo-"


def test_double_percent_is_literal():
    fmt = compile_format("echo 100%% %title%")
    assert fmt.evaluate({"title": "x"}.get) == "echo 100% x"


def test_field_names_may_contain_spaces():
    fmt = compile_format("%unsynced lyrics%")
    assert fmt.evaluate({"unsynced lyrics": "la"}.get) == "la"


def test_plain_text_passes_through():
    assert compile_format("no fields here").evaluate({}.get) == "no fields here"


@pytest.mark.parametrize("template", ["echo %artist", "%", "echo %ti/tle%", "a %$x% b"])
def test_malformed_templates_do_not_compile(template):
    with pytest.raises(TemplateError):
        compile_format(template)


def test_evaluation_fails_past_max_length():
    fmt = compile_format("echo %title%")
    with pytest.raises(TemplateError):
        fmt.evaluate({"title": "x" * 5000}.get)
    assert fmt.evaluate({"title": "x" * 5000}.get, max_len=None).startswith("echo x")
