"""Tests for the placeholder renderer and its transforms."""

from datetime import date, datetime

import pytest

from notification_dispatch import LocalizedContent, TemplateError, TemplateRenderer
from notification_dispatch.template import TRANSFORMS


@pytest.fixture
def renderer():
    return TemplateRenderer()


class TestRender:
    def test_simple_substitution(self, renderer):
        assert renderer.render("Hi {{name}}!", {"name": "Ana"}) == "Hi Ana!"

    def test_whitespace_inside_braces(self, renderer):
        assert renderer.render("Hi {{ name }}!", {"name": "Ana"}) == "Hi Ana!"

    def test_missing_variable_renders_empty(self, renderer):
        assert renderer.render("Hi {{name}}!", {}) == "Hi !"

    def test_none_renders_empty(self, renderer):
        assert renderer.render("[{{value}}]", {"value": None}) == "[]"

    def test_natural_string_forms(self, renderer):
        rendered = renderer.render(
            "{{count}} {{price}} {{active}}", {"count": 3, "price": 9.5, "active": True}
        )

        assert rendered == "3 9.5 true"

    def test_no_html_escaping(self, renderer):
        assert renderer.render("{{v}}", {"v": "<b>&</b>"}) == "<b>&</b>"

    def test_text_without_placeholders_is_unchanged(self, renderer):
        assert renderer.render("Plain text { not } a placeholder", {}) == (
            "Plain text { not } a placeholder"
        )

    def test_rendering_is_idempotent(self, renderer):
        variables = {"name": "Ana", "when": "2024-01-15T10:30:00Z"}
        pattern = "{{uppercase name}} at {{formatDateTime when}}"

        assert renderer.render(pattern, variables) == renderer.render(pattern, variables)


class TestTransforms:
    def test_uppercase_and_lowercase(self, renderer):
        variables = {"name": "Ana Lopez"}

        assert renderer.render("{{uppercase name}}", variables) == "ANA LOPEZ"
        assert renderer.render("{{lowercase name}}", variables) == "ana lopez"

    def test_case_transform_on_non_string(self, renderer):
        assert renderer.render("{{uppercase n}}", {"n": 42}) == "42"

    def test_transform_on_missing_variable_renders_empty(self, renderer):
        assert renderer.render("[{{uppercase name}}]", {}) == "[]"

    def test_format_date(self, renderer):
        variables = {"d": date(2024, 1, 5), "iso": "2024-01-15T10:30:00Z"}

        assert renderer.render("{{formatDate d}}", variables) == "1/5/2024"
        assert renderer.render("{{formatDate iso}}", variables) == "1/15/2024"

    def test_format_date_time(self, renderer):
        variables = {
            "morning": datetime(2024, 1, 15, 9, 5, 7),
            "evening": "2024-01-15T22:30:00",
            "midnight": datetime(2024, 1, 15, 0, 0, 0),
            "day": date(2024, 3, 1),
        }

        assert renderer.render("{{formatDateTime morning}}", variables) == "1/15/2024, 9:05:07 AM"
        assert renderer.render("{{formatDateTime evening}}", variables) == (
            "1/15/2024, 10:30:00 PM"
        )
        assert renderer.render("{{formatDateTime midnight}}", variables) == (
            "1/15/2024, 12:00:00 AM"
        )
        assert renderer.render("{{formatDateTime day}}", variables) == "3/1/2024, 12:00:00 AM"

    def test_unparseable_date_renders_natural_form(self, renderer):
        assert renderer.render("{{formatDate d}}", {"d": "soon"}) == "soon"

    def test_registered_transforms(self):
        assert set(TRANSFORMS) == {"uppercase", "lowercase", "formatDate", "formatDateTime"}


class TestTemplateErrors:
    @pytest.mark.parametrize(
        "pattern",
        [
            "{{frobnicate name}}",
            "{{uppercase}}",
            "{{uppercase first last}}",
            "{{}}",
            "{{#if name}}yes{{/if}}",
            "{{> partial}}",
            "{{! comment }}",
            "{{{raw}}}",
            "{{bad name!}}",
        ],
    )
    def test_malformed_placeholders_raise(self, renderer, pattern):
        with pytest.raises(TemplateError):
            renderer.render(pattern, {"name": "Ana", "first": "A", "last": "L", "raw": "x"})

    def test_unknown_transform_message(self, renderer):
        with pytest.raises(TemplateError, match="unknown transform 'frobnicate'"):
            renderer.render("{{frobnicate name}}", {"name": "Ana"})


class TestRenderContent:
    def test_renders_every_field(self, renderer):
        content = LocalizedContent(subject="Hello {{name}}", title="T {{name}}", body="Hi {{name}}")

        rendered = renderer.render_content(content, {"name": "Ana"})

        assert rendered.subject == "Hello Ana"
        assert rendered.title == "T Ana"
        assert rendered.body == "Hi Ana"

    def test_absent_fields_stay_none(self, renderer):
        rendered = renderer.render_content(LocalizedContent(body="Hi"), {})

        assert rendered.subject is None
        assert rendered.title is None

    def test_error_names_the_field(self, renderer):
        content = LocalizedContent(subject="{{frobnicate name}}", body="Hi")

        with pytest.raises(TemplateError) as exc_info:
            renderer.render_content(content, {"name": "Ana"})

        assert exc_info.value.field == "subject"
        assert str(exc_info.value).startswith("subject: ")

    def test_body_error_names_the_body(self, renderer):
        content = LocalizedContent(subject="Hello", body="Hi {{> partial}}")

        with pytest.raises(TemplateError) as exc_info:
            renderer.render_content(content, {})

        assert exc_info.value.field == "body"
        assert str(exc_info.value).startswith("body: ")


def test_extract_variables(renderer):
    pattern = "{{name}} {{uppercase name}} {{formatDate when}} {{#if x}}{{/if}} {{other}}"

    assert renderer.extract_variables(pattern) == ["name", "when", "other"]
