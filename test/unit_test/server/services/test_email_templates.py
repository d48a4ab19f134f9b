from empowered_camps.core.models.domain.enums import EmailType
from empowered_camps.server.services.email_templates import DEFAULT_TEMPLATES, PLACEHOLDER, render


def test_render_substitutes_known_variables():
    assert render("Hi {{ name }}, see {{camp}}", {"name": "Sam", "camp": "Week 2"}) == "Hi Sam, see Week 2"


def test_render_keeps_unknown_and_none_placeholders():
    assert render("{{a}} {{b}} {{c}}", {"a": 1, "b": None}) == "1 {{b}} {{c}}"


def test_every_email_type_has_a_default():
    assert set(DEFAULT_TEMPLATES) == set(EmailType)


def test_default_placeholders_are_declared_variables():
    for email_type, default in DEFAULT_TEMPLATES.items():
        used = set(PLACEHOLDER.findall(default.subject + default.body_html))
        assert used <= set(default.variables), email_type
