import pytest

from empowered_camps.core.models.domain.enums import SettingValueType
from empowered_camps.core.models.domain.settings_schema import (
    SETTINGS_CATEGORIES,
    SETTINGS_SCHEMA,
    default_values,
    get_definition,
)


def test_every_definition_uses_a_known_category():
    assert {definition.category for definition in SETTINGS_SCHEMA.values()} <= set(SETTINGS_CATEGORIES)


def test_defaults_pass_their_own_validation():
    for key, definition in SETTINGS_SCHEMA.items():
        assert definition.validate_value(definition.default), key


def test_default_values_cover_every_key():
    assert set(default_values()) == set(SETTINGS_SCHEMA)


def test_unknown_key():
    assert get_definition("nope") is None


@pytest.mark.parametrize(
    "key,value,valid",
    [
        ("platform_name", "", False),
        ("platform_name", "x" * 101, False),
        ("support_email", "help@example.com", True),
        ("support_email", "not-an-email", False),
        ("max_athletes_per_registration", 20, True),
        ("max_athletes_per_registration", 21, False),
        ("max_athletes_per_registration", "5", False),
        ("waitlist_enabled", "true", False),
        ("max_upload_size_mb", 2.5, True),
        ("stripe_mode", "SIMULATED", True),
        ("stripe_mode", "TEST", False),
        ("athlete_required_fields", ["first_name"], True),
        ("athlete_required_fields", "first_name", False),
        ("allow_tenant_overrides_by_category", {"camps": False}, True),
    ],
)
def test_validation(key, value, valid):
    assert get_definition(key).validate_value(value) is valid


def test_describe_omits_rule():
    described = get_definition("stripe_mode").describe()

    assert described["value_type"] == SettingValueType.STRING.value
    assert "rule" not in described
