"""Card rules: masking, effective status, fragment normalization, status parsing."""

from datetime import date, timedelta
from decimal import Decimal

import pytest

from app.core.card_rules import (
    effective_status,
    has_cent_precision,
    is_expired,
    mask_card_number,
    normalize_number_fragment,
    parse_status,
    to_amount,
)
from app.core.exceptions import InvalidAmount, InvalidStatus
from app.db.models.card_model import CardStatus


def test_mask_keeps_only_last_four_digits():
    assert mask_card_number("4111111111111234") == "**** **** **** 1234"


def test_mask_uses_fixed_pattern_for_long_numbers():
    assert mask_card_number("4111111111111119876") == "**** **** **** 9876"


def test_card_expiring_today_is_not_expired():
    today = date(2026, 5, 1)
    assert not is_expired(today, today)
    assert is_expired(today - timedelta(days=1), today)


def test_effective_status_downgrades_past_expiry_to_expired():
    card = {"status": CardStatus.ACTIVE, "expiry_date": date(2020, 1, 1)}
    assert effective_status(card, date(2026, 1, 1)) is CardStatus.EXPIRED


def test_effective_status_keeps_stored_status_before_expiry():
    card = {"status": CardStatus.BLOCKED, "expiry_date": date(2030, 1, 1)}
    assert effective_status(card, date(2026, 1, 1)) is CardStatus.BLOCKED


@pytest.mark.parametrize("token", ["ACTIVE", "BLOCKED", "EXPIRED"])
def test_parse_status_accepts_exact_tokens(token):
    assert parse_status(token) is CardStatus(token)


@pytest.mark.parametrize("token", ["active", "Blocked", "FROZEN", ""])
def test_parse_status_is_case_sensitive_and_closed(token):
    with pytest.raises(InvalidStatus) as exc_info:
        parse_status(token)
    assert exc_info.value.context["value"] == token


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("1234", "1234"),
        ("**** 5678", "5678"),
        ("4111-1111-1111-4321", "4321"),
        ("12", "12"),
        ("abc", None),
        ("", None),
        (None, None),
    ],
)
def test_normalize_number_fragment(raw, expected):
    assert normalize_number_fragment(raw) == expected


def test_to_amount_parses_strings_and_numbers():
    assert to_amount("100.50") == Decimal("100.50")
    assert to_amount(7) == Decimal("7")


@pytest.mark.parametrize("raw", ["ten", None, "NaN", "Infinity"])
def test_to_amount_rejects_malformed_values(raw):
    with pytest.raises(InvalidAmount):
        to_amount(raw)


def test_cent_precision():
    assert has_cent_precision(Decimal("10.25"))
    assert has_cent_precision(Decimal("10"))
    assert not has_cent_precision(Decimal("10.255"))
