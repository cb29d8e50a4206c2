"""Unit tests for the rule-based extractors."""

import math
from datetime import date

import pytest

from subscription_detector.exceptions import MalformedDateError
from subscription_detector.extraction import (
    detect_billing_cycle,
    detect_category,
    extract_amount,
    extract_service_name,
    extract_trial_info,
    parse_email_date,
    validate_amount,
)
from subscription_detector.models import SubscriptionCategory, SubscriptionCycle


class TestServiceName:
    """Test suite for service name extraction."""

    def test_domain_label_fallback(self) -> None:
        assert extract_service_name("Your receipt", "billing@spotify.com") == "spotify"

    def test_subject_phrase_wins(self) -> None:
        name = extract_service_name(
            "Payment received for Adobe Creative Cloud - March",
            "mail@adobe.com",
        )

        assert name == "Adobe Creative Cloud"

    def test_subject_phrase_until_parenthesis(self) -> None:
        assert extract_service_name("Welcome to Hulu (with ads)", "x@hulu.com") == "Hulu"

    def test_local_part_with_separators(self) -> None:
        assert extract_service_name("Welcome!", "dropbox_team@dropbox.com") == "dropbox team"

    def test_role_words_removed_case_insensitively(self) -> None:
        assert extract_service_name("Receipt", "No-Reply@netflix.com") == "netflix"

    def test_nothing_found(self) -> None:
        assert extract_service_name("", "") is None
        assert extract_service_name("Hello", "support@") is None


class TestBillingCycle:
    """Test suite for billing cycle detection."""

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("Your annual plan renews soon", SubscriptionCycle.YEARLY),
            ("Billed every 12-month period", SubscriptionCycle.YEARLY),
            ("Your Monthly plan", SubscriptionCycle.MONTHLY),
            ("A 30 day pass", SubscriptionCycle.MONTHLY),
            ("Your weekly box", SubscriptionCycle.WEEKLY),
            ("Billed every two weeks", SubscriptionCycle.BI_WEEKLY),
            ("Charged quarterly", SubscriptionCycle.QUARTERLY),
            ("Billed bimonthly", SubscriptionCycle.BI_MONTHLY),
            ("Billed biyearly", SubscriptionCycle.BI_YEARLY),
            ("Thanks for your order", SubscriptionCycle.UNKNOWN),
        ],
    )
    def test_detects_cycle(self, text: str, expected: SubscriptionCycle) -> None:
        assert detect_billing_cycle(text) == expected

    def test_earlier_cycle_wins(self) -> None:
        # "bi-weekly" also contains the word "weekly", which is checked first.
        assert detect_billing_cycle("Billed bi-weekly") == SubscriptionCycle.WEEKLY
        assert detect_billing_cycle("monthly or yearly") == SubscriptionCycle.YEARLY


class TestCategory:
    """Test suite for category classification."""

    def test_streaming(self) -> None:
        category = detect_category("Your Netflix subscription", "", "no-reply@netflix.com")

        assert category == SubscriptionCategory.STREAMING

    def test_earlier_category_wins(self) -> None:
        # "backup" and "cloud" match both software and storage.
        category = detect_category("Your cloud backup plan", "", "team@example.com")

        assert category == SubscriptionCategory.SOFTWARE

    def test_streaming_before_utilities(self) -> None:
        category = detect_category("Your bill", "<p>Spotify Premium</p>", "x@example.com")

        assert category == SubscriptionCategory.STREAMING

    def test_sender_is_checked(self) -> None:
        category = detect_category("Receipt", "Thanks!", "orders@doordash.com")

        assert category == SubscriptionCategory.FOOD_DELIVERY

    def test_other(self) -> None:
        category = detect_category("Hello", "See you soon", "friend@example.com")

        assert category == SubscriptionCategory.OTHER

    def test_is_deterministic(self) -> None:
        args = ("Your renter insurance premium", "", "x@example.com")

        assert detect_category(*args) == detect_category(*args) == SubscriptionCategory.INSURANCE


class TestTrial:
    """Test suite for trial detection."""

    def test_day_duration(self) -> None:
        info = extract_trial_info("start your 14 day free trial today", date(2024, 1, 1))

        assert info.is_trial is True
        assert info.duration_days == 14
        assert info.end_date == date(2024, 1, 15)

    def test_week_duration(self) -> None:
        info = extract_trial_info("enjoy a 2-weeks trial", date(2024, 1, 1))

        assert info.duration_days == 14
        assert info.end_date == date(2024, 1, 15)

    def test_month_duration(self) -> None:
        info = extract_trial_info("your 1 month trial", date(2024, 1, 1))

        assert info.duration_days == 30
        assert info.end_date == date(2024, 1, 31)

    def test_trial_without_duration(self) -> None:
        info = extract_trial_info("your trial has started", date(2024, 1, 1))

        assert info.is_trial is True
        assert info.duration_days is None
        assert info.end_date is None

    def test_zero_duration_is_not_a_duration(self) -> None:
        info = extract_trial_info("0 day trial", date(2024, 1, 1))

        assert info.is_trial is True
        assert info.duration_days is None

    def test_try_for_free(self) -> None:
        assert extract_trial_info("try for free now", date(2024, 1, 1)).is_trial is True

    def test_not_a_trial(self) -> None:
        info = extract_trial_info("your 14 day delivery window", date(2024, 1, 1))

        assert info.is_trial is False
        assert info.duration_days is None


class TestAmount:
    """Test suite for amount extraction and validation."""

    def test_extracts_first_amount(self) -> None:
        assert extract_amount("total $15.99 then $20.00") == 15.99

    def test_strips_thousands_separators(self) -> None:
        assert extract_amount("rent is $1,234.56 per month") == 1234.56

    def test_whole_dollars(self) -> None:
        assert extract_amount("only $5 a week") == 5.0

    def test_no_amount(self) -> None:
        assert extract_amount("no price here") is None

    @pytest.mark.parametrize("value", [0, -5, 10000.01, math.nan, math.inf, None])
    def test_rejects_out_of_range(self, value) -> None:
        assert validate_amount(value) is None

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (15.99, 15.99),
            (12.005, 12.01),
            (15.994, 15.99),
            (9999.999, 10000.0),
            (10000, 10000.0),
        ],
    )
    def test_rounds_half_up_to_cents(self, value: float, expected: float) -> None:
        assert validate_amount(value) == expected


class TestEmailDate:
    """Test suite for email date parsing."""

    def test_iso_date(self) -> None:
        assert parse_email_date("2024-03-01") == date(2024, 3, 1)

    def test_iso_datetime_with_z(self) -> None:
        assert parse_email_date("2024-03-01T10:00:00Z") == date(2024, 3, 1)

    def test_rfc2822_converted_to_utc(self) -> None:
        assert parse_email_date("Fri, 01 Mar 2024 23:30:00 -0800") == date(2024, 3, 2)

    def test_malformed(self) -> None:
        with pytest.raises(MalformedDateError):
            parse_email_date("not a date")

    @pytest.mark.parametrize(
        "value",
        ["2024/03/01", "March 1, 2024", "1 March 2024"],
    )
    def test_loose_formats(self, value: str) -> None:
        assert parse_email_date(value) == date(2024, 3, 1)

    @pytest.mark.parametrize("value", ["", "someday", "yesterday-ish"])
    def test_unparseable_values(self, value: str) -> None:
        with pytest.raises(MalformedDateError):
            parse_email_date(value)
