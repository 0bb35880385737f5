"""
Tests for report parameter models.

Covers timeframe parsing, the custom date range invariant and immutability.
"""

from datetime import date
from uuid import UUID

import pytest
from pydantic import ValidationError

from azure_cost_report.providers.base import ParameterError
from azure_cost_report.reports.parameters import (
    OutputFormat,
    ReportParameters,
    Timeframe,
    parse_timeframe,
    validate_custom_range,
)


class TestReportParameters:
    """Test cases for the ReportParameters model."""

    def test_defaults(self, subscription_id):
        params = ReportParameters(subscription_id=subscription_id)

        assert params.timeframe == Timeframe.BILLING_MONTH_TO_DATE
        assert params.output == OutputFormat.CONSOLE
        assert params.custom_from is None
        assert params.custom_to is None
        assert params.is_custom is False

    def test_subscription_parsed_from_string(self):
        params = ReportParameters.create(subscription_id="3f2504e0-4f89-11d3-9a0c-0305e82c3301")

        assert params.subscription_id == UUID("3f2504e0-4f89-11d3-9a0c-0305e82c3301")

    def test_custom_range_accepted(self, custom_params):
        assert custom_params.is_custom
        assert custom_params.custom_from == date(2024, 1, 1)
        assert custom_params.custom_to == date(2024, 1, 31)

    def test_custom_single_day_accepted(self, subscription_id):
        params = ReportParameters.create(
            subscription_id=subscription_id,
            timeframe="Custom",
            custom_from=date(2024, 2, 1),
            custom_to=date(2024, 2, 1),
        )

        assert params.custom_from == params.custom_to

    def test_custom_from_after_to_rejected(self, subscription_id):
        with pytest.raises(ParameterError, match="from date must be before the to date"):
            ReportParameters.create(
                subscription_id=subscription_id,
                timeframe=Timeframe.CUSTOM,
                custom_from=date(2024, 2, 1),
                custom_to=date(2024, 1, 1),
            )

    def test_custom_missing_from_rejected(self, subscription_id):
        with pytest.raises(ParameterError, match="from date must be specified"):
            ReportParameters.create(
                subscription_id=subscription_id,
                timeframe=Timeframe.CUSTOM,
                custom_to=date(2024, 1, 1),
            )

    def test_custom_missing_to_rejected(self, subscription_id):
        with pytest.raises(ParameterError, match="to date must be specified"):
            ReportParameters.create(
                subscription_id=subscription_id,
                timeframe=Timeframe.CUSTOM,
                custom_from=date(2024, 1, 1),
            )

    def test_dates_ignored_for_named_timeframe(self, subscription_id):
        params = ReportParameters.create(
            subscription_id=subscription_id,
            timeframe=Timeframe.MONTH_TO_DATE,
            custom_from=date(2024, 2, 1),
            custom_to=date(2024, 1, 1),
        )

        assert params.timeframe == Timeframe.MONTH_TO_DATE

    def test_invalid_subscription_rejected(self):
        with pytest.raises(ParameterError, match="subscription_id"):
            ReportParameters.create(subscription_id="not-a-guid")

    def test_direct_construction_raises_validation_error(self, subscription_id):
        with pytest.raises(ValidationError):
            ReportParameters(
                subscription_id=subscription_id,
                timeframe=Timeframe.CUSTOM,
                custom_from=date(2024, 2, 1),
                custom_to=date(2024, 1, 1),
            )

    def test_parameters_are_immutable(self, default_params):
        with pytest.raises(ValidationError):
            default_params.timeframe = Timeframe.CUSTOM


class TestTimeframeParsing:
    """Test cases for timeframe name parsing."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("MonthToDate", Timeframe.MONTH_TO_DATE),
            ("monthtodate", Timeframe.MONTH_TO_DATE),
            (" TheLastMonth ", Timeframe.THE_LAST_MONTH),
            (Timeframe.WEEK_TO_DATE, Timeframe.WEEK_TO_DATE),
        ],
    )
    def test_known_names(self, value, expected):
        assert parse_timeframe(value) == expected

    def test_unknown_name(self):
        with pytest.raises(ParameterError, match="Unknown timeframe 'LastDecade'"):
            parse_timeframe("LastDecade")

    def test_unknown_name_through_create(self, subscription_id):
        with pytest.raises(ParameterError, match="Unknown timeframe"):
            ReportParameters.create(subscription_id=subscription_id, timeframe="Yesterday")


class TestValidateCustomRange:
    """Test cases for the standalone custom range check."""

    def test_named_timeframe_skips_checks(self):
        validate_custom_range(Timeframe.BILLING_MONTH_TO_DATE, None, None)

    def test_reversed_range(self):
        with pytest.raises(ParameterError):
            validate_custom_range(Timeframe.CUSTOM, date(2024, 3, 2), date(2024, 3, 1))

    def test_parameter_error_is_value_error(self):
        with pytest.raises(ValueError):
            validate_custom_range(Timeframe.CUSTOM, None, date(2024, 3, 1))
