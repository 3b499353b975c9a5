from datetime import date

import pytest

from models.budget_items import Frequency, FrequencyData, RecurringItem
from services.occurrence_engine import occurred_amount


def monthly(day, amount=100.0):
    return RecurringItem(label="Monthly", amount=amount, day_of_month=day)


@pytest.mark.parametrize("due_day", [1, 5, 8, 15, 28, 31])
def test_monthly_item_occurs_once_due_day_is_reached(due_day):
    item = monthly(due_day)
    for today in range(1, 32):
        reference = date(2025, 7, today)
        expected = 100.0 if today >= due_day else 0.0
        assert occurred_amount(item, reference) == expected


def test_due_day_equal_to_reference_day_counts():
    assert occurred_amount(monthly(8), date(2025, 7, 8)) == 100.0


def test_quarterly_outside_applicable_months_is_zero_whatever_the_day():
    item = RecurringItem(label="Insurance", amount=120, day_of_month=1,
                         frequency=Frequency.QUARTERLY,
                         frequency_data=FrequencyData(months=[1, 4, 7, 10]))
    for month in (2, 3, 5, 6, 8, 9, 11, 12):
        assert occurred_amount(item, date(2025, month, 28)) == 0.0
    assert occurred_amount(item, date(2025, 7, 1)) == 120


def test_quarterly_defaults_to_january_april_july_october():
    item = RecurringItem(label="Insurance", amount=120, day_of_month=10,
                         frequency=Frequency.QUARTERLY)
    assert occurred_amount(item, date(2025, 4, 10)) == 120
    assert occurred_amount(item, date(2025, 5, 10)) == 0.0


def test_quarterly_full_amount_not_spread():
    item = RecurringItem(label="Insurance", amount=300, day_of_month=2,
                         frequency=Frequency.QUARTERLY)
    assert occurred_amount(item, date(2025, 10, 2)) == 300


def test_yearly_defaults_to_january():
    item = RecurringItem(label="Subscription", amount=60, day_of_month=3,
                         frequency=Frequency.YEARLY, frequency_data=FrequencyData())
    assert occurred_amount(item, date(2025, 1, 3)) == 60
    assert occurred_amount(item, date(2025, 1, 2)) == 0.0
    assert occurred_amount(item, date(2025, 2, 3)) == 0.0


def test_yearly_with_several_months():
    item = RecurringItem(label="Tax", amount=600, day_of_month=20,
                         frequency=Frequency.YEARLY,
                         frequency_data=FrequencyData(months=[3, 10]))
    assert occurred_amount(item, date(2025, 3, 25)) == 600
    assert occurred_amount(item, date(2025, 10, 19)) == 0.0


def test_explicit_empty_month_set_never_occurs():
    item = RecurringItem(label="Never", amount=10, day_of_month=1,
                         frequency=Frequency.QUARTERLY,
                         frequency_data=FrequencyData(months=[]))
    assert occurred_amount(item, date(2025, 1, 31)) == 0.0


def test_one_time_uses_exact_date_not_day_of_month():
    item = RecurringItem(label="Bonus", amount=400, day_of_month=1,
                         frequency=Frequency.ONE_TIME,
                         frequency_data=FrequencyData(date=date(2025, 7, 20)))
    assert occurred_amount(item, date(2025, 7, 19)) == 0.0
    assert occurred_amount(item, date(2025, 7, 20)) == 400
    assert occurred_amount(item, date(2025, 7, 31)) == 400
    # outside the current month window
    assert occurred_amount(item, date(2025, 8, 1)) == 0.0
    assert occurred_amount(item, date(2024, 7, 20)) == 0.0


def test_one_time_without_date_is_zero():
    item = RecurringItem(label="Bonus", amount=400, day_of_month=1,
                         frequency=Frequency.ONE_TIME)
    assert occurred_amount(item, date(2025, 7, 20)) == 0.0


def test_unknown_frequency_is_zero_and_does_not_raise():
    item = RecurringItem(label="Weird", amount=50, day_of_month=1, frequency="WEEKLY")
    assert occurred_amount(item, date(2025, 7, 20)) == 0.0


def test_same_inputs_same_output():
    item = RecurringItem(label="Insurance", amount=120, day_of_month=8,
                         frequency=Frequency.QUARTERLY)
    reference = date(2025, 7, 8)
    assert occurred_amount(item, reference) == occurred_amount(item, reference)
