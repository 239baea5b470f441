# tests/test_cycles.py

from datetime import date

import pytest

from payhub.payout.cycles import (all_months_in_year, billing_cycle_for_date, generate_billing_cycle,
                                  generate_billing_cycles, parse_cycle_id, recent_months_window)

def test_january_cycle_starts_in_previous_year():
    cycle = generate_billing_cycle(2025, 0)
    assert cycle.start_date_iso == '2024-12-21'
    assert cycle.end_date_iso == '2025-01-20'
    assert cycle.label == 'January 2025 (21 Dec - 20 Jan)'
    assert cycle.month_index == 0

@pytest.mark.parametrize('year', [2024, 2025])
def test_february_boundaries_ignore_leap_years(year):
    cycle = generate_billing_cycle(year, 1)
    assert cycle.start_date_iso == f'{year}-01-21'
    assert cycle.end_date_iso == f'{year}-02-20'
    assert cycle.label == f'February {year} (21 Jan - 20 Feb)'

def test_december_cycle():
    cycle = generate_billing_cycle(2025, 11)
    assert (cycle.start_date_iso, cycle.end_date_iso) == ('2025-11-21', '2025-12-20')
    assert cycle.cycle_id == '2025-12'

def test_to_dict_uses_wire_names():
    assert generate_billing_cycle(2025, 7).to_dict() == {
        'id': '2025-08',
        'label': 'August 2025 (21 Jul - 20 Aug)',
        'startDateISO': '2025-07-21',
        'endDateISO': '2025-08-20',
        'monthIndex': 7,
    }

@pytest.mark.parametrize('month_index', [-1, 12])
def test_month_index_out_of_range(month_index):
    with pytest.raises(ValueError):
        generate_billing_cycle(2025, month_index)

def test_all_months_in_year_is_ascending():
    cycles = all_months_in_year(2025)
    assert [c.month_index for c in cycles] == list(range(12))
    assert cycles[0].label.startswith('January 2025')
    assert cycles[-1].label.startswith('December 2025')

def test_recent_months_window_is_august_back_to_april():
    cycles = recent_months_window(2025)
    assert [c.label.split(' ')[0] for c in cycles] == ['August', 'July', 'June', 'May', 'April']
    assert cycles[0].label == 'August 2025 (21 Jul - 20 Aug)'

def test_generation_is_repeatable():
    assert recent_months_window(2025) == recent_months_window(2025)

def test_generate_billing_cycles_ordering_is_a_parameter():
    ascending = generate_billing_cycles(2025, [5, 1, 3])
    descending = generate_billing_cycles(2025, [5, 1, 3], descending=True)
    assert [c.month_index for c in ascending] == [1, 3, 5]
    assert [c.month_index for c in descending] == [5, 3, 1]

def test_cycle_for_date_rolls_over_on_the_21st():
    assert billing_cycle_for_date(date(2025, 8, 20)).cycle_id == '2025-08'
    assert billing_cycle_for_date(date(2025, 8, 21)).cycle_id == '2025-09'
    assert billing_cycle_for_date(date(2025, 12, 25)).cycle_id == '2026-01'

def test_cycle_contains_its_boundaries():
    cycle = generate_billing_cycle(2025, 0)
    assert cycle.contains(date(2024, 12, 21))
    assert cycle.contains(date(2025, 1, 20))
    assert not cycle.contains(date(2025, 1, 21))
    assert not cycle.contains(date(2024, 12, 20))

def test_parse_cycle_id():
    assert parse_cycle_id('2025-03') == generate_billing_cycle(2025, 2)
    for bad in ['2025-13', '2025-00', '25-03', 'March', None]:
        with pytest.raises(ValueError):
            parse_cycle_id(bad)
