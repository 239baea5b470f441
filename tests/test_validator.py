# tests/test_validator.py

import pandas as pd
import pytest

from payhub.payout.settings import PayoutSettings
from payhub.payout.validator import validate_payout_file

def write_sheet(path, rows):
    """Writes rows (header first) to an .xlsx file without an extra header or index."""
    pd.DataFrame(rows).to_excel(path, header=False, index=False)
    return str(path)

@pytest.fixture
def good_sheet(tmp_path):
    return write_sheet(tmp_path / 'payouts.xlsx', [
        ['FEID', 'Walker Name', 'Base Pay', 'Walker Cancellation'],
        ['FE001', 'Rajesh Kumar', 18400, 150],
        ['FE002', 'Priya Sharma', '15,000', None],
    ])

def test_valid_sheet_becomes_snapshot(good_sheet):
    snapshot, errors = validate_payout_file(good_sheet)

    assert errors == []
    assert snapshot[0] == ['FEID', 'Walker Name', 'Base Pay', 'Walker Cancellation']
    assert snapshot[1] == ['FE001', 'Rajesh Kumar', 18400, 150]
    assert snapshot[2][3] is None

def test_unreadable_file(tmp_path):
    path = tmp_path / 'broken.xlsx'
    path.write_text('this is not a spreadsheet')
    snapshot, errors = validate_payout_file(str(path))
    assert snapshot is None
    assert 'cannot be read' in errors[0]

def test_header_only_sheet(tmp_path):
    path = write_sheet(tmp_path / 'empty.xlsx', [['FEID', 'Base Pay']])
    snapshot, errors = validate_payout_file(path)
    assert snapshot is None
    assert errors[0].startswith('No data found in sheet')

def test_missing_feid_and_payout_columns(tmp_path):
    path = write_sheet(tmp_path / 'wrong.xlsx', [['Walker', 'Amount'], ['FE001', 100]])
    snapshot, errors = validate_payout_file(path)
    assert snapshot is None
    assert len(errors) == 2
    assert errors[0].startswith('FEID column not found')
    assert 'None of the payout columns' in errors[1]

def test_non_numeric_cells_only_fail_in_strict_mode(tmp_path):
    path = write_sheet(tmp_path / 'typo.xlsx', [
        ['FEID', 'Base Pay'],
        ['FE001', '1O00'],
    ])
    snapshot, errors = validate_payout_file(path)
    assert errors == []

    snapshot, errors = validate_payout_file(path, PayoutSettings(strict_numeric_parsing=True))
    assert snapshot is None
    assert errors == ["Row 2: value '1O00' in column 'Base Pay' is not a number and will be read as 1."]

def test_duplicate_feids_only_fail_when_rejected(tmp_path):
    path = write_sheet(tmp_path / 'dupes.xlsx', [
        ['FEID', 'Base Pay'],
        ['FE001', 100],
        ['FE001', 200],
    ])
    snapshot, errors = validate_payout_file(path)
    assert errors == []
    assert len(snapshot) == 3

    snapshot, errors = validate_payout_file(path, PayoutSettings(reject_duplicate_feids=True))
    assert snapshot is None
    assert errors == ["FEID 'FE001' appears on rows 2, 3."]
