# ==============================================================================
# payhub/payout/resolver.py
# ------------------------------------------------------------------------------
# Locates a walker's row in a payout sheet and computes the payout breakdown.
# ==============================================================================

import re
import enum
import logging
from dataclasses import dataclass, field

from .schema import (COLUMN_MAPPINGS, EARNING_FIELDS, DEDUCTION_FIELDS, PAYOUT_FIELDS,
                     IDENTIFIER_KEYWORDS, NUMERIC_STRIP_PATTERN, WIRE_NAMES)

_STRIP_RE = re.compile(NUMERIC_STRIP_PATTERN)
# Longest leading decimal number, the way a loose float parser reads it
_LEADING_FLOAT_RE = re.compile(r'[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?')


class LookupFailure(enum.Enum):
    """Reportable reasons a payout lookup did not produce a record."""
    EMPTY_SHEET = 'No data found in sheet'
    IDENTIFIER_COLUMN_MISSING = 'FEID column not found in sheet'
    IDENTIFIER_NOT_FOUND = 'FEID not found'
    DUPLICATE_IDENTIFIER = 'FEID appears in more than one row'

    @property
    def message(self):
        return self.value


@dataclass(frozen=True)
class PayoutRecord:
    """The resolved payout for one walker. Built fresh for every lookup."""
    feid: str
    base_payout: float = 0
    ot_payout: float = 0
    walker_order_fulfilment: float = 0
    on_time_login: float = 0
    best_ranked_station_reward: float = 0
    festive_incentives: float = 0
    cancellation_amount: float = 0
    walker_late_login: float = 0
    total_payout: float = 0
    warnings: tuple = field(default=(), compare=False)

    @property
    def total_earnings(self):
        return sum(getattr(self, name) for name in EARNING_FIELDS)

    @property
    def total_deductions(self):
        return sum(getattr(self, name) for name in DEDUCTION_FIELDS)

    def to_dict(self):
        """JSON body for the payout endpoints."""
        data = {'feid': self.feid}
        for name in PAYOUT_FIELDS + ('total_payout',):
            data[WIRE_NAMES[name]] = _json_number(getattr(self, name))
        if self.warnings:
            data['warnings'] = list(self.warnings)
        return data


def _json_number(value):
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def _clean_cell_text(value):
    return _STRIP_RE.sub('', str(value).strip())


def _is_blank(value):
    return value is None or value == ''


def parse_numeric_cell(value):
    """
    Converts a raw sheet cell into a number.

    Currency symbols, thousands separators and whitespace are removed and the
    leading numeric part is parsed ("₹1,234.50" -> 1234.5, "12 days" -> 12).
    Empty or non-numeric cells become 0; this never raises.
    """
    if _is_blank(value):
        return 0
    match = _LEADING_FLOAT_RE.match(_clean_cell_text(value))
    if not match:
        return 0
    return float(match.group(0))


def is_clean_numeric_cell(value):
    """True when the whole cell is a number once currency symbols and separators are removed."""
    if _is_blank(value):
        return True
    text = _clean_cell_text(value)
    if text == '':
        return True
    return _LEADING_FLOAT_RE.fullmatch(text) is not None


def _cell_text(value):
    return '' if value is None else str(value)


def find_identifier_column(headers):
    """Index of the leftmost header containing 'feid' or 'fe id' (any case), or None."""
    for index, header in enumerate(headers):
        text = _cell_text(header).strip().lower()
        if any(keyword in text for keyword in IDENTIFIER_KEYWORDS):
            return index
    return None


def find_matching_rows(data_rows, column_index, identifier):
    """Positions (0-based, within data_rows) of every row whose identifier cell equals identifier."""
    wanted = identifier.strip()
    matches = []
    for position, row in enumerate(data_rows):
        if column_index >= len(row):
            continue
        cell = row[column_index]
        if _is_blank(cell):
            continue
        if _cell_text(cell).strip() == wanted:
            matches.append(position)
    return matches


def map_row_data(headers, row, strict=False):
    """
    Maps a sheet row onto the canonical payout fields.

    Returns:
        tuple: (dict of field -> number, list of warning strings). Warnings are
        only collected when strict is set.
    """
    mapped = {name: 0 for name in PAYOUT_FIELDS}
    warnings = []
    for index, header in enumerate(headers):
        header_text = _cell_text(header).strip()
        field_name = COLUMN_MAPPINGS.get(header_text)
        if not field_name or index >= len(row):
            continue
        value = row[index]
        mapped[field_name] = parse_numeric_cell(value)
        if strict and not is_clean_numeric_cell(value):
            warnings.append(f"Column '{header_text}' has non-numeric value '{value}', read as {mapped[field_name]:g}")
    return mapped, warnings


def calculate_total_payout(mapped):
    """Earnings minus deductions. The sign of each field is fixed by the schema."""
    earnings = sum(mapped.get(name, 0) for name in EARNING_FIELDS)
    deductions = sum(mapped.get(name, 0) for name in DEDUCTION_FIELDS)
    return earnings - deductions


def resolve_payout(snapshot, identifier, settings=None):
    """
    Resolves the payout record for a walker from a sheet snapshot.

    Args:
        snapshot (list): Rows of cells; row 0 is the header row.
        identifier (str): The walker's FEID.
        settings (PayoutSettings): Optional parsing and duplicate policy.

    Returns:
        tuple: (PayoutRecord, None) on success, (None, LookupFailure) otherwise.

    Raises:
        ValueError: if identifier is empty or blank.
    """
    if not identifier or not str(identifier).strip():
        raise ValueError('identifier must be a non-empty string')
    identifier = str(identifier)

    strict = bool(settings and settings.strict_numeric_parsing)
    reject_duplicates = bool(settings and settings.reject_duplicate_feids)

    if snapshot is None or len(snapshot) < 2:
        return None, LookupFailure.EMPTY_SHEET

    headers = snapshot[0]
    data_rows = snapshot[1:]

    column_index = find_identifier_column(headers)
    if column_index is None:
        return None, LookupFailure.IDENTIFIER_COLUMN_MISSING

    matches = find_matching_rows(data_rows, column_index, identifier)
    if not matches:
        logging.info(f"FEID '{identifier.strip()}' not found among {len(data_rows)} rows.")
        return None, LookupFailure.IDENTIFIER_NOT_FOUND

    if len(matches) > 1:
        sheet_rows = [position + 2 for position in matches]
        if reject_duplicates:
            logging.warning(f"FEID '{identifier.strip()}' appears on sheet rows {sheet_rows}; rejecting lookup.")
            return None, LookupFailure.DUPLICATE_IDENTIFIER
        logging.warning(f"FEID '{identifier.strip()}' appears on sheet rows {sheet_rows}; using row {sheet_rows[0]}.")

    mapped, warnings = map_row_data(headers, data_rows[matches[0]], strict=strict)
    for warning in warnings:
        logging.warning(f"FEID '{identifier.strip()}': {warning}")

    return PayoutRecord(
        feid=identifier,
        total_payout=calculate_total_payout(mapped),
        warnings=tuple(warnings),
        **mapped
    ), None
