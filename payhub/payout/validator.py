# ==============================================================================
# payhub/payout/validator.py
# ------------------------------------------------------------------------------
# Handles the validation of an uploaded payout sheet before it is stored.
# ==============================================================================

import logging
from collections import defaultdict

import pandas as pd

from .schema import COLUMN_MAPPINGS
from .resolver import find_identifier_column, is_clean_numeric_cell, parse_numeric_cell

def dataframe_to_snapshot(df):
    """Turns a header-less DataFrame into rows of plain Python values, empty cells as None."""
    df = df.astype(object)
    df = df.where(pd.notna(df), None)
    return df.values.tolist()

def validate_payout_file(filepath, settings=None):
    """
    Validates the structure and numeric cells of an uploaded payout sheet.

    Args:
        filepath (str): The path to the uploaded .xlsx file.
        settings (PayoutSettings): Decides whether malformed numbers and
            duplicate FEIDs are errors or only logged.

    Returns:
        tuple: A tuple containing:
            - list: The sheet as a snapshot (header row first) if validation is successful.
            - list: A list of human-readable error messages if validation fails.
    """
    strict = bool(settings and settings.strict_numeric_parsing)
    reject_duplicates = bool(settings and settings.reject_duplicate_feids)
    errors = []

    try:
        df = pd.read_excel(filepath, sheet_name=0, header=None, dtype=object)
    except Exception as e:
        errors.append(f"The Excel file is invalid or cannot be read. Technical error: {e}")
        return None, errors

    snapshot = dataframe_to_snapshot(df)

    # 1. A header row and at least one walker row
    if len(snapshot) < 2:
        errors.append("No data found in sheet: a header row and at least one walker row are required.")
        return None, errors

    headers = snapshot[0]
    data_rows = snapshot[1:]

    # 2. The FEID column
    id_column = find_identifier_column(headers)
    if id_column is None:
        errors.append("FEID column not found in sheet: one header must contain 'FEID' or 'FE ID'.")

    # 3. At least one recognised payout column
    mapped_columns = {}
    for index, header in enumerate(headers):
        header_text = '' if header is None else str(header).strip()
        if header_text in COLUMN_MAPPINGS:
            mapped_columns[index] = header_text
    if not mapped_columns:
        errors.append(f"None of the payout columns were found. Expected any of: {', '.join(COLUMN_MAPPINGS)}")

    if errors:
        return None, errors

    # 4. Numeric cells in payout columns
    for position, row in enumerate(data_rows):
        excel_row = position + 2
        for index, header_text in mapped_columns.items():
            if index >= len(row) or is_clean_numeric_cell(row[index]):
                continue
            message = (f"Row {excel_row}: value '{row[index]}' in column '{header_text}' "
                       f"is not a number and will be read as {parse_numeric_cell(row[index]):g}.")
            if strict:
                errors.append(message)
            else:
                logging.warning(message)

    # 5. Duplicate FEIDs
    seen = defaultdict(list)
    for position, row in enumerate(data_rows):
        if id_column < len(row) and row[id_column] not in (None, ''):
            seen[str(row[id_column]).strip()].append(position + 2)
    for feid, rows in seen.items():
        if len(rows) > 1:
            message = f"FEID '{feid}' appears on rows {', '.join(map(str, rows))}."
            if reject_duplicates:
                errors.append(message)
            else:
                logging.warning(message + " Lookups will use the first row.")

    if errors:
        return None, errors

    logging.info(f"Payout sheet '{filepath}' validated: {len(data_rows)} rows, "
                 f"{len(mapped_columns)} payout columns.")
    return snapshot, []
