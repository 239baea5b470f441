# ==============================================================================
# payhub/sheets.py
# ------------------------------------------------------------------------------
# Reads a Google Sheets tab as a snapshot (list of rows) through the CSV export.
# ==============================================================================

import io
import re
import logging
from urllib.parse import urlparse, parse_qs

import pandas as pd
import requests

from payhub.payout.validator import dataframe_to_snapshot


class SheetFetchError(Exception):
    """Raised when a sheet cannot be downloaded or parsed."""


def extract_spreadsheet_id(url_or_id):
    """Spreadsheet ID from a bare ID or a Google Sheets URL; None if there is none."""
    if not url_or_id:
        return None
    url_or_id = url_or_id.strip()

    if re.fullmatch(r"[A-Za-z0-9_-]{20,}", url_or_id):
        return url_or_id

    path_parts = [p for p in urlparse(url_or_id).path.split('/') if p]
    if 'spreadsheets' in path_parts and 'd' in path_parts:
        idx = path_parts.index('d')
        if idx + 1 < len(path_parts):
            return path_parts[idx + 1]
    return None


def extract_gid(url):
    """The gid (sheet tab id) from a Google Sheets URL query or fragment, or None."""
    parsed = urlparse(url or '')
    query_gid = parse_qs(parsed.query).get('gid', [None])[0]
    frag_match = re.search(r"gid=(\d+)", parsed.fragment or '')
    return query_gid or (frag_match.group(1) if frag_match else None)


class SheetsClient:
    """Downloads sheet tabs from Google Sheets."""

    def __init__(self, export_base_url, timeout=30):
        self.export_base_url = export_base_url.rstrip('/')
        self.timeout = timeout

    @classmethod
    def from_config(cls, config):
        return cls(config['SHEETS_EXPORT_BASE_URL'], timeout=config.get('SHEETS_TIMEOUT', 30))

    def build_export_url(self, spreadsheet_id, sheet_id=0):
        return f"{self.export_base_url}/{spreadsheet_id}/export?format=csv&gid={sheet_id}"

    def fetch_snapshot(self, spreadsheet_id, sheet_id=0):
        """
        Downloads one tab and returns its rows, header row first. Every cell is
        text; empty cells are None.

        Raises:
            SheetFetchError: on a bad spreadsheet ID, HTTP/network failure, or unparseable CSV.
        """
        resolved_id = extract_spreadsheet_id(spreadsheet_id)
        if not resolved_id:
            raise SheetFetchError(f"Invalid spreadsheet ID or URL: '{spreadsheet_id}'")
        if sheet_id in (None, '') and spreadsheet_id != resolved_id:
            sheet_id = extract_gid(spreadsheet_id)
        sheet_id = sheet_id or 0

        url = self.build_export_url(resolved_id, sheet_id)
        logging.info(f"Fetching sheet {resolved_id} (gid={sheet_id})")
        try:
            resp = requests.get(url, timeout=self.timeout)
            resp.raise_for_status()
        except requests.RequestException as e:
            raise SheetFetchError(f"Could not download sheet {resolved_id}: {e}") from e

        content_type = resp.headers.get('Content-Type', '')
        if 'html' in content_type:
            # Google serves its sign-in page when a sheet is not shared publicly
            raise SheetFetchError(f"Sheet {resolved_id} is not publicly readable")

        try:
            df = pd.read_csv(io.StringIO(resp.content.decode('utf-8-sig')), header=None,
                             dtype=str, keep_default_na=False)
        except pd.errors.EmptyDataError:
            return []
        except (pd.errors.ParserError, UnicodeDecodeError) as e:
            raise SheetFetchError(f"Sheet {resolved_id} returned unreadable CSV: {e}") from e

        snapshot = dataframe_to_snapshot(df.mask(df == ''))
        logging.info(f"Fetched {len(snapshot)} rows from sheet {resolved_id}")
        return snapshot
