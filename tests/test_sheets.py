# tests/test_sheets.py

import pytest
import requests

from payhub import sheets
from payhub.sheets import SheetFetchError, SheetsClient, extract_gid, extract_spreadsheet_id

SPREADSHEET_ID = '1an9G3ryAuy8tEEyPW4j-7Hfhs7kTtYzvOyvEzwLgXzs'

class FakeResponse:
    def __init__(self, text='', status_code=200, content_type='text/csv; charset=utf-8'):
        self.content = text.encode('utf-8')
        self.status_code = status_code
        self.headers = {'Content-Type': content_type}

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f'{self.status_code} Client Error')

@pytest.fixture
def fake_get(monkeypatch):
    calls = []

    def install(response):
        def _get(url, timeout=None):
            calls.append((url, timeout))
            if isinstance(response, Exception):
                raise response
            return response
        monkeypatch.setattr(sheets.requests, 'get', _get)
        return calls
    return install

def test_extract_spreadsheet_id():
    assert extract_spreadsheet_id(SPREADSHEET_ID) == SPREADSHEET_ID
    url = f'https://docs.google.com/spreadsheets/d/{SPREADSHEET_ID}/edit?gid=42#gid=42'
    assert extract_spreadsheet_id(url) == SPREADSHEET_ID
    assert extract_spreadsheet_id('not a sheet') is None
    assert extract_spreadsheet_id('') is None

def test_extract_gid():
    assert extract_gid(f'https://docs.google.com/spreadsheets/d/{SPREADSHEET_ID}/edit#gid=7') == '7'
    assert extract_gid(f'https://docs.google.com/spreadsheets/d/{SPREADSHEET_ID}/edit?gid=3') == '3'
    assert extract_gid(SPREADSHEET_ID) is None

def test_fetch_snapshot_parses_csv(fake_get):
    calls = fake_get(FakeResponse('FEID,Base Pay,Walker Cancellation\nFE94469,"1,000",\n'))
    client = SheetsClient('https://sheets.example/d/', timeout=5)

    snapshot = client.fetch_snapshot(SPREADSHEET_ID, 2)

    assert snapshot == [['FEID', 'Base Pay', 'Walker Cancellation'], ['FE94469', '1,000', None]]
    assert calls == [(f'https://sheets.example/d/{SPREADSHEET_ID}/export?format=csv&gid=2', 5)]

def test_fetch_snapshot_keeps_identifiers_as_text(fake_get):
    fake_get(FakeResponse('FEID,Base Pay\n00123,500\n'))
    snapshot = SheetsClient('https://sheets.example/d').fetch_snapshot(SPREADSHEET_ID)
    assert snapshot[1] == ['00123', '500']

def test_fetch_snapshot_uses_gid_from_url(fake_get):
    calls = fake_get(FakeResponse('FEID\nFE1\n'))
    url = f'https://docs.google.com/spreadsheets/d/{SPREADSHEET_ID}/edit#gid=99'
    SheetsClient('https://sheets.example/d').fetch_snapshot(url, None)
    assert calls[0][0].endswith('gid=99')

def test_empty_sheet_gives_empty_snapshot(fake_get):
    fake_get(FakeResponse(''))
    assert SheetsClient('https://sheets.example/d').fetch_snapshot(SPREADSHEET_ID) == []

def test_http_error_raises_fetch_error(fake_get):
    fake_get(FakeResponse('nope', status_code=404))
    with pytest.raises(SheetFetchError):
        SheetsClient('https://sheets.example/d').fetch_snapshot(SPREADSHEET_ID)

def test_network_error_raises_fetch_error(fake_get):
    fake_get(requests.ConnectionError('connection refused'))
    with pytest.raises(SheetFetchError, match='connection refused'):
        SheetsClient('https://sheets.example/d').fetch_snapshot(SPREADSHEET_ID)

def test_sign_in_page_raises_fetch_error(fake_get):
    fake_get(FakeResponse('<html>Sign in</html>', content_type='text/html; charset=utf-8'))
    with pytest.raises(SheetFetchError, match='not publicly readable'):
        SheetsClient('https://sheets.example/d').fetch_snapshot(SPREADSHEET_ID)

def test_invalid_spreadsheet_id_is_rejected_before_any_request(fake_get):
    calls = fake_get(FakeResponse('FEID\n'))
    with pytest.raises(SheetFetchError):
        SheetsClient('https://sheets.example/d').fetch_snapshot('bad id')
    assert calls == []
