# tests/conftest.py

import pytest

@pytest.fixture
def app_with_db(tmp_path):
    """
    Creates a new app instance for each test with an in-memory database,
    and yields the app within an application context.
    """
    from config import TestConfig
    from payhub import create_app, db

    app = create_app(TestConfig)
    app.config['UPLOAD_FOLDER'] = str(tmp_path / 'uploads')

    with app.app_context():
        db.create_all()
        yield app  # The tests will run here
        db.session.remove()
        db.drop_all()

@pytest.fixture
def seeded_app(app_with_db):
    """The app with the default settings rows in place."""
    from payhub.seed import seed_data
    seed_data()
    return app_with_db

@pytest.fixture
def client(app_with_db):
    return app_with_db.test_client()

@pytest.fixture
def admin_client(app_with_db):
    """A test client already logged in to the admin API."""
    client = app_with_db.test_client()
    response = client.post('/admin/login', json={'password': app_with_db.config['ADMIN_PASSWORD']})
    assert response.status_code == 200
    return client

@pytest.fixture
def payout_snapshot():
    """A small payout sheet as it comes out of Google Sheets."""
    return [
        ['S.No', 'FEID', 'Walker Name', 'Base Pay', 'Morning OT Payout', 'Walker Order Fulfilment',
         'Normal OT Payout', 'Best Ranked Station', 'Festival Incentives', 'Walker Cancellation',
         'SM Cancellation'],
        ['1', 'FE001', 'Rajesh Kumar', '₹18,400', '2400', '4,900', '1000', '500', '750', '150', '300'],
        ['2', 'FE002', 'Priya Sharma', '15000', '', '3200', '800', None, '0', '$100', 'n/a'],
        ['3', 'FE94469', 'Arjun Singh', '1000', '0', '0', '0', '0', '0', '50', '0'],
    ]
