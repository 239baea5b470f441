import json
from payhub import db
from payhub.models import AppSetting

DEFAULT_CONCERN_CATEGORIES = [
    {'id': 'login-hours', 'label': 'Login Hours'},
    {'id': 'order-count', 'label': 'Order Count'},
    {'id': 'rewards', 'label': 'Rewards'},
    {'id': 'deductions', 'label': 'Deductions'},
    {'id': 'ot-payout', 'label': 'OT Payout'},
    {'id': 'base-payout', 'label': 'Base Payout'},
]

DEFAULT_SETTINGS = {
    # key: [value, description, value_type]
    'STRICT_NUMERIC_PARSING': ['false', 'Report non-numeric payout cells as warnings instead of silently reading them as 0', 'bool'],
    'REJECT_DUPLICATE_FEIDS': ['false', 'Fail lookups (and uploads) when an FEID appears on more than one row', 'bool'],
    'CONCERN_CATEGORIES': [json.dumps(DEFAULT_CONCERN_CATEGORIES), 'Concern categories a walker can pick (JSON list of {id, label})', 'json'],
    'DEFAULT_CYCLE_WINDOW': ['recent', "Billing cycles offered when none is requested: 'recent' (Aug..Apr) or 'all'", 'string'],
}

def seed_data():
    """Populates the database with default settings."""
    for key, data in DEFAULT_SETTINGS.items():
        setting = AppSetting.query.filter_by(key=key).first()
        if not setting: # Only add if it doesn't exist
            setting = AppSetting(key=key, value=data[0], description=data[1], value_type=data[2])
            db.session.add(setting)
            print(f'Seeding setting: {key}')

    db.session.commit()
    print('Seeding complete.')
