# ==============================================================================
# payhub/models.py
# ------------------------------------------------------------------------------
# Defines the database schema using SQLAlchemy ORM models.
# ==============================================================================

from datetime import datetime
from payhub import db
import json

# Accepted spellings for settings of type bool
TRUE_WORDS = ('1', 'true', 'yes', 'on')
FALSE_WORDS = ('0', 'false', 'no', 'off')

class PayoutSheet(db.Model):
    """
    An uploaded payout snapshot for one billing cycle.
    The newest upload for a cycle is the one walkers are resolved against.
    """
    __tablename__ = 'payout_sheet'
    id = db.Column(db.Integer, primary_key=True)
    filename = db.Column(db.String(128), nullable=False)
    cycle_id = db.Column(db.String(7), index=True, nullable=False)
    cycle_label = db.Column(db.String(64))
    upload_timestamp = db.Column(db.DateTime, index=True, default=datetime.utcnow)
    row_count = db.Column(db.Integer, default=0)

    # All rows of the sheet, header row first, as a JSON array of arrays
    rows_json = db.Column(db.Text, nullable=False)

    def __repr__(self):
        return f'<PayoutSheet {self.id}: {self.filename} ({self.cycle_id})>'

    @property
    def snapshot(self):
        return json.loads(self.rows_json)

    @classmethod
    def latest_for_cycle(cls, cycle_id):
        return cls.query.filter_by(cycle_id=cycle_id) \
            .order_by(cls.upload_timestamp.desc(), cls.id.desc()).first()

    def to_dict(self):
        return {
            'id': self.id,
            'filename': self.filename,
            'cycleId': self.cycle_id,
            'cycleLabel': self.cycle_label,
            'uploadTimestamp': self.upload_timestamp.isoformat() if self.upload_timestamp else None,
            'rowCount': self.row_count,
        }

class WalkerFeedback(db.Model):
    """
    A walker's response to a payout: confirmation, or a concern with details.
    """
    __tablename__ = 'walker_feedback'
    id = db.Column(db.Integer, primary_key=True)
    feid = db.Column(db.String(64), index=True, nullable=False)
    cycle_id = db.Column(db.String(7), index=True, nullable=False)
    satisfied = db.Column(db.Boolean, nullable=False)
    concern_categories_json = db.Column(db.Text, default='[]')
    description = db.Column(db.Text)
    total_payout = db.Column(db.Float)  # As shown to the walker when responding
    created_at = db.Column(db.DateTime, index=True, default=datetime.utcnow)

    def __repr__(self):
        return f'<WalkerFeedback {self.id}: {self.feid} {self.cycle_id}>'

    @property
    def concern_categories(self):
        return json.loads(self.concern_categories_json or '[]')

    @concern_categories.setter
    def concern_categories(self, categories):
        self.concern_categories_json = json.dumps(list(categories or []))

    def to_dict(self):
        return {
            'id': self.id,
            'feid': self.feid,
            'cycleId': self.cycle_id,
            'satisfied': self.satisfied,
            'concerns': self.concern_categories,
            'description': self.description,
            'totalPayout': self.total_payout,
            'createdAt': self.created_at.isoformat() if self.created_at else None,
        }

class AppSetting(db.Model):
    """
    Stores key-value pairs for the payout business rules, so they can be
    changed through the admin API without a redeploy.
    """
    __tablename__ = 'app_setting'
    id = db.Column(db.Integer, primary_key=True)
    key = db.Column(db.String(128), unique=True, nullable=False, index=True)
    value = db.Column(db.String(1024), nullable=False)
    description = db.Column(db.String(512)) # For hints in the admin API
    value_type = db.Column(db.String(32), default='string') # e.g., 'float', 'int', 'bool', 'string', 'json'

    def __repr__(self):
        return f'<AppSetting {self.key}: {self.value}>'

    def get_value(self):
        """Casts the string value to its correct Python type."""
        if self.value_type == 'float':
            return float(self.value)
        if self.value_type == 'int':
            return int(self.value)
        if self.value_type == 'bool':
            return self.value.strip().lower() in TRUE_WORDS
        if self.value_type == 'json':
            return json.loads(self.value)
        return self.value

    def to_dict(self):
        return {
            'id': self.id,
            'key': self.key,
            'value': self.value,
            'description': self.description,
            'valueType': self.value_type,
        }
