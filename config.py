# ==============================================================================
# config.py
# ------------------------------------------------------------------------------
# Configuration settings for the Walker Pay Hub Flask application.
# Uses environment variables for sensitive data to keep them out of version control.
# ==============================================================================

import os
from dotenv import load_dotenv

# Determine the absolute path of the project directory
basedir = os.path.abspath(os.path.dirname(__file__))

# Load environment variables from a .env file located in the project root
load_dotenv(os.path.join(basedir, '.env'))

class Config:
    """
    Base configuration class. Contains default settings that can be overridden
    by environment-specific configurations.
    """
    # --- Security ---
    # Session cookies for the admin API are signed with this key.
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-should-really-set-a-secret-key-in-your-env-file'

    # Password for the admin endpoints (snapshot uploads, feedback review, settings)
    ADMIN_PASSWORD = os.environ.get('ADMIN_PASSWORD') or 'change-this-default-password'

    # --- Database Configuration ---
    # SQLite in the 'instance' folder unless DATABASE_URL says otherwise.
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or \
        'sqlite:///' + os.path.join(basedir, 'instance/payhub.db')

    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # --- Payout Snapshot Uploads ---
    UPLOAD_FOLDER = os.path.join(basedir, 'instance/uploads')
    ALLOWED_EXTENSIONS = {'.xlsx'}
    MAX_CONTENT_LENGTH = 16 * 1024 * 1024

    # --- Google Sheets ---
    # Sheets are read through the public CSV export of the spreadsheet.
    SHEETS_EXPORT_BASE_URL = os.environ.get('SHEETS_EXPORT_BASE_URL') or \
        'https://docs.google.com/spreadsheets/d'
    SHEETS_TIMEOUT = float(os.environ.get('SHEETS_TIMEOUT') or 30)

    # --- Logging ---
    LOG_LEVEL = os.environ.get('LOG_LEVEL') or 'INFO'


class TestConfig(Config):
    """Configuration used by the test suite."""
    TESTING = True
    SECRET_KEY = 'test-secret-key'
    ADMIN_PASSWORD = 'test-admin-password'
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
