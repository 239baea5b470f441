# ==============================================================================
# payhub/payout/settings.py
# ------------------------------------------------------------------------------
# Business settings for payout lookups, read from the database per request and
# handed to the resolver explicitly.
# ==============================================================================

import logging
from dataclasses import dataclass

from payhub.models import AppSetting
from payhub.seed import DEFAULT_CONCERN_CATEGORIES

CYCLE_WINDOWS = ('recent', 'all')


@dataclass(frozen=True)
class PayoutSettings:
    strict_numeric_parsing: bool = False
    reject_duplicate_feids: bool = False
    concern_categories: tuple = tuple((c['id'], c['label']) for c in DEFAULT_CONCERN_CATEGORIES)
    default_cycle_window: str = 'recent'

    @property
    def concern_category_ids(self):
        return [category_id for category_id, _ in self.concern_categories]


def load_payout_settings():
    """Builds PayoutSettings from the AppSetting table, falling back to defaults."""
    settings = {}
    for setting in AppSetting.query.all():
        try:
            settings[setting.key] = setting.get_value()
        except (ValueError, TypeError) as e:
            logging.error(f"Ignoring unreadable setting {setting.key}={setting.value!r}: {e}")

    defaults = PayoutSettings()

    categories = defaults.concern_categories
    if settings.get('CONCERN_CATEGORIES'):
        try:
            categories = tuple((str(c['id']), str(c.get('label', c['id'])))
                               for c in settings['CONCERN_CATEGORIES'])
        except (KeyError, TypeError, AttributeError) as e:
            logging.error(f"CONCERN_CATEGORIES must be a list of {{id, label}} objects, using defaults: {e}")

    window = settings.get('DEFAULT_CYCLE_WINDOW', defaults.default_cycle_window)
    if window not in CYCLE_WINDOWS:
        logging.warning(f"Unknown DEFAULT_CYCLE_WINDOW '{window}', using '{defaults.default_cycle_window}'.")
        window = defaults.default_cycle_window

    return PayoutSettings(
        strict_numeric_parsing=bool(settings.get('STRICT_NUMERIC_PARSING', defaults.strict_numeric_parsing)),
        reject_duplicate_feids=bool(settings.get('REJECT_DUPLICATE_FEIDS', defaults.reject_duplicate_feids)),
        concern_categories=categories,
        default_cycle_window=window,
    )
