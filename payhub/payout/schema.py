# ==============================================================================
# payhub/payout/schema.py
# ------------------------------------------------------------------------------
# Defines the expected structure of a payout sheet.
# This schema is the single source of truth for the resolver and the validator.
# ==============================================================================

from types import MappingProxyType

# Header label (exact, trimmed, case-sensitive) -> canonical payout field
COLUMN_MAPPINGS = MappingProxyType({
    'Base Pay': 'base_payout',
    'Morning OT Payout': 'ot_payout',
    'Walker Order Fulfilment': 'walker_order_fulfilment',
    'Normal OT Payout': 'on_time_login',
    'Best Ranked Station': 'best_ranked_station_reward',
    'Festival Incentives': 'festive_incentives',
    'Walker Cancellation': 'cancellation_amount',
    'SM Cancellation': 'walker_late_login',
})

# Fields summed into the total payout
EARNING_FIELDS = (
    'base_payout',
    'ot_payout',
    'walker_order_fulfilment',
    'on_time_login',
    'best_ranked_station_reward',
    'festive_incentives',
)

# Fields subtracted from the total payout
DEDUCTION_FIELDS = (
    'cancellation_amount',
    'walker_late_login',
)

PAYOUT_FIELDS = EARNING_FIELDS + DEDUCTION_FIELDS

# Canonical field -> key used in JSON responses
WIRE_NAMES = MappingProxyType({
    'base_payout': 'basePayout',
    'ot_payout': 'otPayout',
    'walker_order_fulfilment': 'walkerOrderFulfilment',
    'on_time_login': 'onTimeLogin',
    'best_ranked_station_reward': 'bestRankedStationReward',
    'festive_incentives': 'festiveIncentives',
    'cancellation_amount': 'cancellationAmount',
    'walker_late_login': 'walkerLateLogin',
    'total_payout': 'totalPayout',
})

# A header names the identifier column when its lower-cased text contains one of these
IDENTIFIER_KEYWORDS = ('feid', 'fe id')

# Characters removed from a cell before it is parsed as a number
NUMERIC_STRIP_PATTERN = r'[₹$,\s]'
