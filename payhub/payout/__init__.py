from payhub.payout.resolver import (LookupFailure, PayoutRecord, parse_numeric_cell,
                                    resolve_payout)
from payhub.payout.cycles import (BillingCycle, all_months_in_year, billing_cycle_for_date,
                                  generate_billing_cycle, generate_billing_cycles,
                                  parse_cycle_id, recent_months_window)
