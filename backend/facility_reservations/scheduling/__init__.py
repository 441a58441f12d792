"""
Reservation scheduling core: conflict detection, the approval state machine,
calendar aggregation and role visibility. Everything here is synchronous and
works on domain models only.
"""
