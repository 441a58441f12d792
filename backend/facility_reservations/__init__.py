"""Campus facility reservations: conflict detection, approvals and calendar views."""

__version__ = "1.0.0"
