from enum import Enum


class ReservationStatus(str, Enum):
    """Lifecycle state shared by equipment bookings and lessons"""
    PENDING = "PENDING"          # Submitted by customer, awaiting admin
    CONFIRMED = "CONFIRMED"      # Accepted by admin
    CANCELLED = "CANCELLED"      # Terminal
    COMPLETED = "COMPLETED"      # Terminal, counts as revenue


# Statuses counted as revenue in reports and the dashboard
REVENUE_STATUSES = (ReservationStatus.CONFIRMED, ReservationStatus.COMPLETED)

# Statuses counted as active rentals on the dashboard
ACTIVE_STATUSES = (ReservationStatus.PENDING, ReservationStatus.CONFIRMED)
