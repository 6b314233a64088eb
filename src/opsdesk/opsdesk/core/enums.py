from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User roles used for permission checks."""

    ADMIN = "Admin"
    EMPLOYEE = "Employee"
    FREELANCER = "Freelancer"


class AttendanceStatus(str, Enum):
    """Attendance status as stored in the database."""

    PRESENT = "Present"
    ABSENT = "Absent"
    HALF_DAY = "Half Day"
    PAID_OFF = "Paid Off"
    OFF = "Off"
    HOLIDAY = "Holiday"


class RequestStatus(str, Enum):
    """Approval workflow state of a leave request."""

    PENDING = "Pending"
    APPROVED = "Approved"
    REJECTED = "Rejected"


class TaskStatus(str, Enum):
    PENDING = "Pending"
    REVIEW = "Review"
    REVISION = "Revision"
    COMPLETED = "Completed"


class TransactionType(str, Enum):
    CREDIT = "credit"
    DEBIT = "debit"
