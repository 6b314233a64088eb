from __future__ import annotations

from datetime import date, timedelta
from decimal import Decimal

import pytest

from opsdesk.attendance.model import AttendanceRecord
from opsdesk.core.enums import AttendanceStatus, RequestStatus
from opsdesk.core.exceptions import ValidationError
from opsdesk.leaves.model import LeaveRequest
from opsdesk.payroll.calculator.standard_calculator import StandardSalaryCalculator, calculate_salary

# September 2025: starts on a Monday, Sundays are 7, 14, 21, 28.
SEPT = "2025-09"
AFTER_SEPT = date(2025, 10, 15)


def month_of(overrides=None, *, start=date(2025, 9, 1), end=date(2025, 9, 30), default=AttendanceStatus.PRESENT):
    overrides = overrides or {}
    records = []
    d = start
    while d <= end:
        status = overrides.get(d.day, default)
        if status is not None:
            records.append(AttendanceRecord(user_id=2, work_date=d, status=status))
        d += timedelta(days=1)
    return records


def promise(day: int, status=RequestStatus.APPROVED, will_work_sunday=True):
    return LeaveRequest(
        request_id=day,
        user_id=2,
        leave_date=date(2025, 9, day),
        reason="family",
        status=status,
        will_work_sunday=will_work_sunday,
    )


def test_absences_and_paid_off_over_full_month():
    records = month_of({3: AttendanceStatus.ABSENT, 10: AttendanceStatus.ABSENT, 5: AttendanceStatus.PAID_OFF})

    result = calculate_salary(30000, 500, records, [], None, SEPT, today=AFTER_SEPT)

    assert result.working_days_count == 30
    assert result.present_count == 27
    assert result.absences_count == 2
    assert result.total_deduction == Decimal("1000")
    assert result.final_salary == Decimal("29000")
    assert result.paid_leaves_used == 1


def test_final_salary_is_clamped_at_zero():
    records = month_of({3: AttendanceStatus.ABSENT, 10: AttendanceStatus.ABSENT, 5: AttendanceStatus.PAID_OFF})

    result = calculate_salary(30000, 20000, records, [], None, SEPT, today=AFTER_SEPT)

    assert result.total_deduction == Decimal("40000")
    assert result.final_salary == Decimal("0")


def test_days_before_joining_are_outside_the_window():
    records = month_of(start=date(2025, 9, 15), end=date(2025, 9, 24))

    result = calculate_salary(30000, 500, records, [], date(2025, 9, 15), SEPT, today=date(2025, 9, 24))

    assert result.working_days_count == 10
    assert result.absences_count == 0
    assert result.period_start == date(2025, 9, 15)
    assert result.final_salary == Decimal("30000")


def test_joining_date_before_month_start_uses_month_start():
    result = calculate_salary(30000, 500, month_of(), [], "2025-06-02", SEPT, today=AFTER_SEPT)

    assert result.period_start == date(2025, 9, 1)
    assert result.working_days_count == 30


def test_future_days_are_not_counted():
    records = month_of(start=date(2025, 9, 1), end=date(2025, 9, 10))

    result = calculate_salary(30000, 500, records, [], None, SEPT, today=date(2025, 9, 10))

    assert result.working_days_count == 10
    assert result.absences_count == 0


def test_target_month_defaults_to_current_month():
    records = month_of(start=date(2025, 9, 1), end=date(2025, 9, 5))

    result = calculate_salary(30000, 500, records, today=date(2025, 9, 5))

    assert result.period_start == date(2025, 9, 1)
    assert result.period_end == date(2025, 9, 5)
    assert result.absences_count == 0


def test_missing_records_count_as_absences_including_sundays():
    # Sunday the 7th has no record: Sundays are ordinary work days.
    records = month_of({7: None, 12: None})

    result = calculate_salary(30000, 500, records, [], None, SEPT, today=AFTER_SEPT)

    assert result.absences_count == 2


def test_half_day_and_holiday_are_full_absences():
    records = month_of({2: AttendanceStatus.HALF_DAY, 4: AttendanceStatus.HOLIDAY})

    result = calculate_salary(30000, 500, records, [], None, SEPT, today=AFTER_SEPT)

    assert result.absences_count == 2
    assert result.total_deduction == Decimal("1000")


def test_off_status_is_not_an_absence():
    records = month_of({7: AttendanceStatus.OFF, 14: AttendanceStatus.OFF})

    result = calculate_salary(30000, 500, records, [], None, SEPT, today=AFTER_SEPT)

    assert result.absences_count == 0


def test_broken_sunday_promise_costs_two_more_absences_than_kept_one():
    # Leave on Wednesday the 10th, promised Sunday is the 14th.
    kept = month_of({10: AttendanceStatus.OFF, 14: AttendanceStatus.PRESENT})
    broken = month_of({10: AttendanceStatus.OFF, 14: None})

    kept_result = calculate_salary(30000, 500, kept, [promise(10)], None, SEPT, today=AFTER_SEPT)
    broken_result = calculate_salary(30000, 500, broken, [promise(10)], None, SEPT, today=AFTER_SEPT)

    assert kept_result.absences_count == 0
    assert broken_result.absences_count == 2
    assert broken_result.final_salary == Decimal("29000")


def test_broken_sunday_promise_counts_each_matched_leave():
    records = month_of({10: AttendanceStatus.OFF, 11: AttendanceStatus.OFF, 14: AttendanceStatus.ABSENT})

    result = calculate_salary(30000, 500, records, [promise(10), promise(11)], None, SEPT, today=AFTER_SEPT)

    assert result.absences_count == 3


def test_pending_or_unpromised_leave_does_not_compound():
    records = month_of({10: AttendanceStatus.OFF, 14: AttendanceStatus.ABSENT})
    leaves = [promise(10, status=RequestStatus.PENDING), promise(9, will_work_sunday=False)]

    result = calculate_salary(30000, 500, records, leaves, None, SEPT, today=AFTER_SEPT)

    assert result.absences_count == 1


def test_promise_only_matches_the_immediately_following_sunday():
    # Leave on the 10th promises the 14th, not the 21st.
    records = month_of({10: AttendanceStatus.OFF, 14: AttendanceStatus.PRESENT, 21: AttendanceStatus.ABSENT})

    result = calculate_salary(30000, 500, records, [promise(10)], None, SEPT, today=AFTER_SEPT)

    assert result.absences_count == 1


def test_leave_taken_on_a_sunday_promises_the_next_sunday():
    records = month_of({7: AttendanceStatus.OFF, 14: AttendanceStatus.ABSENT})

    result = calculate_salary(30000, 500, records, [promise(7)], None, SEPT, today=AFTER_SEPT)

    assert result.absences_count == 2


def test_same_inputs_give_same_result():
    records = month_of({3: AttendanceStatus.ABSENT, 14: None})
    calc = StandardSalaryCalculator()

    first = calc.calculate(30000, 500, records, [promise(10)], None, SEPT, today=AFTER_SEPT)
    second = calc.calculate(30000, 500, records, [promise(10)], None, SEPT, today=AFTER_SEPT)

    assert first == second


def test_extra_absence_never_raises_salary():
    before = calculate_salary(30000, 500, month_of({3: AttendanceStatus.ABSENT}), [], None, SEPT, today=AFTER_SEPT)
    after = calculate_salary(
        30000, 500, month_of({3: AttendanceStatus.ABSENT, 4: AttendanceStatus.ABSENT}), [], None, SEPT, today=AFTER_SEPT
    )

    assert after.absences_count == before.absences_count + 1
    assert after.final_salary < before.final_salary


def test_zero_salary_and_zero_deduction_are_valid():
    records = month_of({3: AttendanceStatus.ABSENT})

    assert calculate_salary(0, 500, records, [], None, SEPT, today=AFTER_SEPT).final_salary == Decimal("0")
    assert calculate_salary(30000, 0, records, [], None, SEPT, today=AFTER_SEPT).final_salary == Decimal("30000")


def test_joining_after_today_gives_empty_window():
    result = calculate_salary(30000, 500, [], [], date(2025, 9, 20), SEPT, today=date(2025, 9, 10))

    assert result.working_days_count == 0
    assert result.absences_count == 0
    assert result.final_salary == Decimal("30000")


def test_decimal_strings_are_accepted_for_money():
    result = calculate_salary("30000.50", "250.25", month_of({3: AttendanceStatus.ABSENT}), [], None, SEPT, today=AFTER_SEPT)

    assert result.final_salary == Decimal("29750.25")


@pytest.mark.parametrize(
    "kwargs",
    [
        {"base_salary": -1},
        {"deduction_amount": -5},
        {"base_salary": "abc"},
        {"joining_date": "2025-13-01"},
        {"target_month": "September"},
    ],
)
def test_invalid_inputs_are_rejected(kwargs):
    args = {
        "base_salary": 30000,
        "deduction_amount": 500,
        "attendance_records": [],
        "leave_requests": [],
        "joining_date": None,
        "target_month": SEPT,
    }
    args.update(kwargs)

    with pytest.raises(ValidationError):
        calculate_salary(**args, today=AFTER_SEPT)


def test_unparseable_record_date_is_rejected():
    records = [AttendanceRecord(user_id=2, work_date="2025-09-31", status=AttendanceStatus.PRESENT)]

    with pytest.raises(ValidationError):
        calculate_salary(30000, 500, records, [], None, SEPT, today=AFTER_SEPT)


def test_duplicate_day_is_rejected():
    records = [
        AttendanceRecord(user_id=2, work_date=date(2025, 9, 3), status=AttendanceStatus.PRESENT),
        AttendanceRecord(user_id=2, work_date=date(2025, 9, 3), status=AttendanceStatus.ABSENT),
    ]

    with pytest.raises(ValidationError):
        calculate_salary(30000, 500, records, [], None, SEPT, today=AFTER_SEPT)


def test_unknown_status_is_rejected():
    records = [AttendanceRecord(user_id=2, work_date=date(2025, 9, 3), status="Sick")]

    with pytest.raises(ValidationError):
        calculate_salary(30000, 500, records, [], None, SEPT, today=AFTER_SEPT)
