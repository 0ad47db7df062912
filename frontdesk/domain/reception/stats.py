"""Reception dashboard statistics: hourly turnout today and the 7-day attendance rate"""

import logging
from collections import Counter
from datetime import date, timedelta

from sqlalchemy.orm import Session

from ...config import RECEPTION_FIRST_HOUR, RECEPTION_LAST_HOUR
from ...models import Attendance
from ...shared.validators import hour_label
from .repository import ReceptionRepository
from .schemas import AttendanceSummary, DailyAttendance, HourlyAttendance

logger = logging.getLogger(__name__)


def attendance_rate(attended: int, total: int) -> int:
    """Rounded percent; 0 when nothing was scheduled"""
    if total <= 0:
        return 0
    return int(attended * 100 / total + 0.5)


def build_hourly(
    appointments,
    first_hour: int = RECEPTION_FIRST_HOUR,
    last_hour: int = RECEPTION_LAST_HOUR,
) -> list[HourlyAttendance]:
    """Appointments outside the reception window are left out"""
    scheduled, attended, no_show = Counter(), Counter(), Counter()
    for appointment in appointments:
        hour = hour_label(appointment.scheduled_time)
        scheduled[hour] += 1
        if appointment.attendance == Attendance.ATTENDED:
            attended[hour] += 1
        elif appointment.attendance == Attendance.NO_SHOW:
            no_show[hour] += 1

    rows = []
    for h in range(first_hour, last_hour + 1):
        hour = f"{h:02d}:00"
        rows.append(
            HourlyAttendance(
                hour=hour,
                scheduled=scheduled[hour],
                attended=attended[hour],
                no_show=no_show[hour],
            )
        )
    return rows


def build_daily(appointments, end_day: date, days: int = 7) -> list[DailyAttendance]:
    scheduled, attended = Counter(), Counter()
    for appointment in appointments:
        scheduled[appointment.scheduled_date] += 1
        if appointment.attendance == Attendance.ATTENDED:
            attended[appointment.scheduled_date] += 1

    rows = []
    for offset in range(days - 1, -1, -1):
        day = end_day - timedelta(days=offset)
        rows.append(
            DailyAttendance(
                date=day.isoformat(),
                scheduled=scheduled[day],
                attended=attended[day],
                rate=attendance_rate(attended[day], scheduled[day]),
            )
        )
    return rows


def hourly_attendance(db: Session, day: date) -> list[HourlyAttendance]:
    appointments = ReceptionRepository.get_between(db, day, day)
    return build_hourly(appointments)


def daily_attendance(db: Session, end_day: date, days: int = 7) -> list[DailyAttendance]:
    start = end_day - timedelta(days=days - 1)
    appointments = ReceptionRepository.get_between(db, start, end_day)
    return build_daily(appointments, end_day, days)


def attendance_summary(db: Session, today: date) -> AttendanceSummary:
    """
    Today's totals plus the trailing week, from a single query.

    rate_trend is today's rate minus yesterday's, in percentage points.
    """
    appointments = ReceptionRepository.get_between(db, today - timedelta(days=6), today)
    todays = [a for a in appointments if a.scheduled_date == today]

    hourly = build_hourly(todays)
    daily = build_daily(appointments, today)

    # Totals span the whole day, not just the reception window
    today_total = len(todays)
    today_attended = sum(1 for a in todays if a.attendance == Attendance.ATTENDED)
    today_no_show = sum(1 for a in todays if a.attendance == Attendance.NO_SHOW)
    week_total = sum(d.scheduled for d in daily)
    week_attended = sum(d.attended for d in daily)

    summary = AttendanceSummary(
        today_total=today_total,
        today_attended=today_attended,
        today_no_show=today_no_show,
        today_pending=today_total - today_attended - today_no_show,
        today_rate=attendance_rate(today_attended, today_total),
        week_total=week_total,
        week_attended=week_attended,
        week_rate=attendance_rate(week_attended, week_total),
        rate_trend=daily[-1].rate - daily[-2].rate,
        hourly=hourly,
        daily=daily,
    )
    logger.debug(
        f"📊 Reception stats for {today}: {today_attended}/{today_total} today, "
        f"{week_attended}/{week_total} this week"
    )
    return summary
