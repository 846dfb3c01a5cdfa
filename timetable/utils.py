"""
Utility functions for the weekly schedule
"""

DAYS_OF_WEEK = ['Monday', 'Tuesday', 'Wednesday', 'Thursday', 'Friday', 'Saturday', 'Sunday']


def intervals_overlap(start_a, end_a, start_b, end_b):
    """
    Half-open interval overlap on "HH:MM" strings.
    Touching slots (one ends when the next starts) do not overlap.
    """
    return start_a < end_b and end_a > start_b


def weekly_order(schedule):
    """Sort key: Monday first, then by start time"""
    return (DAYS_OF_WEEK.index(schedule.day), schedule.start_time)


def sort_weekly(schedules):
    return sorted(schedules, key=weekly_order)
