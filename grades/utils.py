"""
Grade statistics
"""
from django.db.models import Avg

PASS_MARK = 50


def average_score(grades):
    """Mean score of a grade queryset, 0 when there are no grades"""
    result = grades.aggregate(avg=Avg('score'))['avg']
    return float(result) if result is not None else 0.0


def success_rate(grades):
    """Percentage of grades at or above the pass mark, 0 when there are no grades"""
    total = grades.count()
    if total == 0:
        return 0.0
    passed = grades.filter(score__gte=PASS_MARK).count()
    return passed / total * 100
