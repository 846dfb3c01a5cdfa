"""
Admin interface for the Exam System
"""
from django.contrib import admin
from exams.models import Exam, Question, ExamSubmission


class QuestionInline(admin.TabularInline):
    model = Question
    extra = 0
    fields = ['order', 'question_text', 'options', 'correct_answer_index', 'points']


@admin.register(Exam)
class ExamAdmin(admin.ModelAdmin):
    """Admin interface for Exam"""

    list_display = [
        'id',
        'title',
        'type',
        'subject',
        'classroom',
        'teacher',
        'duration_in_minutes',
        'submission_count',
        'created_at',
    ]
    list_filter = ['type', 'classroom__school', 'classroom', 'subject']
    search_fields = ['title', 'description', 'subject__name', 'teacher__email']
    readonly_fields = ['created_at']
    inlines = [QuestionInline]

    def submission_count(self, obj):
        return obj.submissions.count()
    submission_count.short_description = 'Submissions'


@admin.register(ExamSubmission)
class ExamSubmissionAdmin(admin.ModelAdmin):
    """Admin interface for ExamSubmission"""

    list_display = ['id', 'exam', 'student', 'total_score', 'submitted_at']
    list_filter = ['exam__type', 'exam__classroom']
    search_fields = ['exam__title', 'student__email', 'student__user_name']
    readonly_fields = ['answers', 'total_score', 'submitted_at']
