from django.contrib import admin
from .models import StudentGrade


@admin.register(StudentGrade)
class StudentGradeAdmin(admin.ModelAdmin):
    list_display = ['student', 'subject', 'classroom', 'score', 'type', 'date_recorded']
    list_filter = ['type', 'classroom__school', 'classroom', 'subject']
    search_fields = ['student__email', 'student__user_name', 'subject__name']
    readonly_fields = ['date_recorded']
