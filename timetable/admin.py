from django.contrib import admin
from .models import Schedule


@admin.register(Schedule)
class ScheduleAdmin(admin.ModelAdmin):
    list_display = [
        'classroom',
        'subject',
        'day',
        'start_time',
        'end_time'
    ]
    list_filter = ['day', 'classroom__school', 'classroom']
    search_fields = ['classroom__name', 'subject__name']
    ordering = ['classroom', 'day', 'start_time']
