from django.urls import path

from timetable import views

urlpatterns = [
    path('schedules', views.ScheduleListView.as_view(), name='schedules'),
    path('schedules/<int:schedule_id>', views.ScheduleDetailView.as_view(), name='schedule-detail'),
]
