from django.urls import path

from exams import views

urlpatterns = [
    path('exams', views.ExamListView.as_view(), name='exams'),
    path('exams/<int:exam_id>', views.ExamDetailView.as_view(), name='exam-detail'),
    path('exams/<int:exam_id>/submissions', views.ExamSubmissionListView.as_view(), name='exam-submissions'),
]
