from django.urls import path

from grades import views

urlpatterns = [
    path('grades', views.GradeListView.as_view(), name='grades'),
    path('grades/<int:grade_id>', views.GradeDetailView.as_view(), name='grade-detail'),
    path('grades/top-students', views.TopStudentsView.as_view(), name='top-students'),
]
