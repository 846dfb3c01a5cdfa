from django.urls import path

from core import views

urlpatterns = [
    # Auth
    path('auth/signup', views.SignupView.as_view(), name='signup'),
    path('auth/admins', views.CreateAdminView.as_view(), name='create-admin'),
    path('auth/login', views.LoginView.as_view(), name='login'),
    path('auth/refresh', views.RefreshTokenView.as_view(), name='refresh-token'),
    path('auth/logout', views.LogoutView.as_view(), name='logout'),
    path('auth/me', views.MeView.as_view(), name='me'),

    # Schools
    path('schools', views.SchoolListView.as_view(), name='schools'),
    path('schools/mine', views.MySchoolView.as_view(), name='my-school'),
    path('schools/mine/stats', views.DashboardStatsView.as_view(), name='dashboard-stats'),

    # Users
    path('users', views.UserListView.as_view(), name='users'),
    path('users/<int:user_id>', views.UserDetailView.as_view(), name='user-detail'),

    # Classrooms
    path('classrooms', views.ClassRoomListView.as_view(), name='classrooms'),
    path('classrooms/<int:classroom_id>', views.ClassRoomDetailView.as_view(), name='classroom-detail'),

    # Subjects, assignments, enrollment
    path('subjects', views.SubjectListView.as_view(), name='subjects'),
    path('subjects/<int:subject_id>', views.SubjectDetailView.as_view(), name='subject-detail'),
    path('class-subjects', views.ClassSubjectListView.as_view(), name='class-subjects'),
    path('class-subjects/<int:assignment_id>', views.ClassSubjectDetailView.as_view(), name='class-subject-detail'),
    path('enrollments', views.EnrollmentListView.as_view(), name='enrollments'),
]
