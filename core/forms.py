"""
Boundary validation for core inputs (users, schools, classrooms, subjects)
"""
from django import forms

from core.exceptions import form_errors
from core.models import User


def validate(form_class, **data):
    """
    Bind ``data`` to ``form_class`` and return its cleaned data.
    Raises InputError with every field message when the form is invalid.
    """
    form = form_class(data=data)
    if not form.is_valid():
        raise form_errors(form)
    return form.cleaned_data


class SignupForm(forms.Form):
    email = forms.EmailField()
    password = forms.CharField(min_length=6)
    user_name = forms.CharField(min_length=2, max_length=256)


class LoginForm(forms.Form):
    email = forms.EmailField()
    password = forms.CharField()


class SchoolForm(forms.Form):
    name = forms.CharField(min_length=3, max_length=256)


class CreateUserForm(forms.Form):
    user_name = forms.CharField(min_length=2, max_length=256)
    email = forms.EmailField()
    role = forms.ChoiceField(choices=User.ROLE_CHOICES)
    password = forms.CharField(min_length=6)
    class_id = forms.IntegerField(required=False)


class NameForm(forms.Form):
    """Classrooms and subjects only carry a name"""
    name = forms.CharField(min_length=1, max_length=256)


class AssignSubjectForm(forms.Form):
    class_id = forms.IntegerField()
    subject_id = forms.IntegerField()
    teacher_id = forms.IntegerField(required=False)


class EnrollmentForm(forms.Form):
    student_id = forms.IntegerField()
    class_id = forms.IntegerField()


class SubjectTeacherForm(forms.Form):
    teacher_id = forms.IntegerField(required=False)
