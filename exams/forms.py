from django import forms

from exams.models import Exam


class ExamForm(forms.Form):
    title = forms.CharField(min_length=1, max_length=256)
    type = forms.ChoiceField(choices=Exam.TYPE_CHOICES)
    description = forms.CharField(required=False)
    duration_in_minutes = forms.IntegerField(min_value=1)
    subject_id = forms.IntegerField()
    class_id = forms.IntegerField()
