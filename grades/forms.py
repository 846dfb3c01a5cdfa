from django import forms

from grades.models import StudentGrade


class ScoreForm(forms.Form):
    score = forms.IntegerField(min_value=0, max_value=100)


class GradeForm(ScoreForm):
    student_id = forms.IntegerField()
    subject_id = forms.IntegerField()
    type = forms.ChoiceField(choices=StudentGrade.TYPE_CHOICES)
