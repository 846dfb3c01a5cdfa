from django import forms

from timetable.models import Schedule, time_validator


class ScheduleForm(forms.Form):
    class_id = forms.IntegerField()
    subject_id = forms.IntegerField()
    day = forms.ChoiceField(choices=Schedule.DAY_CHOICES)
    start_time = forms.CharField(validators=[time_validator])
    end_time = forms.CharField(validators=[time_validator])

    def clean(self):
        cleaned_data = super().clean()
        start_time = cleaned_data.get('start_time')
        end_time = cleaned_data.get('end_time')
        if start_time and end_time and start_time >= end_time:
            raise forms.ValidationError("Start time must be before end time")
        return cleaned_data
