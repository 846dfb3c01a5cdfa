import django.core.validators
import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('core', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Schedule',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('day', models.CharField(choices=[('Monday', 'Monday'), ('Tuesday', 'Tuesday'), ('Wednesday', 'Wednesday'), ('Thursday', 'Thursday'), ('Friday', 'Friday'), ('Saturday', 'Saturday'), ('Sunday', 'Sunday')], max_length=10)),
                ('start_time', models.CharField(help_text='Start of the slot (HH:MM)', max_length=5, validators=[django.core.validators.RegexValidator(message='Time must be in HH:MM format (00:00 - 23:59)', regex='^([01]\\d|2[0-3]):[0-5]\\d$')])),
                ('end_time', models.CharField(help_text='End of the slot (HH:MM), exclusive', max_length=5, validators=[django.core.validators.RegexValidator(message='Time must be in HH:MM format (00:00 - 23:59)', regex='^([01]\\d|2[0-3]):[0-5]\\d$')])),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('classroom', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='schedules', to='core.classroom')),
                ('subject', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='schedules', to='core.subject')),
            ],
            options={
                'unique_together': {('classroom', 'day', 'start_time')},
                'indexes': [
                    models.Index(fields=['classroom', 'day'], name='tt_schedule_class_day_idx'),
                    models.Index(fields=['subject', 'day'], name='tt_schedule_subject_day_idx'),
                ],
            },
        ),
    ]
