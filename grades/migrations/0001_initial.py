import django.core.validators
import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('core', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='StudentGrade',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('score', models.IntegerField(default=0, validators=[django.core.validators.MinValueValidator(0)])),
                ('type', models.CharField(choices=[('REGULAR', 'Regular'), ('QUIZ', 'Quiz'), ('MIDTERM', 'Midterm Exam'), ('FINAL', 'Final Exam'), ('ASSIGNMENT', 'Assignment')], default='REGULAR', max_length=20)),
                ('date_recorded', models.DateTimeField(default=django.utils.timezone.now)),
                ('classroom', models.ForeignKey(help_text='Classroom the student attended when graded', on_delete=django.db.models.deletion.CASCADE, related_name='grades', to='core.classroom')),
                ('student', models.ForeignKey(help_text='Student who received this grade', on_delete=django.db.models.deletion.CASCADE, related_name='grades', to=settings.AUTH_USER_MODEL)),
                ('subject', models.ForeignKey(help_text='Subject for which the grade is recorded', on_delete=django.db.models.deletion.CASCADE, related_name='grades', to='core.subject')),
            ],
            options={
                'ordering': ['-date_recorded', '-id'],
                'indexes': [
                    models.Index(fields=['student', 'subject'], name='grades_student_subject_idx'),
                    models.Index(fields=['classroom', 'subject'], name='grades_class_subject_idx'),
                ],
            },
        ),
    ]
