"""
REST endpoints for the weekly schedule
"""
from django.http import JsonResponse

from core.views import JsonView
from timetable import services


def serialize_schedule(schedule):
    return {
        'id': schedule.id,
        'classId': schedule.classroom_id,
        'subjectId': schedule.subject_id,
        'day': schedule.day,
        'startTime': schedule.start_time,
        'endTime': schedule.end_time,
    }


class ScheduleListView(JsonView):
    def get(self, request):
        schedules = services.list_schedules(
            self.user(request),
            class_id=self.int_param(request, 'classId'),
            day=request.GET.get('day'),
        )
        return JsonResponse({'schedules': [serialize_schedule(s) for s in schedules]})

    def post(self, request):
        data = self.payload(request)
        schedule = services.create_schedule(
            self.user(request),
            class_id=data.get('classId'),
            subject_id=data.get('subjectId'),
            day=data.get('day'),
            start_time=data.get('startTime'),
            end_time=data.get('endTime'),
        )
        return JsonResponse(serialize_schedule(schedule), status=201)


class ScheduleDetailView(JsonView):
    def put(self, request, schedule_id):
        data = self.payload(request)
        schedule = services.update_schedule(
            self.user(request),
            schedule_id,
            class_id=data.get('classId'),
            subject_id=data.get('subjectId'),
            day=data.get('day'),
            start_time=data.get('startTime'),
            end_time=data.get('endTime'),
        )
        return JsonResponse(serialize_schedule(schedule))

    def delete(self, request, schedule_id):
        services.delete_schedule(self.user(request), schedule_id)
        return JsonResponse({'success': True})
