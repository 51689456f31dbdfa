from rest_framework import serializers
from .models import Lesson


class LessonSerializer(serializers.ModelSerializer):
    group = serializers.StringRelatedField(read_only=True)
    group_id = serializers.IntegerField(read_only=True)
    teacher_id = serializers.IntegerField(read_only=True)
    day_name = serializers.CharField(source='get_day_of_week_display', read_only=True)

    class Meta:
        model = Lesson
        fields = ('id', 'title', 'day_of_week', 'day_name', 'start_time', 'end_time', 'group', 'group_id', 'teacher_id', 'is_active')
