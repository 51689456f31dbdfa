from rest_framework import serializers

from .models import AttendanceRecord, AttendanceSession


class AttendanceRecordSerializer(serializers.ModelSerializer):
    student_id = serializers.IntegerField(read_only=True)
    marked_by = serializers.IntegerField(source='marked_by_id', read_only=True)

    class Meta:
        model = AttendanceRecord
        fields = ('id', 'student_id', 'status', 'late_minutes', 'note', 'marked_at', 'marked_by', 'row_version')
        read_only_fields = fields


class AttendanceSessionSerializer(serializers.ModelSerializer):
    lesson_title = serializers.CharField(source='lesson.title', read_only=True)
    group_name = serializers.CharField(source='group.name', read_only=True)

    class Meta:
        model = AttendanceSession
        fields = (
            'id', 'lesson', 'lesson_title', 'group', 'group_name', 'teacher',
            'scheduled_at', 'status', 'created_at', 'opened_by', 'end_time',
        )
        read_only_fields = fields


class OpenSessionSerializer(serializers.Serializer):
    lesson_id = serializers.IntegerField()
    date = serializers.DateField(required=False, allow_null=True)


class ReanchorSerializer(serializers.Serializer):
    date = serializers.DateField()


class StudentMarkSerializer(serializers.Serializer):
    student_id = serializers.IntegerField()
    status = serializers.ChoiceField(choices=AttendanceRecord.Status.choices, default=AttendanceRecord.Status.PRESENT)
    late_minutes = serializers.IntegerField(required=False, allow_null=True, min_value=0)
    note = serializers.CharField(required=False, allow_null=True, allow_blank=True, max_length=500)
    row_version = serializers.UUIDField(required=False, allow_null=True)


class BulkMarkSerializer(serializers.Serializer):
    records = StudentMarkSerializer(many=True, allow_empty=False)

    def validate_records(self, value):
        ids = [r['student_id'] for r in value]
        if len(ids) != len(set(ids)):
            raise serializers.ValidationError('Each student may appear only once.')
        return value


class RosterRowSerializer(serializers.Serializer):
    student_id = serializers.IntegerField()
    full_name = serializers.CharField()
    student_number = serializers.CharField()
    status = serializers.CharField()
    late_minutes = serializers.IntegerField(allow_null=True)
    note = serializers.CharField(allow_null=True)
    row_version = serializers.UUIDField(allow_null=True)


class SessionRosterSerializer(serializers.Serializer):
    session = AttendanceSessionSerializer()
    students = RosterRowSerializer(many=True)
