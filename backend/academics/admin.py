from django.contrib import admin

from .models import AttendanceRecord, AttendanceSession, Group, Student


@admin.register(Group)
class GroupAdmin(admin.ModelAdmin):
    list_display = ('name', 'code')
    search_fields = ('name', 'code')


@admin.register(Student)
class StudentAdmin(admin.ModelAdmin):
    list_display = ('student_number', 'last_name', 'first_name', 'group', 'is_active')
    list_filter = ('group', 'is_active')
    search_fields = ('student_number', 'first_name', 'last_name')


class AttendanceRecordInline(admin.TabularInline):
    model = AttendanceRecord
    extra = 0
    fields = ('student', 'status', 'late_minutes', 'note', 'marked_at', 'marked_by')
    readonly_fields = fields
    can_delete = False

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(AttendanceSession)
class AttendanceSessionAdmin(admin.ModelAdmin):
    list_display = ('lesson', 'group', 'teacher', 'scheduled_at', 'status', 'end_time', 'created_at')
    list_filter = ('status', 'group', 'lesson__day_of_week')
    search_fields = ('lesson__title', 'group__name', 'teacher__username')
    raw_id_fields = ('lesson', 'teacher', 'opened_by')
    readonly_fields = ('status', 'end_time', 'created_at')
    inlines = (AttendanceRecordInline,)


@admin.register(AttendanceRecord)
class AttendanceRecordAdmin(admin.ModelAdmin):
    list_display = ('session', 'student', 'status', 'late_minutes', 'marked_at', 'marked_by')
    list_filter = ('status', 'session__status')
    search_fields = ('student__student_number', 'student__last_name')
    raw_id_fields = ('session', 'student', 'marked_by')
    readonly_fields = ('row_version',)
