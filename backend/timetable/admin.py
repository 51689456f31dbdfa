from django.contrib import admin
from .models import Lesson


@admin.register(Lesson)
class LessonAdmin(admin.ModelAdmin):
    list_display = ('title', 'group', 'teacher', 'day_of_week', 'start_time', 'end_time', 'is_active')
    list_filter = ('day_of_week', 'is_active', 'group')
    search_fields = ('title', 'group__name', 'teacher__username')
    raw_id_fields = ('teacher',)
    ordering = ('day_of_week', 'start_time')
