from academics.models import AttendanceRecord, Student
from .guards import get_session_or_404


def active_students(group):
    group_id = getattr(group, 'pk', group)
    return Student.objects.filter(group_id=group_id, is_active=True).order_by('last_name', 'first_name')


def session_roster(session_id):
    """Editable roster for a session: active students merged with existing records.

    Students without a record default to PRESENT with no concurrency token;
    the token must be echoed back unchanged when the row is submitted.
    """
    session = get_session_or_404(session_id)
    records = {r.student_id: r for r in AttendanceRecord.objects.filter(session=session)}

    students = []
    for student in active_students(session.group_id):
        rec = records.get(student.pk)
        students.append({
            'student_id': student.pk,
            'full_name': student.full_name,
            'student_number': student.student_number,
            'status': rec.status if rec else AttendanceRecord.Status.PRESENT,
            'late_minutes': rec.late_minutes if rec else None,
            'note': rec.note if rec else None,
            'row_version': rec.row_version if rec else None,
        })

    return {
        'session': session,
        'students': students,
    }
