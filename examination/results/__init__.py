"""
Exam Results Package

Scoring of submitted attempts and storage of the one Result allowed per
student and exam.

Structure:
- models.py: Result with the (student, exam) unique constraint
- scoring.py: grading, percentage/pass computation and submission
- queries.py: result lookups and admin statistics
- serializers.py / views.py: submission and result endpoints
"""
