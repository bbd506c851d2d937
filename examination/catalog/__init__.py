"""
Exam Catalog Package

Exams and their multiple-choice question bank.

Structure:
- models.py: Exam and Question
- serializers.py: exam serializer and the two question projections
- services.py: lookups, answer key loading and exam deletion
- views/: exam and question endpoints
"""
