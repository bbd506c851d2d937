"""
Exam Portal Package

This package contains the examination system of the Exam Portal:
administrators author exams and multiple-choice questions, students take
exams under a time limit and receive scored results.

Structure:
- users/: profiles, roles and authentication endpoints
- catalog/: exams and the question bank
- results/: submission scoring and result storage
- session/: the exam-taking session state machine
- management/: Django management commands

Author: Exam Portal Development Team
Version: 1.0.0
"""
