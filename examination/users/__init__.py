"""
Exam Portal Users Package

Profiles with roles (admin/student), role-based permissions, the
authentication endpoints and admin user management.

Structure:
- models.py: Profile and the profile signal handler
- permissions.py: role checks and the answer-key access decision
- serializers.py: API serialization for user data
- views/: authentication and user management views
"""
