import logging

from rest_framework import generics, permissions

from ...users.models import UserRole, role_of
from ...users.permissions import IsAdminRoleOrReadOnly
from .. import services
from ..serializers import ExamSerializer

logger = logging.getLogger(__name__)


class ExamListCreateView(generics.ListCreateAPIView):
    """
    GET: exams for the caller. Students only see active exams, admins see all.
    POST: create an exam (admin only). The creator is recorded.
    """

    serializer_class = ExamSerializer
    permission_classes = [permissions.IsAuthenticated, IsAdminRoleOrReadOnly]

    def get_queryset(self):
        include_inactive = role_of(self.request.user) == UserRole.ADMIN
        return services.list_exams(include_inactive=include_inactive)

    def perform_create(self, serializer):
        exam = serializer.save(created_by=self.request.user)
        logger.info(f"Exam '{exam.title}' (ID: {exam.id}) created by {self.request.user.username}")


class ExamDetailView(generics.RetrieveUpdateDestroyAPIView):
    """
    GET: single exam for any authenticated user.
    PUT/PATCH/DELETE: admin only. Deleting cascades to the exam's questions.
    """

    serializer_class = ExamSerializer
    permission_classes = [permissions.IsAuthenticated, IsAdminRoleOrReadOnly]

    def get_object(self):
        exam = services.get_exam(self.kwargs["pk"])
        self.check_object_permissions(self.request, exam)
        return exam

    def perform_update(self, serializer):
        exam = serializer.save()
        logger.info(f"Exam '{exam.title}' (ID: {exam.id}) updated by {self.request.user.username}")

    def perform_destroy(self, instance):
        services.delete_exam(instance)
