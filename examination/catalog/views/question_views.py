import logging

from rest_framework import generics, permissions, status
from rest_framework.response import Response

from ...users.permissions import IsAdminRole, IsAdminRoleOrReadOnly, answer_key_access_for
from .. import services
from ..serializers import AdminQuestionSerializer, question_serializer_for

logger = logging.getLogger(__name__)


class ExamQuestionListCreateView(generics.ListCreateAPIView):
    """
    GET: questions of an exam. The projection is picked from the caller's
    answer-key access: students get questions without correct_answer.
    POST: add a question to the exam (admin only).
    """

    permission_classes = [permissions.IsAuthenticated, IsAdminRoleOrReadOnly]
    pagination_class = None

    def get_serializer_class(self):
        if self.request.method == "POST":
            return AdminQuestionSerializer
        return question_serializer_for(answer_key_access_for(self.request.user))

    def get_queryset(self):
        return services.questions_for(self.kwargs["exam_id"])

    def create(self, request, *args, **kwargs):
        exam = services.get_exam(self.kwargs["exam_id"])
        serializer = AdminQuestionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        question = serializer.save(exam=exam)
        logger.info(f"Question {question.id} added to exam {exam.id} by {request.user.username}")
        return Response(AdminQuestionSerializer(question).data, status=status.HTTP_201_CREATED)


class QuestionDetailView(generics.RetrieveUpdateDestroyAPIView):
    """Single question management (admin only, answer key included)."""

    serializer_class = AdminQuestionSerializer
    permission_classes = [IsAdminRole]

    def get_object(self):
        question = services.get_question(self.kwargs["pk"])
        self.check_object_permissions(self.request, question)
        return question

    def perform_update(self, serializer):
        question = serializer.save()
        logger.info(f"Question {question.id} updated by {self.request.user.username}")

    def perform_destroy(self, instance):
        logger.info(f"Question {instance.id} deleted by {self.request.user.username}")
        instance.delete()
