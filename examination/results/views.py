from rest_framework import generics, status
from rest_framework.response import Response
from rest_framework.views import APIView

from ..exceptions import ValidationFailed
from ..users.permissions import IsAdminRole, IsStudentRole
from . import queries
from .scoring import submit_attempt
from .serializers import ResultSerializer, SubmitAttemptSerializer


class SubmitExamView(APIView):
    """
    Submit answers for an exam (students only) and get the graded result.

    Request Body Example (JSON):
        {"answers": [{"question_id": 7, "selected_answer": 2},
                     {"question_id": 8, "selected_answer": -1}]}

    Responses: 201 with the result, 409 if already submitted, 404 if the
    exam does not exist, 400 if the payload is malformed.
    """

    permission_classes = [IsStudentRole]

    def post(self, request, exam_id):
        serializer = SubmitAttemptSerializer(data=request.data)
        if not serializer.is_valid():
            raise ValidationFailed(details=serializer.errors)

        result = submit_attempt(exam_id, request.user, serializer.validated_data["answers"])
        return Response(ResultSerializer(result).data, status=status.HTTP_201_CREATED)


class ExamResultView(APIView):
    """The calling student's result for one exam, 404 if not attempted yet."""

    permission_classes = [IsStudentRole]

    def get(self, request, exam_id):
        result = queries.result_for(request.user.pk, exam_id)
        return Response(ResultSerializer(result).data)


class MyResultsView(generics.ListAPIView):
    serializer_class = ResultSerializer
    permission_classes = [IsStudentRole]

    def get_queryset(self):
        return queries.results_for_student(self.request.user.pk)


class AllResultsView(generics.ListAPIView):
    serializer_class = ResultSerializer
    permission_classes = [IsAdminRole]

    def get_queryset(self):
        return queries.all_results()


class ResultStatisticsView(APIView):
    permission_classes = [IsAdminRole]

    def get(self, request):
        return Response(queries.dashboard_statistics())
