from rest_framework import serializers

from .models import Result, UNANSWERED
from .scoring import SubmittedAnswer


class SubmittedAnswerSerializer(serializers.Serializer):
    question_id = serializers.IntegerField()
    selected_answer = serializers.IntegerField(
        allow_null=True, required=False, min_value=UNANSWERED
    )

    def to_internal_value(self, data):
        value = super().to_internal_value(data)
        selected = value.get("selected_answer")
        return SubmittedAnswer(
            question_id=value["question_id"],
            selected_answer=UNANSWERED if selected is None else selected,
        )


class SubmitAttemptSerializer(serializers.Serializer):
    """Submission payload: {"answers": [{"question_id", "selected_answer"}, ...]}"""

    answers = SubmittedAnswerSerializer(many=True, allow_empty=True)


class ResultExamSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    title = serializers.CharField()
    description = serializers.CharField()
    duration = serializers.IntegerField()
    total_marks = serializers.IntegerField()
    passing_marks = serializers.IntegerField()


class ResultStudentSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    username = serializers.CharField()
    email = serializers.EmailField()
    full_name = serializers.SerializerMethodField()

    def get_full_name(self, obj):
        full_name = f"{obj.first_name} {obj.last_name}".strip()
        return full_name or obj.username


class ResultSerializer(serializers.ModelSerializer):
    exam = ResultExamSerializer(read_only=True)
    student = ResultStudentSerializer(read_only=True)
    percentage = serializers.SerializerMethodField()

    class Meta:
        model = Result
        fields = [
            "id",
            "exam",
            "student",
            "answers",
            "score",
            "total_marks",
            "percentage",
            "passed",
            "submitted_at",
        ]
        read_only_fields = fields

    def get_percentage(self, obj):
        return round(obj.percentage, 2)
