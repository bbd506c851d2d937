from django.conf import settings
from rest_framework import serializers

from ..users.permissions import AnswerKeyAccess
from .models import Exam, Question


class ExamSerializer(serializers.ModelSerializer):
    created_by = serializers.SerializerMethodField()
    question_count = serializers.SerializerMethodField()

    class Meta:
        model = Exam
        fields = [
            "id",
            "title",
            "description",
            "duration",
            "total_marks",
            "passing_marks",
            "is_active",
            "created_by",
            "question_count",
            "created_at",
        ]
        read_only_fields = ["id", "created_by", "question_count", "created_at"]

    def get_created_by(self, obj):
        if obj.created_by is None:
            return None
        return {"id": obj.created_by.id, "username": obj.created_by.username}

    def get_question_count(self, obj):
        annotated = getattr(obj, "question_count", None)
        if annotated is not None:
            return annotated
        return obj.questions.count()

    def validate(self, attrs):
        total_marks = attrs.get("total_marks", getattr(self.instance, "total_marks", None))
        passing_marks = attrs.get("passing_marks", getattr(self.instance, "passing_marks", None))
        if (
            total_marks is not None
            and passing_marks is not None
            and passing_marks > total_marks
        ):
            raise serializers.ValidationError(
                {"passing_marks": "Passing marks cannot exceed total marks."}
            )
        return attrs


class AdminQuestionSerializer(serializers.ModelSerializer):
    """Full question record, answer key included."""

    exam = serializers.PrimaryKeyRelatedField(read_only=True)
    options = serializers.ListField(
        child=serializers.CharField(allow_blank=False, trim_whitespace=True),
        min_length=2,
    )

    class Meta:
        model = Question
        fields = ["id", "exam", "text", "options", "correct_answer", "marks", "created_at"]
        read_only_fields = ["id", "exam", "created_at"]
        extra_kwargs = {"marks": {"min_value": 1}}

    def validate_options(self, value):
        limit = getattr(settings, "EXAM_MAX_OPTIONS", 4)
        if len(value) > limit:
            raise serializers.ValidationError(f"A question can have at most {limit} options.")
        return value

    def validate(self, attrs):
        options = attrs.get("options", getattr(self.instance, "options", None)) or []
        correct_answer = attrs.get("correct_answer", getattr(self.instance, "correct_answer", None))
        if correct_answer is not None and correct_answer >= len(options):
            raise serializers.ValidationError(
                {"correct_answer": "Correct answer must be the index of one of the options."}
            )
        return attrs


class StudentQuestionSerializer(serializers.ModelSerializer):
    """Question as shown while taking an exam: no correct_answer field."""

    class Meta:
        model = Question
        fields = ["id", "exam", "text", "options", "marks"]
        read_only_fields = fields


QUESTION_PROJECTIONS = {
    AnswerKeyAccess.GRANTED: AdminQuestionSerializer,
    AnswerKeyAccess.WITHHELD: StudentQuestionSerializer,
}


def question_serializer_for(access: AnswerKeyAccess):
    return QUESTION_PROJECTIONS[access]
