from django.db import models


class EvaluationAnswer(models.Model):
    """Stored answer to one question of an evaluation."""

    evaluation = models.ForeignKey(
        "evaluations.Evaluation",
        on_delete=models.CASCADE,
        related_name="answers",
        verbose_name="Evaluation",
    )
    # Kept when the question is later removed from the questionnaire.
    question = models.ForeignKey(
        "core.Question",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="evaluation_answers",
        verbose_name="Question",
    )
    selected_options = models.JSONField("Selected option ids", null=True, blank=True)
    text_answer = models.TextField("Text answer", null=True, blank=True)
    created_at = models.DateTimeField("Created at", auto_now_add=True)

    class Meta:
        db_table = "evaluations_answers"
        verbose_name = "Answer"
        verbose_name_plural = "Answers"
        ordering = ("id",)

    def __str__(self) -> str:
        return f"Answer {self.pk} to question {self.question_id}"
