import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("core", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Facility",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True, primary_key=True, serialize=False, verbose_name="ID"
                    ),
                ),
                (
                    "created_at",
                    models.DateTimeField(
                        auto_now_add=True,
                        db_index=True,
                        help_text="Set once when the row is first written.",
                        verbose_name="Created at",
                    ),
                ),
                (
                    "updated_at",
                    models.DateTimeField(
                        auto_now=True,
                        db_index=True,
                        help_text="Refreshed on every ORM save.",
                        verbose_name="Updated at",
                    ),
                ),
                ("name", models.CharField(max_length=200, verbose_name="Name")),
                ("region", models.CharField(blank=True, max_length=100, verbose_name="Region")),
                (
                    "facility_type",
                    models.CharField(
                        blank=True,
                        help_text="Free text, e.g. stud farm, riding school, livery yard.",
                        max_length=100,
                        verbose_name="Type",
                    ),
                ),
                (
                    "is_active",
                    models.BooleanField(
                        default=True,
                        help_text="Inactive facilities are hidden from the owner's dashboard.",
                        verbose_name="Active",
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="facilities",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="Owner",
                    ),
                ),
            ],
            options={
                "verbose_name": "Facility",
                "verbose_name_plural": "Facilities",
                "db_table": "evaluations_facilities",
                "ordering": ("-created_at",),
            },
        ),
        migrations.CreateModel(
            name="Evaluation",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True, primary_key=True, serialize=False, verbose_name="ID"
                    ),
                ),
                ("total_score", models.FloatField(default=0.0, verbose_name="Total score")),
                (
                    "section_scores",
                    models.JSONField(blank=True, default=list, verbose_name="Section scores"),
                ),
                (
                    "created_at",
                    models.DateTimeField(auto_now_add=True, db_index=True, verbose_name="Submitted at"),
                ),
                (
                    "plan_status",
                    models.CharField(
                        choices=[
                            ("not_generated", "Not generated"),
                            ("generating", "Generating"),
                            ("draft", "Draft"),
                            ("published", "Published"),
                        ],
                        db_index=True,
                        default="not_generated",
                        max_length=20,
                        verbose_name="Plan status",
                    ),
                ),
                (
                    "plan_content",
                    models.TextField(blank=True, default="", verbose_name="Plan (Markdown)"),
                ),
                (
                    "actionable_measures",
                    models.JSONField(
                        blank=True,
                        default=list,
                        help_text='List of {"measure": str, "category": str} returned with the plan.',
                        verbose_name="Actionable measures",
                    ),
                ),
                (
                    "plan_updated_at",
                    models.DateTimeField(blank=True, null=True, verbose_name="Plan updated at"),
                ),
                (
                    "facility",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="evaluations",
                        to="evaluations.facility",
                        verbose_name="Facility",
                    ),
                ),
                (
                    "questionnaire",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="evaluations",
                        to="core.questionnaire",
                        verbose_name="Questionnaire",
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="evaluations",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="Submitted by",
                    ),
                ),
            ],
            options={
                "verbose_name": "Evaluation",
                "verbose_name_plural": "Evaluations",
                "db_table": "evaluations_evaluations",
                "ordering": ("-created_at", "-id"),
            },
        ),
        migrations.CreateModel(
            name="EvaluationAnswer",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True, primary_key=True, serialize=False, verbose_name="ID"
                    ),
                ),
                (
                    "selected_options",
                    models.JSONField(blank=True, null=True, verbose_name="Selected option ids"),
                ),
                ("text_answer", models.TextField(blank=True, null=True, verbose_name="Text answer")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="Created at")),
                (
                    "evaluation",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="answers",
                        to="evaluations.evaluation",
                        verbose_name="Evaluation",
                    ),
                ),
                (
                    "question",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="evaluation_answers",
                        to="core.question",
                        verbose_name="Question",
                    ),
                ),
            ],
            options={
                "verbose_name": "Answer",
                "verbose_name_plural": "Answers",
                "db_table": "evaluations_answers",
                "ordering": ("id",),
            },
        ),
        migrations.CreateModel(
            name="FeedbackMeasure",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True, primary_key=True, serialize=False, verbose_name="ID"
                    ),
                ),
                (
                    "created_at",
                    models.DateTimeField(
                        auto_now_add=True,
                        db_index=True,
                        help_text="Set once when the row is first written.",
                        verbose_name="Created at",
                    ),
                ),
                (
                    "updated_at",
                    models.DateTimeField(
                        auto_now=True,
                        db_index=True,
                        help_text="Refreshed on every ORM save.",
                        verbose_name="Updated at",
                    ),
                ),
                ("measure_text", models.CharField(max_length=500, verbose_name="Measure")),
                (
                    "category",
                    models.CharField(blank=True, default="", max_length=100, verbose_name="Category"),
                ),
                (
                    "user_feedback",
                    models.CharField(
                        blank=True,
                        choices=[
                            ("easy", "Easy to implement"),
                            ("challenging", "Challenging"),
                            ("not_feasible", "Not feasible"),
                        ],
                        max_length=20,
                        null=True,
                        verbose_name="Feasibility",
                    ),
                ),
                ("user_comment", models.TextField(blank=True, null=True, verbose_name="Comment")),
                (
                    "evaluation",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="feedback_measures",
                        to="evaluations.evaluation",
                        verbose_name="Evaluation",
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="feedback_measures",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="User",
                    ),
                ),
            ],
            options={
                "verbose_name": "Measure feedback",
                "verbose_name_plural": "Measure feedback",
                "db_table": "evaluations_feedback_measures",
                "ordering": ("id",),
            },
        ),
        migrations.AddConstraint(
            model_name="feedbackmeasure",
            constraint=models.UniqueConstraint(
                fields=("evaluation", "measure_text"),
                name="uniq_feedback_measure_per_evaluation",
            ),
        ),
    ]
