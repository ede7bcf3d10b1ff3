import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Questionnaire",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True, primary_key=True, serialize=False, verbose_name="ID"
                    ),
                ),
                ("name", models.CharField(max_length=200, verbose_name="Name")),
                ("version", models.PositiveIntegerField(default=1, verbose_name="Version")),
                (
                    "is_active",
                    models.BooleanField(
                        default=False,
                        help_text="The active questionnaire is the one respondents fill in; activating one deactivates the rest.",
                        verbose_name="Active",
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="Created at")),
            ],
            options={
                "verbose_name": "Questionnaire",
                "verbose_name_plural": "Questionnaires",
                "db_table": "core_questionnaires",
                "ordering": ("-created_at",),
            },
        ),
        migrations.CreateModel(
            name="Section",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True, primary_key=True, serialize=False, verbose_name="ID"
                    ),
                ),
                ("name", models.CharField(max_length=200, verbose_name="Name")),
                ("order_index", models.PositiveIntegerField(default=0, verbose_name="Order")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="Created at")),
                (
                    "questionnaire",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="sections",
                        to="core.questionnaire",
                        verbose_name="Questionnaire",
                    ),
                ),
            ],
            options={
                "verbose_name": "Section",
                "verbose_name_plural": "Sections",
                "db_table": "core_questionnaire_sections",
                "ordering": ("order_index", "id"),
            },
        ),
        migrations.CreateModel(
            name="Question",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True, primary_key=True, serialize=False, verbose_name="ID"
                    ),
                ),
                ("text", models.TextField(verbose_name="Question")),
                (
                    "q_type",
                    models.CharField(
                        choices=[
                            ("SINGLE", "Single choice"),
                            ("MULTIPLE", "Multiple choice"),
                            ("TEXT", "Free text"),
                        ],
                        default="SINGLE",
                        max_length=20,
                        verbose_name="Type",
                    ),
                ),
                ("order_index", models.PositiveIntegerField(default=0, verbose_name="Order")),
                (
                    "improvement_tip",
                    models.TextField(
                        blank=True,
                        default="",
                        help_text="Shown on the report when the selected answer is not the best practice.",
                        verbose_name="Improvement tip",
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="Created at")),
                (
                    "section",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="questions",
                        to="core.section",
                        verbose_name="Section",
                    ),
                ),
            ],
            options={
                "verbose_name": "Question",
                "verbose_name_plural": "Questions",
                "db_table": "core_questionnaire_questions",
                "ordering": ("order_index", "id"),
            },
        ),
        migrations.CreateModel(
            name="QuestionOption",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True, primary_key=True, serialize=False, verbose_name="ID"
                    ),
                ),
                ("text", models.CharField(max_length=500, verbose_name="Text")),
                (
                    "score",
                    models.DecimalField(
                        decimal_places=2,
                        default=0,
                        help_text="Risk points for this option.",
                        max_digits=8,
                        verbose_name="Score",
                    ),
                ),
                ("order_index", models.PositiveIntegerField(default=0, verbose_name="Order")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="Created at")),
                (
                    "question",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="options",
                        to="core.question",
                        verbose_name="Question",
                    ),
                ),
            ],
            options={
                "verbose_name": "Option",
                "verbose_name_plural": "Options",
                "db_table": "core_questionnaire_options",
                "ordering": ("order_index", "id"),
            },
        ),
    ]
