"""Admin for facilities, evaluations and measure feedback."""

from django.contrib import admin, messages
from django.core.exceptions import ValidationError

from core.service.scoring import fraction_to_percentage
from evaluations.models import Evaluation, EvaluationAnswer, Facility, FeedbackMeasure
from evaluations.models.choices import PlanStatus
from evaluations.services.plans import PlanService, PlanTransitionError


@admin.register(Facility)
class FacilityAdmin(admin.ModelAdmin):
    list_display = ("name", "user", "region", "facility_type", "is_active", "created_at")
    list_filter = ("is_active", "region")
    search_fields = ("name", "user__email", "region")
    autocomplete_fields = ["user"]
    actions = ("mark_active", "mark_inactive")

    @admin.action(description="Mark as active")
    def mark_active(self, request, queryset):
        updated = queryset.update(is_active=True)
        self.message_user(request, f"Activated {updated} facility(ies).", messages.SUCCESS)

    @admin.action(description="Mark as inactive")
    def mark_inactive(self, request, queryset):
        updated = queryset.update(is_active=False)
        self.message_user(request, f"Deactivated {updated} facility(ies).", messages.SUCCESS)


class EvaluationAnswerInline(admin.TabularInline):
    model = EvaluationAnswer
    extra = 0
    can_delete = False
    fields = ("question", "selected_options", "text_answer")
    readonly_fields = fields

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Evaluation)
class EvaluationAdmin(admin.ModelAdmin):
    list_display = ("id", "facility", "user", "score_display", "plan_status", "created_at")
    list_filter = ("plan_status", "questionnaire")
    search_fields = ("facility__name", "user__email")
    date_hierarchy = "created_at"
    readonly_fields = (
        "facility",
        "questionnaire",
        "user",
        "total_score",
        "section_scores",
        "created_at",
        "plan_status",
        "plan_updated_at",
    )
    fields = readonly_fields + ("plan_content", "actionable_measures")
    inlines = [EvaluationAnswerInline]
    actions = ("publish_plans", "reset_generation")

    def get_readonly_fields(self, request, obj=None):
        if obj is not None and obj.plan_status == PlanStatus.PUBLISHED:
            return self.fields
        return self.readonly_fields

    @admin.display(description="Total (%)", ordering="total_score")
    def score_display(self, obj):
        return f"{fraction_to_percentage(obj.total_score):.1f}"

    @admin.action(description="Publish selected draft plans")
    def publish_plans(self, request, queryset):
        published, skipped = 0, 0
        for evaluation in queryset:
            try:
                PlanService.publish(evaluation.pk)
                published += 1
            except (PlanTransitionError, ValidationError):
                skipped += 1
        if published:
            self.message_user(request, f"Published {published} plan(s).", messages.SUCCESS)
        if skipped:
            self.message_user(request, f"{skipped} plan(s) could not be published and were skipped.", messages.WARNING)

    @admin.action(description="Reset stuck plan generation")
    def reset_generation(self, request, queryset):
        reset, skipped = 0, 0
        for evaluation in queryset:
            try:
                PlanService.reset_after_failure(evaluation.pk)
                reset += 1
            except PlanTransitionError:
                skipped += 1
        if reset:
            self.message_user(request, f"Reset {reset} plan(s) to not generated.", messages.SUCCESS)
        if skipped:
            self.message_user(request, f"{skipped} plan(s) were not generating and were skipped.", messages.WARNING)

    def has_add_permission(self, request):
        return False


@admin.register(FeedbackMeasure)
class FeedbackMeasureAdmin(admin.ModelAdmin):
    list_display = ("measure_text", "category", "user_feedback", "evaluation", "user", "updated_at")
    list_filter = ("user_feedback", "category")
    search_fields = ("measure_text", "user__email")
    readonly_fields = ("evaluation", "user", "measure_text", "category", "user_feedback", "user_comment")

    def has_add_permission(self, request):
        return False
