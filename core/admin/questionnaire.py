"""Admin for the questionnaire tree."""

from django.contrib import admin, messages

from core.models import Question, Questionnaire, QuestionOption, Section
from core.service.questionnaire import QuestionnaireService


class QuestionOptionInline(admin.TabularInline):
    """Options edited inline on the question page."""

    model = QuestionOption
    extra = 0
    fields = ("order_index", "text", "score")
    ordering = ("order_index", "id")


@admin.register(Question)
class QuestionAdmin(admin.ModelAdmin):
    list_display = ("text_preview", "section", "q_type", "order_index")
    list_filter = ("q_type", "section__questionnaire")
    search_fields = ("text", "section__name", "section__questionnaire__name")
    ordering = ("section", "order_index")
    inlines = [QuestionOptionInline]
    autocomplete_fields = ["section"]

    @admin.display(description="Question")
    def text_preview(self, obj):
        return obj.text[:50] + "..." if len(obj.text) > 50 else obj.text


class QuestionInline(admin.TabularInline):
    model = Question
    extra = 0
    fields = ("order_index", "text", "q_type", "improvement_tip")
    ordering = ("order_index", "id")
    show_change_link = True  # options are edited on the question page


@admin.register(Section)
class SectionAdmin(admin.ModelAdmin):
    list_display = ("name", "questionnaire", "order_index")
    list_filter = ("questionnaire",)
    search_fields = ("name", "questionnaire__name")
    ordering = ("questionnaire", "order_index")
    inlines = [QuestionInline]


class SectionInline(admin.TabularInline):
    model = Section
    extra = 0
    fields = ("order_index", "name")
    ordering = ("order_index", "id")
    show_change_link = True


@admin.register(Questionnaire)
class QuestionnaireAdmin(admin.ModelAdmin):
    list_display = ("name", "version", "is_active", "created_at")
    search_fields = ("name",)
    list_filter = ("is_active",)
    readonly_fields = ("is_active", "created_at")
    actions = ("mark_active", "mark_inactive")
    inlines = [SectionInline]

    def get_actions(self, request):
        actions = super().get_actions(request)
        if "delete_selected" in actions:
            del actions["delete_selected"]
        return actions

    @admin.action(description="Activate (deactivates all others)")
    def mark_active(self, request, queryset):
        if queryset.count() != 1:
            self.message_user(request, "Select exactly one questionnaire to activate.", messages.ERROR)
            return
        questionnaire = QuestionnaireService.set_active(queryset.get().pk, True)
        self.message_user(request, f"“{questionnaire}” is now the active questionnaire.", messages.SUCCESS)

    @admin.action(description="Deactivate")
    def mark_inactive(self, request, queryset):
        updated = queryset.update(is_active=False)
        self.message_user(request, f"Deactivated {updated} questionnaire(s).", messages.SUCCESS)

    def delete_model(self, request, obj):
        """Deleting from the admin deactivates instead; evaluations keep their questionnaire."""
        self._soft_delete(obj)
        self.message_user(request, f"Questionnaire “{obj}” was deactivated.", messages.INFO)

    def delete_queryset(self, request, queryset):
        count = 0
        for obj in queryset:
            if self._soft_delete(obj):
                count += 1
        if count:
            self.message_user(request, f"{count} questionnaire(s) deactivated.", messages.INFO)

    def _soft_delete(self, obj: Questionnaire) -> bool:
        if not obj.is_active:
            return False
        obj.is_active = False
        obj.save(update_fields=["is_active"])
        return True
