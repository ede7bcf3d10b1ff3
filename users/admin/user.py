"""Account management in the Django admin."""

from django import forms
from django.contrib import admin, messages

from users import choices
from users.models import CustomUser


class CustomUserCreationForm(forms.ModelForm):
    """Admin creation form; the password is hashed on save."""

    password = forms.CharField(label="Initial password", widget=forms.PasswordInput)

    class Meta:
        model = CustomUser
        fields = ["email", "full_name", "role", "is_active", "is_staff"]

    def clean_email(self):
        email = self.cleaned_data["email"].strip().lower()
        if CustomUser.objects.filter(email=email).exists():
            raise forms.ValidationError("This e-mail is already used by another account.")
        return email

    def save(self, commit=True):
        user = super().save(commit=False)
        user.set_password(self.cleaned_data["password"])
        if commit:
            user.save()
        return user


class CustomUserChangeForm(forms.ModelForm):
    reset_password = forms.CharField(
        label="Reset password",
        required=False,
        widget=forms.PasswordInput,
        help_text="Leave empty to keep the current password.",
    )

    class Meta:
        model = CustomUser
        fields = ["email", "full_name", "role", "has_given_consent", "is_active", "is_staff"]

    def save(self, commit=True):
        user = super().save(commit=False)
        new_password = self.cleaned_data.get("reset_password")
        if new_password:
            user.set_password(new_password)
        if commit:
            user.save()
        return user


@admin.register(CustomUser)
class CustomUserAdmin(admin.ModelAdmin):
    list_display = ("email", "full_name", "role", "has_given_consent", "is_active", "created_at")
    list_filter = ("role", "is_active", "has_given_consent")
    search_fields = ("email", "full_name")
    ordering = ("-created_at",)
    readonly_fields = ("date_joined", "created_at", "updated_at", "last_login")
    actions = ("make_admin", "make_user", "disable_users")

    def get_form(self, request, obj=None, **kwargs):
        kwargs["form"] = CustomUserChangeForm if obj else CustomUserCreationForm
        return super().get_form(request, obj, **kwargs)

    def get_fieldsets(self, request, obj=None):
        if obj:
            return (
                ("Account", {"fields": ("email", "full_name", "reset_password")}),
                ("Access", {"fields": ("role", "is_active", "is_staff", "has_given_consent")}),
                ("Audit", {"fields": ("date_joined", "last_login", "created_at", "updated_at")}),
            )
        return (
            ("Account", {"fields": ("email", "full_name", "password")}),
            ("Access", {"fields": ("role", "is_active", "is_staff")}),
        )

    @admin.action(description="Grant administrator role")
    def make_admin(self, request, queryset):
        updated = queryset.update(role=choices.UserRole.ADMIN)
        self.message_user(request, f"{updated} account(s) promoted.", messages.SUCCESS)

    @admin.action(description="Set regular user role")
    def make_user(self, request, queryset):
        updated = queryset.exclude(pk=request.user.pk).update(role=choices.UserRole.USER)
        self.message_user(request, f"{updated} account(s) set to user.", messages.SUCCESS)

    @admin.action(description="Disable selected accounts")
    def disable_users(self, request, queryset):
        count = queryset.exclude(pk=request.user.pk).update(is_active=False)
        self.message_user(request, f"{count} account(s) disabled.")
