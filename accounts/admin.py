"""
Admin configuration for accounts app
"""
from django import forms
from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.contrib.auth.forms import ReadOnlyPasswordHashField, UserCreationForm

from .models import User


def _validate_org_for_role(cleaned_data):
    role = cleaned_data.get('role')
    org = cleaned_data.get('organization')
    if role in (User.ROLE_ADMIN, User.ROLE_MEMBER) and not org:
        raise forms.ValidationError(
            {'organization': 'Admin and member accounts must belong to an organization.'}
        )


class UserAdminForm(forms.ModelForm):
    """
    Change form with read-only password hash. Use the "Change password" link
    to set a new password.
    """
    password = ReadOnlyPasswordHashField(label='Password')

    class Meta:
        model = User
        fields = '__all__'

    def clean(self):
        cleaned = super().clean()
        _validate_org_for_role(cleaned)
        return cleaned


class UserAddForm(UserCreationForm):
    """Add form with org validation."""

    class Meta(UserCreationForm.Meta):
        model = User
        fields = ('email', 'full_name', 'role', 'organization', 'phone')

    def clean(self):
        cleaned = super().clean()
        _validate_org_for_role(cleaned)
        return cleaned


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    form = UserAdminForm
    add_form = UserAddForm
    list_display = ['email', 'full_name', 'role', 'organization', 'is_active', 'date_joined']
    list_filter = ['role', 'is_active', 'is_staff', 'organization']
    search_fields = ['email', 'full_name']
    ordering = ['-date_joined']
    readonly_fields = ['date_joined', 'updated_at', 'last_login']

    fieldsets = (
        (None, {'fields': ('email', 'password')}),
        ('Personal Info', {'fields': ('full_name', 'role', 'organization', 'phone')}),
        ('Permissions', {'fields': ('is_active', 'is_staff', 'is_superuser', 'groups', 'user_permissions')}),
        ('Important dates', {'fields': ('last_login', 'date_joined', 'updated_at')}),
    )

    add_fieldsets = (
        (None, {
            'classes': ('wide',),
            'fields': ('email', 'full_name', 'role', 'organization', 'phone', 'password1', 'password2', 'is_active'),
        }),
    )
