from django.contrib import admin
from django.contrib.auth.admin import UserAdmin

from .models import (
    ContactMessage,
    Education,
    EditHistory,
    Experience,
    Layout,
    PageContent,
    Portfolio,
    SiteSettings,
    Skill,
    ThemePreference,
    User,
    Widget,
)


@admin.register(User)
class PagesUserAdmin(UserAdmin):
    list_display = ("username", "email", "is_staff", "allow_multiple_sessions", "date_joined")
    fieldsets = UserAdmin.fieldsets + (("Sessions", {"fields": ("allow_multiple_sessions",)}),)


class SkillInline(admin.TabularInline):
    model = Skill
    extra = 0


class EducationInline(admin.TabularInline):
    model = Education
    extra = 0


@admin.register(PageContent)
class PageContentAdmin(admin.ModelAdmin):
    list_display = ("id", "user", "name", "email", "location", "updated_at")
    search_fields = ("name", "email", "user__username")
    inlines = [SkillInline, EducationInline]


@admin.register(Experience)
class ExperienceAdmin(admin.ModelAdmin):
    list_display = ("title", "company", "period", "page_content")
    search_fields = ("title", "company")


@admin.register(Portfolio)
class PortfolioAdmin(admin.ModelAdmin):
    list_display = ("title", "page_content", "image", "link")
    search_fields = ("title", "description")


class WidgetInline(admin.TabularInline):
    model = Widget
    extra = 0
    fields = ("type", "title", "x", "y", "w", "h", "order", "is_visible")


@admin.register(Layout)
class LayoutAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "user", "is_active", "updated_at")
    list_filter = ("is_active",)
    inlines = [WidgetInline]


@admin.register(Widget)
class WidgetAdmin(admin.ModelAdmin):
    list_display = ("id", "type", "title", "layout", "order", "is_visible")
    list_filter = ("type", "is_visible")


@admin.register(ContactMessage)
class ContactMessageAdmin(admin.ModelAdmin):
    list_display = ("name", "email", "recipient", "is_read", "created_at")
    list_filter = ("is_read",)
    search_fields = ("name", "email", "message")


@admin.register(SiteSettings)
class SiteSettingsAdmin(admin.ModelAdmin):
    list_display = ("id", "user", "header_logo_text", "primary_color", "updated_at")


@admin.register(ThemePreference)
class ThemePreferenceAdmin(admin.ModelAdmin):
    list_display = ("user", "primary_color", "background_color", "updated_at")


@admin.register(EditHistory)
class EditHistoryAdmin(admin.ModelAdmin):
    list_display = ("user", "page", "section", "action", "item_id", "created_at")
    list_filter = ("page", "action")
    readonly_fields = ("old_value", "new_value")
