"""URL configuration for widgetfolio.

Every API route lives under ``/api/`` without a trailing slash. Routes with a
fixed ``me`` segment are declared before their ``<username>`` siblings.
"""

from django.contrib import admin
from django.urls import path
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView

from pages import views

urlpatterns = [
    path("admin/", admin.site.urls),
    path("api/health", views.HealthView.as_view(), name="health"),
    path("api/info", views.InfoView.as_view(), name="info"),
    # auth
    path("api/auth/register", views.RegisterView.as_view(), name="auth-register"),
    path("api/auth/login", views.LoginView.as_view(), name="auth-login"),
    path("api/auth/logout", views.LogoutView.as_view(), name="auth-logout"),
    path("api/auth/settings", views.AuthSettingsView.as_view(), name="auth-settings"),
    # content & profile
    path("api/content/me", views.MyContentView.as_view(), name="content"),
    path("api/content/public/<str:username>", views.UserContentView.as_view(), name="content-public"),
    path("api/content/<str:username>", views.UserContentView.as_view(), name="content-user"),
    path("api/profile", views.ProfileView.as_view(), name="profile"),
    path("api/profile/skills", views.SkillsView.as_view(), name="profile-skills"),
    path("api/profile/education", views.EducationView.as_view(), name="profile-education"),
    path("api/profile/education/update", views.EducationItemUpdateView.as_view(), name="profile-education-update"),
    path("api/profile/experience", views.ExperienceView.as_view(), name="profile-experience"),
    path("api/profile/portfolio", views.PortfolioView.as_view(), name="profile-portfolio"),
    # layout & widgets
    path("api/layout", views.LayoutView.as_view(), name="layout"),
    path("api/widgets", views.WidgetsView.as_view(), name="widgets"),
    # contact
    path("api/contact", views.ContactView.as_view(), name="contact"),
    # site settings
    path("api/settings", views.SiteSettingsView.as_view(), name="settings"),
    path("api/settings/me", views.MySiteSettingsView.as_view(), name="settings-me"),
    path("api/settings/<str:username>", views.UserSiteSettingsView.as_view(), name="settings-user"),
    # theme config documents
    path("api/theme-config", views.ThemeConfigView.as_view(), name="theme-config"),
    path("api/theme-config/<str:username>", views.UserThemeConfigView.as_view(), name="theme-config-user"),
    # theme colour preferences
    path("api/theme", views.ThemePreferenceView.as_view(), name="theme"),
    path("api/theme/me", views.ThemePreferenceView.as_view(), name="theme-me"),
    path("api/theme/<str:username>", views.UserThemePreferenceView.as_view(), name="theme-user"),
    # media
    path("api/upload/<str:kind>", views.UploadView.as_view(), name="upload"),
    path("api/images/<path:key>", views.ImageProxyView.as_view(), name="images"),
    # audit
    path("api/admin/edit-history", views.EditHistoryView.as_view(), name="edit-history"),
    path("api/schema/", SpectacularAPIView.as_view(), name="schema"),
    path("api/docs/", SpectacularSwaggerView.as_view(url_name="schema"), name="docs"),
]
