from django.db import models
from django.contrib.auth.models import AbstractUser, UserManager
from django.conf import settings


class User(AbstractUser):
    email = models.EmailField(unique=True)
    # Per-user session policy, surfaced through /api/auth/settings
    allow_multiple_sessions = models.BooleanField(default=True)

    objects = UserManager()

    REQUIRED_FIELDS = ["email"]

    def __str__(self):
        return self.username


PAGE_CONTENT_TEXT_FIELDS = (
    "name",
    "email",
    "phone",
    "location",
    "description",
    "bio",
    "achievement",
)
PAGE_CONTENT_IMAGE_FIELDS = ("hero_image", "contact_image")


class PageContentManager(models.Manager):
    def for_user(self, user):
        """Return the user's page content, creating an empty one on first access."""
        content, created = self.get_or_create(user=user)
        return content


class PageContent(models.Model):
    """Per-user biographical data; owns skills, education, experience and portfolio rows."""

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="page_content",
    )
    name = models.CharField(max_length=255, blank=True, default="")
    email = models.CharField(max_length=255, blank=True, default="")
    phone = models.CharField(max_length=50, blank=True, default="")
    location = models.CharField(max_length=255, blank=True, default="")
    description = models.TextField(blank=True, default="")
    bio = models.TextField(blank=True, default="")
    achievement = models.TextField(blank=True, default="")
    # Relative storage keys (uploads/...), never proxy URLs
    hero_image = models.TextField(blank=True, null=True)
    contact_image = models.TextField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = PageContentManager()

    def __str__(self):
        return f"Content of {self.user}"

    def snapshot(self):
        data = {field: getattr(self, field) for field in PAGE_CONTENT_TEXT_FIELDS}
        data["hero_image"] = self.hero_image
        data["contact_image"] = self.contact_image
        return data


class Skill(models.Model):
    page_content = models.ForeignKey(PageContent, on_delete=models.CASCADE, related_name="skills")
    name = models.CharField(max_length=200)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["id"]

    def __str__(self):
        return self.name


class Education(models.Model):
    TYPE_UNIVERSITY = "university"
    TYPE_HIGHSCHOOL = "highschool"
    TYPE_CHOICES = [(TYPE_UNIVERSITY, "University"), (TYPE_HIGHSCHOOL, "High school")]

    STATUS_STUDYING = "studying"
    STATUS_GRADUATED = "graduated"
    STATUS_CHOICES = [(STATUS_STUDYING, "Studying"), (STATUS_GRADUATED, "Graduated")]

    page_content = models.ForeignKey(PageContent, on_delete=models.CASCADE, related_name="education")
    type = models.CharField(max_length=20, choices=TYPE_CHOICES, default=TYPE_UNIVERSITY)
    field = models.CharField(max_length=255, blank=True, default="")
    institution = models.CharField(max_length=255, blank=True, default="")
    location = models.CharField(max_length=255, blank=True, null=True)
    year = models.CharField(max_length=50, blank=True, null=True)
    gpa = models.CharField(max_length=20, blank=True, null=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_STUDYING)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["id"]
        verbose_name_plural = "education"

    def __str__(self):
        return f"{self.field} @ {self.institution}"


class Experience(models.Model):
    page_content = models.ForeignKey(PageContent, on_delete=models.CASCADE, related_name="experiences")
    title = models.CharField(max_length=255)
    company = models.CharField(max_length=255, blank=True, default="")
    location = models.CharField(max_length=255, blank=True, default="")
    period = models.CharField(max_length=120, blank=True, default="")
    description = models.TextField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-id"]

    def __str__(self):
        return f"{self.title} @ {self.company}"


class Portfolio(models.Model):
    page_content = models.ForeignKey(PageContent, on_delete=models.CASCADE, related_name="portfolios")
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True, default="")
    # Relative storage key, or a legacy data: URI
    image = models.TextField(blank=True, null=True)
    link = models.CharField(max_length=500, blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-id"]

    def __str__(self):
        return self.title


class LayoutManager(models.Manager):
    def active_for(self, user=None):
        """Active layout for a user, or the global default when user is None."""
        return self.filter(user=user, is_active=True).first()


class Layout(models.Model):
    name = models.CharField(max_length=200)
    is_active = models.BooleanField(default=False)
    # Null owner = global default layout
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="layouts",
        blank=True,
        null=True,
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = LayoutManager()

    class Meta:
        ordering = ["id"]
        constraints = [
            models.UniqueConstraint(
                fields=["user"],
                condition=models.Q(is_active=True, user__isnull=False),
                name="one_active_layout_per_user",
            ),
            models.UniqueConstraint(
                fields=["is_active"],
                condition=models.Q(is_active=True, user__isnull=True),
                name="one_active_global_layout",
            ),
        ]

    def __str__(self):
        return self.name


class Widget(models.Model):
    TYPE_CHOICES = [
        ("hero", "Hero"),
        ("about", "About"),
        ("skills", "Skills"),
        ("education", "Education"),
        ("experience", "Experience"),
        ("portfolio", "Portfolio"),
        ("contact", "Contact"),
        ("image", "Image"),
        ("text", "Text"),
        ("custom", "Custom"),
    ]

    layout = models.ForeignKey(Layout, on_delete=models.CASCADE, related_name="widgets")
    type = models.CharField(max_length=30, choices=TYPE_CHOICES)
    title = models.CharField(max_length=255, blank=True, null=True)
    content = models.TextField(blank=True, null=True)
    image_url = models.TextField(blank=True, null=True)
    x = models.IntegerField(default=0)
    y = models.IntegerField(default=0)
    w = models.IntegerField(default=6)
    h = models.IntegerField(default=4)
    order = models.IntegerField(default=0)
    is_visible = models.BooleanField(default=True)
    # Style overrides (colours, alignment, padding...)
    settings = models.JSONField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        # Ties on order break by insertion
        ordering = ["order", "id"]

    def __str__(self):
        return f"{self.type} #{self.pk} ({self.layout_id})"


class ContactMessage(models.Model):
    recipient = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="contact_messages",
    )
    name = models.CharField(max_length=50)
    email = models.EmailField()
    message = models.TextField()
    is_read = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at", "-id"]

    def __str__(self):
        return f"Message from {self.name} to {self.recipient_id}"


DEFAULT_HEADER_MENU = {
    "links": [
        {"label": "หน้าแรก", "href": "/#hero"},
        {"label": "เกี่ยวกับฉัน", "href": "/#about"},
        {"label": "ทักษะ", "href": "/#skills"},
        {"label": "ผลงาน", "href": "/#portfolio"},
        {"label": "ติดต่อ", "href": "/#contact"},
    ],
    "cta": {"label": "จ้างงานเลย", "href": "/contact", "enabled": True},
}

DEFAULT_FOOTER_LINKS = [
    {"label": "งานทั้งหมด", "href": "/#portfolio"},
    {"label": "ประสบการณ์", "href": "/#experience"},
    {"label": "ติดต่อ", "href": "/#contact"},
]

DEFAULT_COLOR_TOKENS = {
    "primary_color": "#3b82f6",
    "secondary_color": "#8b5cf6",
    "accent_color": "#10b981",
    "background_color": "#ffffff",
    "text_color": "#1f2937",
    "header_bg_color": "#ffffff",
    "header_text_color": "#1f2937",
    "footer_bg_color": "#1f2937",
    "footer_text_color": "#ffffff",
}
COLOR_TOKEN_FIELDS = tuple(DEFAULT_COLOR_TOKENS)


def default_header_menu():
    return {"links": [dict(link) for link in DEFAULT_HEADER_MENU["links"]], "cta": dict(DEFAULT_HEADER_MENU["cta"])}


def default_footer_links():
    return [dict(link) for link in DEFAULT_FOOTER_LINKS]


class SiteSettingsManager(models.Manager):
    def global_settings(self):
        # Oldest global row wins if a race ever created two
        settings_row = self.filter(user__isnull=True).order_by("id").first()
        if settings_row is None:
            settings_row = self.create(user=None)
        return settings_row

    def for_user(self, user):
        """The user's own settings row, or None when they never saved any."""
        return self.filter(user=user).first()

    def effective_for(self, user):
        if user is None:
            return self.global_settings()
        return self.for_user(user) or self.global_settings()

    def editable_for(self, user):
        settings_row, _ = self.get_or_create(user=user)
        return settings_row


class SiteSettings(models.Model):
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="site_settings",
        blank=True,
        null=True,
    )
    primary_color = models.CharField(max_length=20, default=DEFAULT_COLOR_TOKENS["primary_color"])
    secondary_color = models.CharField(max_length=20, default=DEFAULT_COLOR_TOKENS["secondary_color"])
    accent_color = models.CharField(max_length=20, default=DEFAULT_COLOR_TOKENS["accent_color"])
    background_color = models.CharField(max_length=20, default=DEFAULT_COLOR_TOKENS["background_color"])
    text_color = models.CharField(max_length=20, default=DEFAULT_COLOR_TOKENS["text_color"])
    header_bg_color = models.CharField(max_length=20, default=DEFAULT_COLOR_TOKENS["header_bg_color"])
    header_text_color = models.CharField(max_length=20, default=DEFAULT_COLOR_TOKENS["header_text_color"])
    footer_bg_color = models.CharField(max_length=20, default=DEFAULT_COLOR_TOKENS["footer_bg_color"])
    footer_text_color = models.CharField(max_length=20, default=DEFAULT_COLOR_TOKENS["footer_text_color"])
    header_logo_text = models.CharField(max_length=120, default="PORTFOLIO.PRO")
    header_menu_items = models.JSONField(default=default_header_menu, blank=True, null=True)
    footer_logo_text = models.CharField(max_length=120, default="PORTFOLIO.PRO")
    footer_description = models.TextField(default="ช่วยคุณนำเสนอโปรไฟล์และผลงานอย่างมืออาชีพ")
    footer_email = models.CharField(max_length=255, default="hello@portfolio.pro")
    footer_location = models.CharField(max_length=255, default="Bangkok, Thailand")
    footer_links = models.JSONField(default=default_footer_links, blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = SiteSettingsManager()

    class Meta:
        verbose_name_plural = "site settings"

    def __str__(self):
        return f"Settings ({self.user or 'global'})"

    def color_tokens(self):
        return {field: getattr(self, field) or DEFAULT_COLOR_TOKENS[field] for field in COLOR_TOKEN_FIELDS}


class ThemePreferenceManager(models.Manager):
    def for_user(self, user):
        preference, _ = self.get_or_create(user=user)
        return preference


class ThemePreference(models.Model):
    """Per-user colour overrides; a null token inherits from the global settings."""

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="theme_preference",
    )
    primary_color = models.CharField(max_length=20, blank=True, null=True)
    secondary_color = models.CharField(max_length=20, blank=True, null=True)
    accent_color = models.CharField(max_length=20, blank=True, null=True)
    background_color = models.CharField(max_length=20, blank=True, null=True)
    text_color = models.CharField(max_length=20, blank=True, null=True)
    header_bg_color = models.CharField(max_length=20, blank=True, null=True)
    header_text_color = models.CharField(max_length=20, blank=True, null=True)
    footer_bg_color = models.CharField(max_length=20, blank=True, null=True)
    footer_text_color = models.CharField(max_length=20, blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = ThemePreferenceManager()

    def __str__(self):
        return f"Theme of {self.user}"


class EditHistory(models.Model):
    """Append-only audit row for admin edits."""

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="edit_history",
    )
    page = models.CharField(max_length=60)
    section = models.CharField(max_length=255, blank=True, null=True)
    action = models.CharField(max_length=30)
    item_id = models.IntegerField(blank=True, null=True)
    old_value = models.JSONField(blank=True, null=True)
    new_value = models.JSONField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at", "-id"]
        indexes = [models.Index(fields=["user", "page"], name="edithistory_user_page_idx")]
        verbose_name_plural = "edit history"

    def __str__(self):
        return f"{self.action} {self.page} by {self.user_id}"
