import json
import re

from rest_framework import serializers
from django.contrib.auth import get_user_model

from .imaging import to_proxy_url, to_storage_key
from .models import (
    ContactMessage,
    Education,
    EditHistory,
    Experience,
    Layout,
    PageContent,
    Portfolio,
    SiteSettings,
    Widget,
    default_footer_links,
    default_header_menu,
)

User = get_user_model()

USERNAME_RE = re.compile(r"^[A-Z][a-zA-Z0-9_]{2,}$")
PASSWORD_RE = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d).+$")
HEX_COLOR_RE = re.compile(r"^#(?:[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$")

# camelCase API name -> model field
COLOR_FIELDS = {
    "primaryColor": "primary_color",
    "secondaryColor": "secondary_color",
    "accentColor": "accent_color",
    "backgroundColor": "background_color",
    "textColor": "text_color",
    "headerBgColor": "header_bg_color",
    "headerTextColor": "header_text_color",
    "footerBgColor": "footer_bg_color",
    "footerTextColor": "footer_text_color",
}


class StrictFieldsMixin:
    """Reject payload keys the serializer does not declare."""

    def to_internal_value(self, data):
        if hasattr(data, "keys"):
            unknown = sorted(set(data.keys()) - set(self.fields))
            if unknown:
                raise serializers.ValidationError(
                    {key: [f"ไม่รู้จักฟิลด์ {key}"] for key in unknown}
                )
        return super().to_internal_value(data)


# --- auth ---------------------------------------------------------------


class RegisterSerializer(serializers.Serializer):
    username = serializers.RegexField(
        USERNAME_RE,
        max_length=150,
        error_messages={
            "required": "กรุณากรอกชื่อผู้ใช้",
            "blank": "กรุณากรอกชื่อผู้ใช้",
            "invalid": "ชื่อผู้ใช้ต้องขึ้นต้นด้วยตัวอักษรพิมพ์ใหญ่และตามด้วยตัวอักษร ตัวเลข หรือ underscore อย่างน้อย 2 ตัว",
        },
    )
    email = serializers.EmailField(
        error_messages={
            "required": "กรุณากรอกอีเมล",
            "blank": "กรุณากรอกอีเมล",
            "invalid": "รูปแบบอีเมลไม่ถูกต้อง",
        },
    )
    password = serializers.CharField(
        min_length=6,
        write_only=True,
        trim_whitespace=False,
        error_messages={
            "required": "กรุณากรอกรหัสผ่าน",
            "blank": "กรุณากรอกรหัสผ่าน",
            "min_length": "รหัสผ่านต้องมีความยาวอย่างน้อย 6 ตัวอักษร",
        },
    )

    def validate_password(self, value):
        if not PASSWORD_RE.match(value):
            raise serializers.ValidationError(
                "รหัสผ่านต้องมีตัวอักษรพิมพ์ใหญ่ ตัวอักษรพิมพ์เล็ก และตัวเลขอย่างน้อย 1 ตัว"
            )
        return value


class LoginSerializer(serializers.Serializer):
    username = serializers.CharField(
        error_messages={"required": "กรุณากรอกชื่อผู้ใช้", "blank": "กรุณากรอกชื่อผู้ใช้"},
    )
    password = serializers.CharField(
        trim_whitespace=False,
        error_messages={"required": "กรุณากรอกรหัสผ่าน", "blank": "กรุณากรอกรหัสผ่าน"},
    )


class UserSettingsSerializer(serializers.ModelSerializer):
    allowMultipleSessions = serializers.BooleanField(source="allow_multiple_sessions", required=False)

    class Meta:
        model = User
        fields = ["allowMultipleSessions"]


# --- content / profile -------------------------------------------------------


class EducationSerializer(serializers.ModelSerializer):
    class Meta:
        model = Education
        fields = ["id", "type", "field", "institution", "location", "year", "gpa", "status"]


class ExperienceSerializer(serializers.ModelSerializer):
    class Meta:
        model = Experience
        fields = ["id", "title", "company", "location", "period", "description"]


class PortfolioSerializer(serializers.ModelSerializer):
    image = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    link = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=500)

    class Meta:
        model = Portfolio
        fields = ["id", "title", "description", "image", "link"]
        extra_kwargs = {
            "title": {"error_messages": {"required": "กรุณากรอกชื่อและคำอธิบายผลงาน", "blank": "กรุณากรอกชื่อและคำอธิบายผลงาน"}},
        }

    def validate_image(self, value):
        return to_storage_key(value) or None

    def to_representation(self, instance):
        data = super().to_representation(instance)
        data["image"] = to_proxy_url(instance.image)
        return data


class PageContentUpdateSerializer(StrictFieldsMixin, serializers.ModelSerializer):
    email = serializers.EmailField(
        required=False,
        allow_blank=True,
        error_messages={"invalid": "รูปแบบอีเมลไม่ถูกต้อง"},
    )
    heroImage = serializers.CharField(source="hero_image", required=False, allow_blank=True, allow_null=True)
    contactImage = serializers.CharField(source="contact_image", required=False, allow_blank=True, allow_null=True)

    class Meta:
        model = PageContent
        fields = [
            "name",
            "email",
            "phone",
            "location",
            "description",
            "bio",
            "achievement",
            "heroImage",
            "contactImage",
        ]
        extra_kwargs = {
            "name": {"max_length": 255, "error_messages": {"max_length": "ชื่อต้องไม่เกิน 255 ตัวอักษร"}},
            "phone": {"max_length": 50, "error_messages": {"max_length": "เบอร์โทรต้องไม่เกิน 50 ตัวอักษร"}},
            "location": {"max_length": 255, "error_messages": {"max_length": "ที่อยู่ต้องไม่เกิน 255 ตัวอักษร"}},
        }

    def _image(self, value):
        allow_data_uri = self.context.get("allow_data_uri", True)
        return to_storage_key(value, allow_data_uri=allow_data_uri) or None

    def validate_heroImage(self, value):
        return self._image(value)

    def validate_contactImage(self, value):
        return self._image(value)


class PageContentSerializer(serializers.ModelSerializer):
    heroImage = serializers.SerializerMethodField()
    contactImage = serializers.SerializerMethodField()
    skills = serializers.SerializerMethodField()
    education = EducationSerializer(many=True, read_only=True)
    experience = ExperienceSerializer(source="experiences", many=True, read_only=True)
    portfolio = PortfolioSerializer(source="portfolios", many=True, read_only=True)

    class Meta:
        model = PageContent
        fields = [
            "id",
            "name",
            "email",
            "phone",
            "location",
            "description",
            "bio",
            "achievement",
            "heroImage",
            "contactImage",
            "skills",
            "education",
            "experience",
            "portfolio",
        ]

    def get_heroImage(self, obj):
        return to_proxy_url(obj.hero_image)

    def get_contactImage(self, obj):
        return to_proxy_url(obj.contact_image)

    def get_skills(self, obj):
        return [skill.name for skill in obj.skills.all()]


class ProfileSerializer(PageContentSerializer):
    """Profile view of PageContent: education grouped by type."""

    education = serializers.SerializerMethodField()

    def get_education(self, obj):
        rows = list(obj.education.all())
        university = next((e for e in rows if e.type == Education.TYPE_UNIVERSITY), None)
        highschool = next((e for e in rows if e.type == Education.TYPE_HIGHSCHOOL), None)
        return {
            "university": {
                "field": university.field if university else "",
                "university": university.institution if university else "",
                "year": (university.year or "") if university else "",
                "gpa": (university.gpa or "") if university else "",
                "status": (university.status or Education.STATUS_STUDYING) if university else Education.STATUS_STUDYING,
            },
            "highschool": {
                "field": highschool.field if highschool else "",
                "school": highschool.institution if highschool else "",
                "gpa": (highschool.gpa or "") if highschool else "",
            },
        }


# --- layout / widgets -------------------------------------------------------


class WidgetSettingsField(serializers.JSONField):
    """A JSON object; a JSON-encoded string is decoded first."""

    default_error_messages = {
        "invalid": "settings ต้องเป็น JSON object",
        "not_object": "settings ต้องเป็น JSON object",
    }

    def to_internal_value(self, data):
        if isinstance(data, str):
            try:
                data = json.loads(data)
            except ValueError:
                self.fail("invalid")
        if data is not None and not isinstance(data, dict):
            self.fail("not_object")
        return data


class WidgetSerializer(serializers.ModelSerializer):
    layoutId = serializers.PrimaryKeyRelatedField(source="layout", queryset=Layout.objects.all(), required=False)
    imageUrl = serializers.CharField(source="image_url", required=False, allow_blank=True, allow_null=True)
    isVisible = serializers.BooleanField(source="is_visible", required=False)
    settings = WidgetSettingsField(required=False, allow_null=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = Widget
        fields = [
            "id",
            "layoutId",
            "type",
            "title",
            "content",
            "imageUrl",
            "x",
            "y",
            "w",
            "h",
            "order",
            "isVisible",
            "settings",
            "createdAt",
            "updatedAt",
        ]
        extra_kwargs = {
            "type": {"required": False},
            "title": {"required": False},
            "content": {"required": False},
        }

    def validate_imageUrl(self, value):
        return to_storage_key(value)

    def to_representation(self, instance):
        data = super().to_representation(instance)
        data["imageUrl"] = to_proxy_url(instance.image_url)
        return data


class LayoutSerializer(serializers.ModelSerializer):
    isActive = serializers.BooleanField(source="is_active", read_only=True)
    userId = serializers.IntegerField(source="user_id", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)
    widgets = serializers.SerializerMethodField()

    class Meta:
        model = Layout
        fields = ["id", "name", "isActive", "userId", "createdAt", "updatedAt", "widgets"]

    def get_widgets(self, obj):
        widgets = obj.widgets.all()
        if not self.context.get("include_hidden", False):
            widgets = widgets.filter(is_visible=True)
        return WidgetSerializer(widgets.order_by("order", "id"), many=True).data


class LayoutUpdateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=200, required=False)
    widgets = serializers.ListField(child=serializers.DictField(), required=False)


# --- contact ------------------------------------------------------------------


class ContactCreateSerializer(serializers.Serializer):
    name = serializers.CharField(
        min_length=2,
        max_length=50,
        error_messages={
            "required": "กรุณากรอกชื่อ",
            "blank": "กรุณากรอกชื่อ",
            "min_length": "ชื่อต้องมีอย่างน้อย 2 ตัวอักษร",
            "max_length": "ชื่อต้องมีอย่างน้อย 2 ตัวอักษร",
        },
    )
    email = serializers.EmailField(
        error_messages={
            "required": "กรุณากรอกอีเมล",
            "blank": "กรุณากรอกอีเมล",
            "invalid": "รูปแบบอีเมลไม่ถูกต้อง",
        },
    )
    message = serializers.CharField(
        error_messages={"required": "กรุณากรอกข้อความ", "blank": "กรุณากรอกข้อความ"},
    )
    username = serializers.CharField(
        error_messages={
            "required": "กรุณาระบุ username ของเจ้าของโปรไฟล์",
            "blank": "กรุณาระบุ username ของเจ้าของโปรไฟล์",
        },
    )


class ContactMessageSerializer(serializers.ModelSerializer):
    isRead = serializers.BooleanField(source="is_read")
    recipientId = serializers.IntegerField(source="recipient_id", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = ContactMessage
        fields = ["id", "name", "email", "message", "isRead", "recipientId", "createdAt", "updatedAt"]


class ContactUpdateSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    isRead = serializers.BooleanField()


# --- settings / theme ---------------------------------------------------------


def _json_or_default(value, default, expected):
    if isinstance(value, str):
        try:
            value = json.loads(value)
        except ValueError:
            return default
    if not isinstance(value, expected):
        return default
    return value


class SiteSettingsSerializer(serializers.ModelSerializer):
    primaryColor = serializers.CharField(source="primary_color", required=False, max_length=20)
    secondaryColor = serializers.CharField(source="secondary_color", required=False, max_length=20)
    accentColor = serializers.CharField(source="accent_color", required=False, max_length=20)
    backgroundColor = serializers.CharField(source="background_color", required=False, max_length=20)
    textColor = serializers.CharField(source="text_color", required=False, max_length=20)
    headerBgColor = serializers.CharField(source="header_bg_color", required=False, max_length=20)
    headerTextColor = serializers.CharField(source="header_text_color", required=False, max_length=20)
    footerBgColor = serializers.CharField(source="footer_bg_color", required=False, max_length=20)
    footerTextColor = serializers.CharField(source="footer_text_color", required=False, max_length=20)
    headerLogoText = serializers.CharField(source="header_logo_text", required=False, max_length=120)
    headerMenuItems = serializers.JSONField(source="header_menu_items", required=False, allow_null=True)
    footerLogoText = serializers.CharField(source="footer_logo_text", required=False, max_length=120)
    footerDescription = serializers.CharField(source="footer_description", required=False, allow_blank=True)
    footerEmail = serializers.CharField(source="footer_email", required=False, allow_blank=True)
    footerLocation = serializers.CharField(source="footer_location", required=False, allow_blank=True)
    footerLinks = serializers.JSONField(source="footer_links", required=False, allow_null=True)
    userId = serializers.IntegerField(source="user_id", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = SiteSettings
        fields = [
            "id",
            *COLOR_FIELDS,
            "headerLogoText",
            "headerMenuItems",
            "footerLogoText",
            "footerDescription",
            "footerEmail",
            "footerLocation",
            "footerLinks",
            "userId",
            "createdAt",
            "updatedAt",
        ]

    def to_representation(self, instance):
        data = super().to_representation(instance)
        data["headerMenuItems"] = _json_or_default(instance.header_menu_items, default_header_menu(), dict)
        data["footerLinks"] = _json_or_default(instance.footer_links, default_footer_links(), list)
        return data


class ThemePreferenceUpdateSerializer(StrictFieldsMixin, serializers.Serializer):
    def get_fields(self):
        fields = {}
        for api_name, model_field in COLOR_FIELDS.items():
            fields[api_name] = serializers.RegexField(
                HEX_COLOR_RE,
                source=model_field,
                required=False,
                allow_null=True,
                error_messages={
                    "invalid": f"{api_name} ต้องเป็นรหัสสี HEX เช่น #ffffff",
                    "blank": f"{api_name} ต้องเป็นรหัสสี HEX เช่น #ffffff",
                },
            )
        return fields


# --- edit history ---------------------------------------------------------------


class EditHistorySerializer(serializers.ModelSerializer):
    userId = serializers.IntegerField(source="user_id", read_only=True)
    itemId = serializers.IntegerField(source="item_id", required=False, allow_null=True)
    oldValue = serializers.JSONField(source="old_value", required=False, allow_null=True)
    newValue = serializers.JSONField(source="new_value", required=False, allow_null=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)

    class Meta:
        model = EditHistory
        fields = ["id", "userId", "page", "section", "action", "itemId", "oldValue", "newValue", "createdAt"]
        extra_kwargs = {
            "page": {"required": False},
            "action": {"required": False},
            "section": {"required": False},
        }
