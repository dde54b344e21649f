import logging
import posixpath

from django.conf import settings
from django.contrib.auth import get_user_model
from django.db import transaction
from django.http import HttpResponse
from drf_spectacular.utils import OpenApiParameter, extend_schema
from PIL import Image, UnidentifiedImageError
from rest_framework import generics, status
from rest_framework.exceptions import AuthenticationFailed, NotFound, PermissionDenied, ValidationError
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.permissions import AllowAny, IsAuthenticated, IsAuthenticatedOrReadOnly
from rest_framework.response import Response
from rest_framework.views import APIView
from django_filters.rest_framework import DjangoFilterBackend

from .authentication import OptionalBearerAuthentication, issue_token
from .exceptions import Conflict, StorageObjectNotFound
from .filters import ContactMessageFilter, EditHistoryFilter
from .history import record_edit
from .imaging import UPLOADS_PREFIX, to_proxy_url
from .layouts import create_layout, resolve_layout, update_layout
from .models import (
    DEFAULT_COLOR_TOKENS,
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
    Widget,
)
from .serializers import (
    COLOR_FIELDS,
    ContactCreateSerializer,
    ContactMessageSerializer,
    ContactUpdateSerializer,
    EditHistorySerializer,
    EducationSerializer,
    ExperienceSerializer,
    LayoutSerializer,
    LayoutUpdateSerializer,
    LoginSerializer,
    PageContentSerializer,
    PageContentUpdateSerializer,
    PortfolioSerializer,
    ProfileSerializer,
    RegisterSerializer,
    SiteSettingsSerializer,
    ThemePreferenceUpdateSerializer,
    UserSettingsSerializer,
    WidgetSerializer,
)
from .storage_backends import UPLOAD_KINDS, read_object, store_upload
from .tasks import notify_contact_message
from .themes import get_theme_config, save_theme_config

logger = logging.getLogger(__name__)
User = get_user_model()

ALLOWED_IMAGE_TYPES = {
    "image/jpeg",
    "image/jpg",
    "image/png",
    "image/gif",
    "image/webp",
    "image/svg+xml",
}
IMAGE_CACHE_CONTROL = "public, max-age=31536000, immutable"


def _int_or_none(value):
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _user_or_none(username):
    if not username:
        return None
    return User.objects.filter(username=username).first()


def _content_queryset():
    return PageContent.objects.prefetch_related("skills", "education", "experiences", "portfolios")


def _content_for(user):
    content = PageContent.objects.for_user(user)
    return _content_queryset().get(pk=content.pk)


def _assert_owns_layout(user, layout):
    if layout.user_id != user.pk and not user.is_staff:
        raise PermissionDenied("คุณไม่มีสิทธิ์แก้ไข Layout นี้")


# --- health ---------------------------------------------------------------------


class HealthView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []

    @extend_schema(responses={200: None})
    def get(self, request):
        return Response({"status": "ok"})


class InfoView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []

    @extend_schema(responses={200: None})
    def get(self, request):
        return Response({
            "name": "widgetfolio",
            "environment": getattr(settings, "DJANGO_ENV", "dev"),
            "version": settings.SPECTACULAR_SETTINGS.get("VERSION", "1.0.0"),
        })


# --- auth -----------------------------------------------------------------------


class RegisterView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = [OptionalBearerAuthentication]

    @extend_schema(request=RegisterSerializer, responses={201: None})
    def post(self, request):
        s = RegisterSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data
        logger.info("Registration attempt for %s", data["username"])

        if User.objects.filter(username=data["username"]).exists():
            raise Conflict("ชื่อผู้ใช้นี้ถูกใช้งานแล้ว")
        if User.objects.filter(email__iexact=data["email"]).exists():
            raise Conflict("อีเมลนี้ถูกใช้งานแล้ว")

        with transaction.atomic():
            user = User.objects.create_user(
                username=data["username"],
                email=data["email"],
                password=data["password"],
            )
            PageContent.objects.for_user(user)

        return Response(
            {
                "success": True,
                "token": issue_token(user),
                "user": {"id": user.pk, "username": user.username},
                "message": "สมัครสมาชิกสำเร็จ",
            },
            status=status.HTTP_201_CREATED,
        )


class LoginView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = [OptionalBearerAuthentication]

    @extend_schema(request=LoginSerializer, responses={200: None})
    def post(self, request):
        s = LoginSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        username = s.validated_data["username"]
        logger.info("Login attempt for %s", username)

        user = User.objects.filter(username=username).first()
        # Same answer for unknown users and bad passwords
        if user is None or not user.is_active or not user.check_password(s.validated_data["password"]):
            raise AuthenticationFailed("ชื่อผู้ใช้หรือรหัสผ่านไม่ถูกต้อง")

        return Response({
            "success": True,
            "token": issue_token(user),
            "user": {"id": user.pk, "username": user.username},
            "message": "เข้าสู่ระบบสำเร็จ",
        })


class LogoutView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = [OptionalBearerAuthentication]

    @extend_schema(request=None, responses={200: None})
    def post(self, request):
        return Response({"success": True, "message": "ออกจากระบบสำเร็จ"})


class AuthSettingsView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(responses={200: UserSettingsSerializer})
    def get(self, request):
        return Response({"success": True, "settings": UserSettingsSerializer(request.user).data})

    @extend_schema(request=UserSettingsSerializer, responses={200: UserSettingsSerializer})
    def put(self, request):
        s = UserSettingsSerializer(request.user, data=request.data, partial=True)
        s.is_valid(raise_exception=True)
        s.save()
        return Response({"success": True, "message": "อัปเดตการตั้งค่าสำเร็จ", "settings": s.data})


# --- content --------------------------------------------------------------------


class MyContentView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(responses={200: PageContentSerializer})
    def get(self, request):
        return Response(PageContentSerializer(_content_for(request.user)).data)

    @extend_schema(request=PageContentUpdateSerializer, responses={200: None})
    def put(self, request):
        content = PageContent.objects.for_user(request.user)
        old = content.snapshot()
        s = PageContentUpdateSerializer(content, data=request.data, partial=True)
        s.is_valid(raise_exception=True)
        content = s.save()
        logger.info("Content updated for %s: %s", request.user.username, sorted(s.validated_data))
        record_edit(request.user, "content", "update", section="content", old=old, new=content.snapshot(), item_id=content.pk)
        return Response({"success": True, "message": "อัปเดตข้อมูลสำเร็จ"})


class UserContentView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = [OptionalBearerAuthentication]

    @extend_schema(responses={200: PageContentSerializer})
    def get(self, request, username):
        user = _user_or_none(username)
        if user is None:
            raise NotFound("ไม่พบข้อมูลผู้ใช้")
        return Response(PageContentSerializer(_content_for(user)).data)


# --- profile --------------------------------------------------------------------

EMPTY_PROFILE = {
    "id": None,
    "name": "",
    "email": "",
    "phone": "",
    "location": "",
    "description": "",
    "bio": "",
    "achievement": "",
    "heroImage": None,
    "contactImage": None,
    "skills": [],
    "education": {
        "university": {"field": "", "university": "", "year": "", "gpa": "", "status": Education.STATUS_STUDYING},
        "highschool": {"field": "", "school": "", "gpa": ""},
    },
    "experience": [],
    "portfolio": [],
}


class ProfileView(APIView):
    permission_classes = [IsAuthenticatedOrReadOnly]
    authentication_classes = [OptionalBearerAuthentication]

    @extend_schema(responses={200: ProfileSerializer})
    def get(self, request):
        if request.user.is_authenticated:
            content = _content_for(request.user)
        else:
            content = _content_queryset().order_by("id").first()
            if content is None:
                return Response(EMPTY_PROFILE)
        return Response(ProfileSerializer(content).data)

    @extend_schema(request=PageContentUpdateSerializer, responses={200: None})
    def put(self, request):
        content = PageContent.objects.for_user(request.user)
        old = content.snapshot()
        s = PageContentUpdateSerializer(
            content, data=request.data, partial=True, context={"allow_data_uri": False}
        )
        s.is_valid(raise_exception=True)
        content = s.save()
        logger.info("Profile updated for %s", request.user.username)
        record_edit(request.user, "profile", "update", section="profile", old=old, new=content.snapshot(), item_id=content.pk)
        return Response({"success": True, "message": "อัปเดตข้อมูลสำเร็จ"})


class SkillsView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(responses={200: None})
    def get(self, request):
        content = PageContent.objects.filter(user=request.user).first()
        if content is None:
            return Response([])
        return Response(list(content.skills.values_list("name", flat=True)))

    @extend_schema(request=None, responses={200: None})
    def put(self, request):
        skills = request.data.get("skills") or []
        if not isinstance(skills, list):
            raise ValidationError({"skills": ["skills ต้องเป็นรายการ"]})
        names = [str(name).strip() for name in skills if str(name).strip()]
        content = PageContent.objects.for_user(request.user)
        old = list(content.skills.values_list("name", flat=True))
        with transaction.atomic():
            content.skills.all().delete()
            Skill.objects.bulk_create([Skill(page_content=content, name=name) for name in names])
        logger.info("Replaced %d skill(s) for %s", len(names), request.user.username)
        record_edit(request.user, "skills", "update", section="all", old=old, new=names)
        return Response({"success": True, "message": "อัปเดตทักษะสำเร็จ"})


class OwnedCollectionView(APIView):
    """GET/POST/PUT/DELETE over one child collection of the caller's PageContent.

    PUT replaces the whole collection atomically; DELETE removes one row by
    ``?id=``.
    """

    permission_classes = [IsAuthenticated]
    model = None
    serializer_class = None
    page = None
    bulk_key = None
    item_key = None
    messages = {}

    def get_queryset(self, content):
        return self.model.objects.filter(page_content=content)

    def section_of(self, obj):
        return str(obj)

    def validate_create(self, data):
        pass

    def bulk_rows(self, request):
        items = request.data.get(self.bulk_key)
        if items is None:
            items = []
        if not isinstance(items, list):
            raise ValidationError({self.bulk_key: [f"{self.bulk_key} ต้องเป็นรายการ"]})
        s = self.serializer_class(data=items, many=True)
        s.is_valid(raise_exception=True)
        return s.validated_data

    def get(self, request):
        content = PageContent.objects.filter(user=request.user).first()
        if content is None:
            return Response([])
        return Response(self.serializer_class(self.get_queryset(content), many=True).data)

    def post(self, request):
        self.validate_create(request.data)
        s = self.serializer_class(data=request.data)
        s.is_valid(raise_exception=True)
        content = PageContent.objects.for_user(request.user)
        obj = s.save(page_content=content)
        logger.info("Created %s %s for %s", self.page, obj.pk, request.user.username)
        record_edit(request.user, self.page, "create", section=self.section_of(obj), new=s.data, item_id=obj.pk)
        return Response({"success": True, self.item_key: s.data}, status=status.HTTP_201_CREATED)

    def put(self, request):
        rows = self.bulk_rows(request)
        content = PageContent.objects.for_user(request.user)
        old = list(self.get_queryset(content).values())
        with transaction.atomic():
            self.get_queryset(content).delete()
            self.model.objects.bulk_create([self.model(page_content=content, **row) for row in rows])
        logger.info("Replaced %s with %d row(s) for %s", self.page, len(rows), request.user.username)
        record_edit(
            request.user,
            self.page,
            "update",
            section="all",
            old=old,
            new=list(self.get_queryset(content).values()),
        )
        return Response({"success": True, "message": self.messages["updated"]})

    def owned_item(self, request, raw_id, action="delete"):
        item_id = _int_or_none(raw_id)
        if item_id is None:
            raise NotFound(self.messages["missing_id"])
        obj = self.model.objects.select_related("page_content").filter(pk=item_id).first()
        if obj is None:
            raise NotFound(self.messages["not_found"])
        if obj.page_content.user_id != request.user.pk:
            raise PermissionDenied(self.messages[f"forbidden_{action}"])
        return obj

    def delete(self, request):
        obj = self.owned_item(request, request.query_params.get("id"))
        old = self.serializer_class(obj).data
        item_id = obj.pk
        obj.delete()
        logger.info("Deleted %s %s for %s", self.page, item_id, request.user.username)
        record_edit(request.user, self.page, "delete", section=self.section_of(obj), old=old, item_id=item_id)
        return Response({"success": True, "message": self.messages["deleted"]})


class EducationView(OwnedCollectionView):
    model = Education
    serializer_class = EducationSerializer
    page = "education"
    bulk_key = "education"
    item_key = "education"
    messages = {
        "updated": "อัปเดตการศึกษาสำเร็จ",
        "deleted": "ลบการศึกษาสำเร็จ",
        "missing_id": "ไม่พบ ID",
        "not_found": "ไม่พบข้อมูลการศึกษา",
        "forbidden_delete": "คุณไม่มีสิทธิ์ลบการศึกษานี้",
        "forbidden_update": "คุณไม่มีสิทธิ์แก้ไขการศึกษานี้",
    }

    def section_of(self, obj):
        return obj.institution

    def validate_create(self, data):
        if not data.get("type") or not data.get("field") or not data.get("institution"):
            raise ValidationError("กรุณากรอกประเภท สาขา และสถาบันให้ครบถ้วน")

    def bulk_rows(self, request):
        education = request.data.get("education")
        if not isinstance(education, dict):
            raise ValidationError("ไม่พบข้อมูลการศึกษา")
        rows = []
        university = education.get("university")
        if isinstance(university, dict):
            rows.append({
                "type": Education.TYPE_UNIVERSITY,
                "field": university.get("field") or "",
                "institution": university.get("university") or university.get("institution") or "",
                "year": university.get("year") or "",
                "gpa": university.get("gpa") or None,
                "status": university.get("status") or Education.STATUS_STUDYING,
            })
        highschool = education.get("highschool")
        if isinstance(highschool, dict):
            rows.append({
                "type": Education.TYPE_HIGHSCHOOL,
                "field": highschool.get("field") or "",
                "institution": highschool.get("school") or highschool.get("institution") or "",
                "gpa": highschool.get("gpa") or "",
            })
        s = EducationSerializer(data=rows, many=True)
        s.is_valid(raise_exception=True)
        return s.validated_data


class EducationItemUpdateView(EducationView):
    http_method_names = ["put", "options"]

    @extend_schema(request=EducationSerializer, responses={200: EducationSerializer})
    def put(self, request):
        raw_id = request.data.get("id")
        if not raw_id:
            raise ValidationError("ไม่พบ ID")
        obj = self.owned_item(request, raw_id, action="update")
        old = EducationSerializer(obj).data
        s = EducationSerializer(obj, data=request.data.get("education") or {}, partial=True)
        s.is_valid(raise_exception=True)
        obj = s.save()
        logger.info("Education %s updated for %s", obj.pk, request.user.username)
        record_edit(request.user, "education", "update", section=obj.institution, old=old, new=s.data, item_id=obj.pk)
        return Response({"success": True, "education": s.data})


class ExperienceView(OwnedCollectionView):
    model = Experience
    serializer_class = ExperienceSerializer
    page = "experience"
    bulk_key = "experiences"
    item_key = "experience"
    messages = {
        "updated": "อัปเดตประสบการณ์สำเร็จ",
        "deleted": "ลบประสบการณ์สำเร็จ",
        "missing_id": "ไม่พบ ID",
        "not_found": "ไม่พบประสบการณ์",
        "forbidden_delete": "คุณไม่มีสิทธิ์ลบประสบการณ์นี้",
    }

    def section_of(self, obj):
        return obj.title


class PortfolioView(OwnedCollectionView):
    model = Portfolio
    serializer_class = PortfolioSerializer
    page = "portfolio"
    bulk_key = "portfolios"
    item_key = "portfolio"
    messages = {
        "updated": "อัปเดตผลงานสำเร็จ",
        "deleted": "ลบผลงานสำเร็จ",
        "missing_id": "กรุณาระบุ ID ผลงาน",
        "not_found": "ไม่พบผลงานที่ต้องการลบ",
        "forbidden_delete": "คุณไม่มีสิทธิ์ลบผลงานนี้",
    }

    def section_of(self, obj):
        return obj.title

    def validate_create(self, data):
        if not data.get("title") or not data.get("description"):
            raise ValidationError("กรุณากรอกชื่อและคำอธิบายผลงาน")


# --- layout & widgets -----------------------------------------------------------


class LayoutView(APIView):
    permission_classes = [IsAuthenticatedOrReadOnly]
    authentication_classes = [OptionalBearerAuthentication]

    @extend_schema(
        parameters=[
            OpenApiParameter("username", str, required=False),
            OpenApiParameter("includeHidden", bool, required=False),
        ],
        responses={200: LayoutSerializer},
    )
    def get(self, request):
        include_hidden = request.query_params.get("includeHidden") == "true"
        username = request.query_params.get("username")
        if not username and request.user.is_authenticated:
            layout = resolve_layout(user=request.user)
        else:
            layout = resolve_layout(username=username)
        return Response(LayoutSerializer(layout, context={"include_hidden": include_hidden}).data)

    @extend_schema(request=LayoutUpdateSerializer, responses={201: LayoutSerializer})
    def post(self, request):
        layout = create_layout(request.data.get("name"), owner=request.user)
        return Response(LayoutSerializer(layout).data, status=status.HTTP_201_CREATED)

    @extend_schema(request=LayoutUpdateSerializer, responses={200: LayoutSerializer})
    def put(self, request):
        s = LayoutUpdateSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        layout_id = _int_or_none(request.data.get("id"))
        if layout_id is not None:
            layout = Layout.objects.filter(pk=layout_id).first()
            if layout is None:
                raise NotFound("ไม่พบ Layout")
            _assert_owns_layout(request.user, layout)
        else:
            layout = resolve_layout(user=request.user)
        layout = update_layout(layout, s.validated_data)
        return Response(LayoutSerializer(layout, context={"include_hidden": True}).data)


class WidgetsView(APIView):
    permission_classes = [IsAuthenticatedOrReadOnly]
    authentication_classes = [OptionalBearerAuthentication]

    def _owned_widget(self, request, raw_id):
        if raw_id in (None, ""):
            raise ValidationError("id is required")
        widget_id = _int_or_none(raw_id)
        if widget_id is None:
            raise ValidationError("id must be a number")
        widget = Widget.objects.select_related("layout").filter(pk=widget_id).first()
        if widget is None:
            raise NotFound("ไม่พบ Widget")
        _assert_owns_layout(request.user, widget.layout)
        return widget

    @extend_schema(parameters=[OpenApiParameter("layoutId", int, required=True)], responses={200: WidgetSerializer(many=True)})
    def get(self, request):
        raw = request.query_params.get("layoutId")
        if not raw:
            raise ValidationError("layoutId is required")
        layout_id = _int_or_none(raw)
        if layout_id is None:
            raise ValidationError("layoutId must be a number")
        widgets = Widget.objects.filter(layout_id=layout_id).order_by("order", "id")
        return Response(WidgetSerializer(widgets, many=True).data)

    @extend_schema(request=WidgetSerializer, responses={201: WidgetSerializer})
    def post(self, request):
        raw_layout = request.data.get("layoutId")
        if raw_layout in (None, "") or not request.data.get("type"):
            raise ValidationError("layoutId and type are required")
        layout_id = _int_or_none(raw_layout)
        if layout_id is None:
            raise ValidationError("layoutId must be a number")
        layout = Layout.objects.filter(pk=layout_id).first()
        if layout is None:
            raise NotFound("ไม่พบ Layout สำหรับสร้าง Widget")
        _assert_owns_layout(request.user, layout)

        payload = {key: value for key, value in request.data.items() if key not in ("layoutId", "id")}
        s = WidgetSerializer(data=payload)
        s.is_valid(raise_exception=True)
        widget = s.save(layout=layout)
        logger.info("Widget %s (%s) created on layout %s", widget.pk, widget.type, layout.pk)
        return Response(WidgetSerializer(widget).data, status=status.HTTP_201_CREATED)

    @extend_schema(request=WidgetSerializer, responses={200: WidgetSerializer})
    def put(self, request):
        widget = self._owned_widget(request, request.data.get("id"))
        payload = {key: value for key, value in request.data.items() if key not in ("layoutId", "id")}
        s = WidgetSerializer(widget, data=payload, partial=True)
        s.is_valid(raise_exception=True)
        widget = s.save()
        logger.info("Widget %s updated", widget.pk)
        return Response(WidgetSerializer(widget).data)

    @extend_schema(parameters=[OpenApiParameter("id", int, required=True)], responses={200: None})
    def delete(self, request):
        widget = self._owned_widget(request, request.query_params.get("id"))
        widget_id = widget.pk
        widget.delete()
        logger.info("Widget %s deleted", widget_id)
        return Response({"success": True})


# --- contact --------------------------------------------------------------------


class ContactView(APIView):
    authentication_classes = [OptionalBearerAuthentication]

    def get_permissions(self):
        if self.request.method == "POST":
            return [AllowAny()]
        return [IsAuthenticated()]

    def _owned_message(self, request, raw_id, missing_message):
        message = ContactMessage.objects.filter(pk=_int_or_none(raw_id), recipient=request.user).first()
        if message is None:
            raise NotFound(missing_message)
        return message

    @extend_schema(request=ContactCreateSerializer, responses={201: ContactMessageSerializer})
    def post(self, request):
        s = ContactCreateSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data
        recipient = _user_or_none(data["username"])
        if recipient is None:
            raise NotFound("ไม่พบเจ้าของโปรไฟล์ที่ระบุ")
        message = ContactMessage.objects.create(
            recipient=recipient,
            name=data["name"],
            email=data["email"],
            message=data["message"],
        )
        notify_contact_message.delay(message.pk)
        return Response(
            {
                "success": True,
                "message": "บันทึกข้อความเรียบร้อยแล้ว",
                "data": ContactMessageSerializer(message).data,
            },
            status=status.HTTP_201_CREATED,
        )

    @extend_schema(
        parameters=[OpenApiParameter("unreadOnly", bool, required=False)],
        responses={200: ContactMessageSerializer(many=True)},
    )
    def get(self, request):
        qs = ContactMessage.objects.filter(recipient=request.user)
        qs = ContactMessageFilter(request.query_params, queryset=qs).qs
        return Response(ContactMessageSerializer(qs, many=True).data)

    @extend_schema(request=ContactUpdateSerializer, responses={200: ContactMessageSerializer})
    def put(self, request):
        s = ContactUpdateSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        message = self._owned_message(
            request, s.validated_data["id"], "ไม่พบข้อความนี้หรือคุณไม่มีสิทธิ์เข้าถึง"
        )
        message.is_read = s.validated_data["isRead"]
        message.save(update_fields=["is_read", "updated_at"])
        return Response(ContactMessageSerializer(message).data)

    @extend_schema(parameters=[OpenApiParameter("id", int, required=True)], responses={204: None})
    def delete(self, request):
        raw_id = request.query_params.get("id")
        message = self._owned_message(request, raw_id, f"ไม่พบข้อความที่ต้องการลบ (ID: {raw_id})")
        message.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)


# --- site settings --------------------------------------------------------------


def _update_settings(settings_row, data):
    s = SiteSettingsSerializer(settings_row, data=data, partial=True)
    s.is_valid(raise_exception=True)
    s.save()
    return s.data


class SiteSettingsView(APIView):
    permission_classes = [IsAuthenticatedOrReadOnly]
    authentication_classes = [OptionalBearerAuthentication]

    @extend_schema(responses={200: SiteSettingsSerializer})
    def get(self, request):
        return Response(SiteSettingsSerializer(SiteSettings.objects.global_settings()).data)

    @extend_schema(request=SiteSettingsSerializer, responses={200: SiteSettingsSerializer})
    def put(self, request):
        data = _update_settings(SiteSettings.objects.global_settings(), request.data)
        logger.info("Global site settings updated by %s", request.user.username)
        return Response(data)


class MySiteSettingsView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(responses={200: SiteSettingsSerializer})
    def get(self, request):
        return Response(SiteSettingsSerializer(SiteSettings.objects.effective_for(request.user)).data)

    @extend_schema(request=SiteSettingsSerializer, responses={200: SiteSettingsSerializer})
    def put(self, request):
        data = _update_settings(SiteSettings.objects.editable_for(request.user), request.data)
        logger.info("Site settings updated for %s", request.user.username)
        return Response(data)


class UserSiteSettingsView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = [OptionalBearerAuthentication]

    @extend_schema(responses={200: SiteSettingsSerializer})
    def get(self, request, username):
        user = _user_or_none(username)
        return Response(SiteSettingsSerializer(SiteSettings.objects.effective_for(user)).data)


# --- theme config ---------------------------------------------------------------


class ThemeConfigView(APIView):
    permission_classes = [IsAuthenticatedOrReadOnly]
    authentication_classes = [OptionalBearerAuthentication]

    @extend_schema(responses={200: None})
    def get(self, request):
        return Response(get_theme_config())

    @extend_schema(request=None, responses={200: None})
    def put(self, request):
        if not isinstance(request.data, dict):
            raise ValidationError("theme config ต้องเป็น JSON object")
        return Response(save_theme_config(request.user.username, dict(request.data)))


class UserThemeConfigView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = [OptionalBearerAuthentication]

    @extend_schema(responses={200: None})
    def get(self, request, username):
        return Response(get_theme_config(username))


# --- theme preferences ----------------------------------------------------------


def _global_color_tokens():
    row = SiteSettings.objects.filter(user__isnull=True).order_by("id").first()
    if row is None:
        return dict(DEFAULT_COLOR_TOKENS)
    return row.color_tokens()


def theme_payload(user):
    fallback = _global_color_tokens()
    preference = ThemePreference.objects.filter(user=user).first() if user is not None else None
    payload = {}
    for api_name, field in COLOR_FIELDS.items():
        value = getattr(preference, field, None) if preference is not None else None
        payload[api_name] = value or fallback[field]
    payload["isCustom"] = preference is not None
    payload["updatedAt"] = preference.updated_at if preference is not None else None
    return payload


class ThemePreferenceView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(responses={200: None})
    def get(self, request):
        return Response(theme_payload(request.user))

    @extend_schema(request=ThemePreferenceUpdateSerializer, responses={200: None})
    def put(self, request):
        s = ThemePreferenceUpdateSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        if not s.validated_data:
            return Response(theme_payload(request.user))
        preference = ThemePreference.objects.for_user(request.user)
        for field, value in s.validated_data.items():
            setattr(preference, field, value)
        preference.save()
        logger.info("Theme preference updated for %s", request.user.username)
        return Response(theme_payload(request.user))


class UserThemePreferenceView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = [OptionalBearerAuthentication]

    @extend_schema(responses={200: None})
    def get(self, request, username):
        normalized = (username or "").strip().lower()
        user = User.objects.filter(username__iexact=normalized).first() if normalized else None
        return Response(theme_payload(user))


# --- uploads & image proxy ------------------------------------------------------


def _verify_raster(upload):
    try:
        with Image.open(upload) as img:
            img.verify()
    except (UnidentifiedImageError, OSError, SyntaxError, ValueError):
        raise ValidationError("Invalid image file")
    finally:
        upload.seek(0)


class UploadView(APIView):
    permission_classes = [IsAuthenticated]
    parser_classes = [MultiPartParser, FormParser, JSONParser]

    @extend_schema(request={"multipart/form-data": {"type": "object", "properties": {"file": {"type": "string", "format": "binary"}}}}, responses={200: None})
    def post(self, request, kind):
        if kind not in UPLOAD_KINDS:
            raise ValidationError(f"Invalid upload type. Allowed types: {', '.join(UPLOAD_KINDS)}")
        upload = request.FILES.get("file")
        if upload is None:
            raise ValidationError("No file provided")
        if upload.content_type not in ALLOWED_IMAGE_TYPES:
            raise ValidationError("Invalid file type. Only images are allowed.")
        if upload.size > getattr(settings, "UPLOAD_MAX_BYTES", 5 * 1024 * 1024):
            raise ValidationError("File size too large. Maximum size is 5MB.")
        if upload.content_type != "image/svg+xml":
            _verify_raster(upload)

        owner = None
        widget_id = None
        if kind == "widget":
            owner = request.query_params.get("owner") or request.data.get("owner") or request.user.username
            widget_id = _int_or_none(request.query_params.get("widgetId") or request.data.get("widgetId"))

        key = store_upload(upload, kind, owner)
        logger.info("Stored %s upload %s (%d bytes)", kind, key, upload.size)

        if widget_id is not None:
            updated = Widget.objects.filter(pk=widget_id, layout__user=request.user).update(image_url=key)
            if not updated:
                logger.warning("Upload %s not attached: widget %s not found for %s", key, widget_id, request.user.username)

        return Response({
            "success": True,
            "imageUrl": to_proxy_url(key),
            "relativePath": key,
            "fileName": upload.name,
            "fileSize": upload.size,
            "fileType": upload.content_type,
        })


class ImageProxyView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []

    @extend_schema(responses={200: None})
    def get(self, request, key):
        key = key.lstrip("/")
        if ".." in key.split("/"):
            raise NotFound("Image not found")
        key = posixpath.normpath(key)
        if not key.startswith(UPLOADS_PREFIX):
            raise NotFound("Image not found")
        try:
            body, content_type = read_object(key)
        except StorageObjectNotFound:
            raise NotFound("Image not found")
        response = HttpResponse(body, content_type=content_type)
        response["Cache-Control"] = IMAGE_CACHE_CONTROL
        response["Content-Length"] = str(len(body))
        return response


# --- edit history ---------------------------------------------------------------


class EditHistoryView(generics.ListCreateAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = EditHistorySerializer
    filter_backends = [DjangoFilterBackend]
    filterset_class = EditHistoryFilter
    pagination_class = None

    def get_queryset(self):
        return EditHistory.objects.filter(user=self.request.user)

    def list(self, request, *args, **kwargs):
        qs = self.filter_queryset(self.get_queryset())
        limit = _int_or_none(request.query_params.get("limit"))
        if limit and limit > 0:
            qs = qs[:limit]
        return Response(self.get_serializer(qs, many=True).data)

    def create(self, request, *args, **kwargs):
        if not request.data.get("page") or not request.data.get("action"):
            raise ValidationError("กรุณาระบุ page และ action")
        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)
        history = s.save(user=request.user)
        return Response({"success": True, "history": self.get_serializer(history).data}, status=status.HTTP_201_CREATED)
