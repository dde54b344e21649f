import django_filters

from .models import ContactMessage, EditHistory


class ContactMessageFilter(django_filters.FilterSet):
    unreadOnly = django_filters.BooleanFilter(method="filter_unread_only")

    class Meta:
        model = ContactMessage
        fields = []

    def filter_unread_only(self, queryset, name, value):
        if value:
            return queryset.filter(is_read=False)
        return queryset


class EditHistoryFilter(django_filters.FilterSet):
    page = django_filters.CharFilter(field_name="page")
    action = django_filters.CharFilter(field_name="action")

    class Meta:
        model = EditHistory
        fields = ["page", "action"]
