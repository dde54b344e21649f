"""Layout resolution and bulk widget updates."""

import logging

from django.contrib.auth import get_user_model
from django.db import IntegrityError, transaction

from .models import Layout, Widget
from .serializers import WidgetSerializer

logger = logging.getLogger(__name__)

DEFAULT_WIDGETS = (
    {"type": "hero", "title": "Hero Section", "x": 0, "y": 0, "w": 12, "h": 6, "order": 0},
    {"type": "about", "title": "About Section", "x": 0, "y": 6, "w": 12, "h": 4, "order": 1},
    {"type": "education", "title": "Education & Experience", "x": 0, "y": 10, "w": 12, "h": 5, "order": 2},
    {"type": "portfolio", "title": "Portfolio", "x": 0, "y": 15, "w": 12, "h": 4, "order": 3},
    {"type": "contact", "title": "Contact", "x": 0, "y": 19, "w": 12, "h": 5, "order": 4},
)

# Fields a layout update may touch on each listed widget
WIDGET_UPDATE_FIELDS = ("x", "y", "w", "h", "order", "isVisible", "title", "content", "imageUrl", "settings")


def _create_default_layout(user):
    name = f"{user.username}'s Layout" if user is not None else "Default Layout"
    with transaction.atomic():
        layout = Layout.objects.create(name=name, is_active=True, user=user)
        Widget.objects.bulk_create(
            [Widget(layout=layout, is_visible=True, **attrs) for attrs in DEFAULT_WIDGETS]
        )
    logger.info("Created %s with %d default widgets", name, len(DEFAULT_WIDGETS))
    return layout


def resolve_layout(username=None, include_hidden=False, user=None):
    """Return the active layout for ``username`` (or ``user``), creating it on first use.

    An unknown username falls back to the global default layout.
    ``include_hidden`` is carried for callers that serialize widgets; the
    layout itself is the same either way.
    """
    owner = user
    if owner is None and username:
        owner = get_user_model().objects.filter(username=username).first()

    layout = Layout.objects.active_for(owner)
    if layout is not None:
        return layout
    try:
        return _create_default_layout(owner)
    except IntegrityError:
        # Another request created it between the lookup and the insert
        return Layout.objects.active_for(owner)


def visible_widgets(layout, include_hidden=False):
    widgets = layout.widgets.all()
    if not include_hidden:
        widgets = widgets.filter(is_visible=True)
    return widgets.order_by("order", "id")


def update_layout(layout, data):
    """Rename the layout and patch the listed widgets.

    Widgets absent from ``data["widgets"]`` are left untouched, and entries
    without an id or belonging to another layout are skipped. Each entry is
    validated with ``WidgetSerializer``; any invalid entry raises
    ``ValidationError`` and rolls back the whole update.
    """
    updated = 0
    with transaction.atomic():
        name = data.get("name")
        if name is not None:
            layout.name = name
        layout.save()

        for item in data.get("widgets") or []:
            widget_id = item.get("id")
            if not widget_id:
                continue
            widget = layout.widgets.filter(pk=widget_id).first()
            if widget is None:
                logger.debug("Skipping widget %s, not part of layout %s", widget_id, layout.pk)
                continue
            changes = {key: item[key] for key in WIDGET_UPDATE_FIELDS if key in item}
            if not changes:
                continue
            serializer = WidgetSerializer(widget, data=changes, partial=True)
            serializer.is_valid(raise_exception=True)
            serializer.save()
            updated += 1

    logger.info("Layout %s updated, %d widget(s) changed", layout.pk, updated)
    return layout


def create_layout(name=None, owner=None):
    layout = Layout.objects.create(name=name or "New Layout", is_active=False, user=owner)
    logger.info("Created inactive layout %s for %s", layout.pk, owner or "global")
    return layout
