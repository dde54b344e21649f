import json
import logging

from django.core.serializers.json import DjangoJSONEncoder
from django.db import DatabaseError, transaction

from .models import EditHistory

logger = logging.getLogger(__name__)


def _jsonable(value):
    # Snapshots may hold datetimes or Decimals from model_to_dict
    if value is None:
        return None
    return json.loads(json.dumps(value, cls=DjangoJSONEncoder))


def record_edit(user, page, action, section=None, old=None, new=None, item_id=None):
    """Append an audit row; failures are logged and never reach the caller."""
    try:
        with transaction.atomic():
            return EditHistory.objects.create(
                user=user,
                page=page,
                section=section,
                action=action,
                item_id=item_id,
                old_value=_jsonable(old),
                new_value=_jsonable(new),
            )
    except (DatabaseError, TypeError, ValueError) as exc:
        logger.warning("Could not record %s on %s for %s: %s", action, page, getattr(user, "pk", None), exc)
        return None
