from typing import Optional, Any, Dict
from django.contrib.auth import get_user_model
from workforce.models import AuditEvent

User = get_user_model()

def log_action(*, actor: Optional[User], action: str, object_type: Optional[str]=None, object_id: Optional[str]=None, detail: Optional[Dict[str, Any]]=None) -> AuditEvent:
    return AuditEvent.objects.create(
        user=actor if isinstance(actor, User) and actor.pk else None,
        action=action,
        object_type=object_type, object_id=object_id,
        detail=detail or {},
    )
