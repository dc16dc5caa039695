from sqlalchemy.orm import Session
from models.log import Log
from models.admin_action import AdminAction

def write_log(db: Session, *, user_id, action, resource, status="SUCCESS", ip=None, meta=None):
    entry = Log(user_id=user_id, action=action, resource=resource, status=status, ip=ip, meta=meta or {})
    db.add(entry)
    db.commit()


# Stage an admin action entry without committing; the caller commits it
# together with the state change it describes.
def record_admin_action(db: Session, *, admin_id, action_type, target_type, target_id,
                        reason=None, previous_state=None, new_state=None) -> AdminAction:
    entry = AdminAction(
        admin_id=admin_id,
        action_type=getattr(action_type, "value", action_type),
        target_type=getattr(target_type, "value", target_type),
        target_id=target_id,
        reason=reason,
        previous_state=previous_state,
        new_state=new_state,
    )
    db.add(entry)
    db.flush()
    return entry
