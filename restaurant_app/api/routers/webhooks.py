# restaurant_app/api/routers/webhooks.py
from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from restaurant_app.api.deps import get_role_service
from restaurant_app.data.database import get_db
from restaurant_app.domain.schemas import WebhookAck
from restaurant_app.services.identity_webhook import IdentityWebhookService
from restaurant_app.services.role_service import RoleService
from restaurant_app.services.webhook_service import WebhookService

router = APIRouter(prefix="/webhooks", tags=["webhooks"])


# body czytane asynchronicznie (podpis liczony po surowych bajtach),
# a cala praca z baza / redisem / HTTP idzie do puli watkow


@router.post("/payment", response_model=WebhookAck)
async def payment_webhook(request: Request, db: Session = Depends(get_db)):
    raw_body = await request.body()
    headers = dict(request.headers)
    state = request.app.state
    svc = WebhookService(db, secret=state.settings.payment_webhook_secret, notifier=state.notifier)
    result = await run_in_threadpool(svc.handle_notification, raw_body, headers)
    return WebhookAck(order_id=result.order_id, status=result.status, changed=result.changed)


@router.post("/identity")
async def identity_webhook(request: Request, roles_svc: RoleService = Depends(get_role_service)):
    raw_body = await request.body()
    headers = dict(request.headers)
    svc = IdentityWebhookService(
        secret=request.app.state.settings.identity_webhook_secret,
        role_service=roles_svc,
    )
    assignment = await run_in_threadpool(svc.handle, raw_body, headers)
    if assignment is None:
        return {"success": True}
    return {
        "success": True,
        "role": assignment.role,
        "created": assignment.created,
        "metadataSynced": assignment.metadata_synced,
    }
