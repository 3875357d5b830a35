import base64
import json
import time
from datetime import datetime, timezone
from decimal import Decimal

from jose import jwt
from svix.webhooks import Webhook

from restaurant_app.data.models import OrderModel, UserRoleModel
from restaurant_app.domain.errors import ProviderError
from restaurant_app.services.invoice_client import Invoice
from restaurant_app.services.webhook_service import sign_payload

WEBHOOK_SECRET = "payment-webhook-secret"
JWT_KEY = "jwt-test-key"
IDENTITY_WEBHOOK_SECRET = "whsec_" + base64.b64encode(b"identity-webhook-secret").decode()

ENV = {
    "DATABASE_URL": "sqlite://",
    "PAYMENT_SECRET_KEY": "xnd_test_key",
    "PAYMENT_WEBHOOK_SECRET": WEBHOOK_SECRET,
    "IDENTITY_SECRET_KEY": "sk_test_identity",
    "IDENTITY_WEBHOOK_SECRET": IDENTITY_WEBHOOK_SECRET,
    "IDENTITY_JWT_KEY": JWT_KEY,
    "IDENTITY_JWT_ALGORITHM": "HS256",
    "PUBLIC_BASE_URL": "https://resto.test",
    "MAX_ADMINS": "5",
}


class FakePaymentClient:
    def __init__(self):
        self.calls = []
        self.fail = False

    def create_invoice(self, order_id, amount, payer_email=None, description=None):
        self.calls.append(
            {"order_id": order_id, "amount": amount, "payer_email": payer_email, "description": description}
        )
        if self.fail:
            raise ProviderError("Payment provider returned 503")
        n = len(self.calls)
        return Invoice(invoice_id=f"inv-{n}", redirect_url=f"https://checkout.test/inv-{n}")


class FakeIdentityClient:
    def __init__(self):
        self.metadata = []
        self.invitations = []
        self.fail_metadata = False

    def set_role_metadata(self, external_user_id, role):
        if self.fail_metadata:
            raise ProviderError("Identity provider metadata update failed")
        self.metadata.append((external_user_id, role))

    def create_invitation(self, email, redirect_url, role="admin"):
        self.invitations.append({"email": email, "redirect_url": redirect_url, "role": role})
        return "inv_admin_1"


class FakeVisionClient:
    def __init__(self):
        self.described = []
        self.analyzed = []
        self.result = {"name": "Nasi Goreng", "description": "Fried rice", "estimated_price": Decimal("25000")}

    def describe(self, image, name):
        self.described.append(name)
        return f"Tasty {name}"

    def analyze(self, image, name_hint=None):
        self.analyzed.append(name_hint)
        return dict(self.result)


class FakeNotifier:
    def __init__(self):
        self.paid = []

    def order_paid(self, order_id):
        self.paid.append(order_id)
        return True


def load_order(session_factory, order_id):
    with session_factory() as s:
        order = s.get(OrderModel, order_id)
        s.expunge(order)
        return order


def make_token(user_id):
    return jwt.encode({"sub": user_id}, JWT_KEY, algorithm="HS256")


def auth_headers(user_id):
    return {"Authorization": f"Bearer {make_token(user_id)}"}


def grant_role(db, user_id, role):
    db.add(UserRoleModel(external_user_id=user_id, role=role))
    db.commit()


def signed_payment(payload, secret=WEBHOOK_SECRET):
    body = json.dumps(payload).encode()
    return body, {"x-callback-signature": sign_payload(secret, body), "content-type": "application/json"}


def signed_identity(event, msg_id="msg_1", timestamp=None):
    body = json.dumps(event).encode()
    ts = int(time.time()) if timestamp is None else timestamp
    sent_at = datetime.fromtimestamp(ts, tz=timezone.utc)
    signature = Webhook(IDENTITY_WEBHOOK_SECRET).sign(msg_id, sent_at, body.decode())
    return body, {
        "svix-id": msg_id,
        "svix-timestamp": str(ts),
        "svix-signature": signature,
        "content-type": "application/json",
    }
