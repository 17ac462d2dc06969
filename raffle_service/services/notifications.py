# raffle_service/services/notifications.py
"""
Buyer and referral-owner notifications for confirm/reject decisions.

Texts are rendered after the state change has committed. Delivery is best
effort: failures are logged and reported, never raised.
"""

import logging
from dataclasses import dataclass
from typing import Optional
from sqlalchemy.orm import Session

from raffle_service import crud
from raffle_service.core import email
from raffle_service.core.config import settings
from raffle_service.models.purchase import Purchase

logger = logging.getLogger(__name__)

UNTITLED = "Sin título"


@dataclass
class NotificationReport:
    email_message: str
    email_sent: bool
    email_error: Optional[str] = None
    email_message_referral: Optional[str] = None
    email_sent_referral: Optional[bool] = None
    email_error_referral: Optional[str] = None


def _signature() -> str:
    return (
        f"Atte. {settings.BRAND_NAME}\n"
        f"📞 Cel: {settings.SUPPORT_PHONE}\n"
        f"✉️ {settings.SUPPORT_EMAIL}"
    )


def _date(purchase: Purchase) -> str:
    created = purchase.created_at
    return f"{created.day}/{created.month}/{created.year}" if created else "-"


def confirmed_buyer_message(purchase: Purchase, raffle_title: str) -> str:
    tickets = ", ".join(purchase.ticket_codes) or "-"
    return (
        f"Hola, {purchase.name},\n\n"
        f"✅ Su pago ha sido confirmado con éxito.\n"
        f"📌 Usted ya participa en la rifa: {raffle_title}.\n"
        f"🎟️ Números de ticket: {tickets}.\n"
        f"💵 Monto pagado: S/. {purchase.amount}\n"
        f"📅 Fecha de registro: {_date(purchase)}\n\n"
        f"🎉 ¡Gracias por confiar en {settings.BRAND_NAME}! 🍀\n"
        f"Te deseamos mucha suerte en el sorteo. Muy pronto te avisaremos la fecha.\n\n"
        f"{_signature()}"
    )


def confirmed_referral_message(purchase: Purchase, raffle_title: str, owner_name: str) -> str:
    return (
        f"Felicidades!! {owner_name},\n\n"
        f"El cliente {purchase.name} ha comprado boletos de rifa usando tu código de referido "
        f"y por ello estás acumulando una comisión sobre esta venta.\n"
        f"📌 El cliente participará en el sorteo de: {raffle_title}.\n"
        f"🎟️ Cantidad de tickets: {purchase.quantity}.\n"
        f"📅 Fecha de registro: {_date(purchase)}\n\n"
        f"🎉 ¡Gracias por confiar en {settings.BRAND_NAME}! 🍀\n"
        f"Pronto serás recompensado.\n\n"
        f"{_signature()}"
    )


def rejected_buyer_message(purchase: Purchase, raffle_title: str) -> str:
    return (
        f"Estimado/a {purchase.name},\n\n"
        f"Tu compra de boletos para la rifa {raffle_title} no pudo ser procesada porque "
        f"encontramos inconsistencias en el número de operación y/o en los montos de pago.\n\n"
        f"No te preocupes, puedes revisarlo y volver a intentarlo. Si necesitas ayuda, "
        f"nuestro equipo está listo para apoyarte.\n\n"
        f"{_signature()}"
    )


def rejected_referral_message(purchase: Purchase, raffle_title: str, owner_name: str) -> str:
    return (
        f"Hola {owner_name},\n\n"
        f"Lamentamos informarte que la compra de boletos para la rifa: {raffle_title}, "
        f"fue rechazada debido a inconsistencias detectadas en el número de operación "
        f"y/o en los montos de pago.\n"
        f"Cliente: {purchase.name}\n"
        f"🎟️ Cantidad de tickets: {purchase.quantity}.\n"
        f"📅 Fecha de registro: {_date(purchase)}\n\n"
        f"{_signature()}"
    )


@dataclass(frozen=True)
class OutgoingEmail:
    to_email: str
    subject: str
    text: str


@dataclass
class NotificationPlan:
    """Fully rendered emails; holds no ORM state."""

    buyer: OutgoingEmail
    referral: Optional[OutgoingEmail] = None


def prepare_notifications(db: Session, purchase: Purchase, *, confirmed: bool) -> NotificationPlan:
    """Render the buyer and (if any) referral-owner emails. Reads only."""
    raffle_title = purchase.raffle.title if purchase.raffle else UNTITLED

    if confirmed:
        buyer = OutgoingEmail(
            purchase.email,
            f"Confirmación de Compra - {settings.BRAND_NAME}",
            confirmed_buyer_message(purchase, raffle_title),
        )
    else:
        buyer = OutgoingEmail(
            purchase.email,
            f"Compra Rechazada - {settings.BRAND_NAME}",
            rejected_buyer_message(purchase, raffle_title),
        )
    plan = NotificationPlan(buyer=buyer)

    if purchase.referral_code:
        owner = crud.referral.get_by_code(db, code=purchase.referral_code)
        if not owner:
            logger.warning(
                f"Referral {purchase.referral_code} of purchase {purchase.id} no longer exists"
            )
        elif confirmed:
            plan.referral = OutgoingEmail(
                owner.email,
                f"Confirmación de Compra - {settings.BRAND_NAME} (Referido)",
                confirmed_referral_message(purchase, raffle_title, owner.name),
            )
        else:
            plan.referral = OutgoingEmail(
                owner.email,
                f"Compra Rechazada de tu referido - {settings.BRAND_NAME}",
                rejected_referral_message(purchase, raffle_title, owner.name),
            )

    return plan


def _deliver(message: OutgoingEmail) -> dict:
    try:
        return email.send_email(message.to_email, message.subject, message.text)
    except Exception as e:
        logger.error(f"Notification to {message.to_email} failed: {e}", exc_info=True)
        return {"success": False, "error": str(e)}


def deliver_notifications(plan: NotificationPlan) -> NotificationReport:
    """Send a rendered plan. Never touches the database."""
    buyer_result = _deliver(plan.buyer)
    report = NotificationReport(
        email_message=plan.buyer.text,
        email_sent=buyer_result["success"],
        email_error=buyer_result.get("error"),
    )

    if plan.referral:
        ref_result = _deliver(plan.referral)
        report.email_message_referral = plan.referral.text
        report.email_sent_referral = ref_result["success"]
        report.email_error_referral = ref_result.get("error")

    return report


def notify_transition(db: Session, purchase: Purchase, *, confirmed: bool) -> NotificationReport:
    """
    Render, end the read transaction, then send.

    No transaction (and no SQLite write lock) is held while the email
    provider is being called.
    """
    plan = prepare_notifications(db, purchase, confirmed=confirmed)
    db.commit()
    return deliver_notifications(plan)
