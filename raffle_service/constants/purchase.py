# raffle_service/constants/purchase.py
"""
Constants for purchase status values and the single payment channel.
"""


class PurchaseStatus:
    """Purchase lifecycle status values."""
    PENDING = "PENDING"
    PAID = "PAID"
    FAILED = "FAILED"

    # Allowed moves; PAID -> FAILED is the admin correction path.
    TRANSITIONS = {
        PENDING: {PAID, FAILED},
        PAID: {FAILED},
        FAILED: set(),
    }

    LABELS = {
        PAID: "CONFIRMADO - El pago fue validado correctamente.",
        PENDING: "PENDIENTE - El pago está en proceso de validación.",
        FAILED: "FALLIDO - Número de operación inválido o el monto es menor al costo de la rifa.",
    }

    @classmethod
    def can_transition(cls, current: str, target: str) -> bool:
        return target in cls.TRANSITIONS.get(current, set())

    @classmethod
    def label(cls, status: str) -> str:
        return cls.LABELS.get(status, "DESCONOCIDO")


# Yape is the only payment channel; confirmation is a manual admin action.
PAYMENT_METHOD = "yape"
