"""Global enums — must match DB CHECK constraints exactly.

Values are stable identifiers; `label` gives the Portuguese text shown in the
dashboard.
"""

from enum import Enum


class PaymentMethod(str, Enum):
    CASH = "CASH"
    CREDIT_CARD = "CREDIT_CARD"
    BLU_FACILITA = "BLU_FACILITA"

    @property
    def label(self) -> str:
        return _PAYMENT_METHOD_LABELS[self]


_PAYMENT_METHOD_LABELS = {
    PaymentMethod.CASH: "À vista (PIX/Dinheiro)",
    PaymentMethod.CREDIT_CARD: "Cartão de Crédito",
    PaymentMethod.BLU_FACILITA: "BluFacilita (Parcelado Loja)",
}


class PaymentChannel(str, Enum):
    """How a single client payment was received."""
    PIX = "PIX"
    BANK_TRANSFER = "BANK_TRANSFER"
    CASH = "CASH"
    CREDIT_CARD = "CREDIT_CARD"
    OTHER = "OTHER"


class InstallmentStatus(str, Enum):
    PENDING = "PENDING"
    PARTIALLY_PAID = "PARTIALLY_PAID"
    PAID = "PAID"
    OVERDUE = "OVERDUE"

    @property
    def label(self) -> str:
        return _INSTALLMENT_STATUS_LABELS[self]


_INSTALLMENT_STATUS_LABELS = {
    InstallmentStatus.PENDING: "Pendente",
    InstallmentStatus.PARTIALLY_PAID: "Pago Parcialmente",
    InstallmentStatus.PAID: "Pago",
    InstallmentStatus.OVERDUE: "Atrasado",
}

OPEN_INSTALLMENT_STATUSES = frozenset(
    {InstallmentStatus.PENDING, InstallmentStatus.PARTIALLY_PAID, InstallmentStatus.OVERDUE}
)


class ContractStatus(str, Enum):
    EM_DIA = "EM_DIA"
    ATRASADO = "ATRASADO"
    PAGO_INTEGRALMENTE = "PAGO_INTEGRALMENTE"
    CANCELADO = "CANCELADO"

    @property
    def label(self) -> str:
        return _CONTRACT_STATUS_LABELS[self]


_CONTRACT_STATUS_LABELS = {
    ContractStatus.EM_DIA: "Em dia",
    ContractStatus.ATRASADO: "Atrasado",
    ContractStatus.PAGO_INTEGRALMENTE: "Pago Integralmente",
    ContractStatus.CANCELADO: "Cancelado",
}


class FulfillmentStatus(str, Enum):
    """Delivery pipeline. Declaration order is the canonical display order."""
    CREATED = "CREATED"
    PAYMENT_CONFIRMED = "PAYMENT_CONFIRMED"
    AWAITING_SUPPLIER_PAYMENT = "AWAITING_SUPPLIER_PAYMENT"
    PURCHASE_COMPLETED = "PURCHASE_COMPLETED"
    IN_TRANSIT_TO_OFFICE = "IN_TRANSIT_TO_OFFICE"
    ARRIVED_AT_OFFICE = "ARRIVED_AT_OFFICE"
    AWAITING_PACKING = "AWAITING_PACKING"
    AWAITING_INVOICE = "AWAITING_INVOICE"
    AWAITING_PICKUP = "AWAITING_PICKUP"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"

    @property
    def label(self) -> str:
        return _FULFILLMENT_STATUS_LABELS[self]

    @property
    def rank(self) -> int:
        return _CANONICAL_ORDER.index(self)


_FULFILLMENT_STATUS_LABELS = {
    FulfillmentStatus.CREATED: "Pedido Criado",
    FulfillmentStatus.PAYMENT_CONFIRMED: "Pagamento Confirmado",
    FulfillmentStatus.AWAITING_SUPPLIER_PAYMENT: "Aguardando Pagar Fornecedor",
    FulfillmentStatus.PURCHASE_COMPLETED: "Compra Realizada",
    FulfillmentStatus.IN_TRANSIT_TO_OFFICE: "A Caminho do Escritório",
    FulfillmentStatus.ARRIVED_AT_OFFICE: "Chegou no Escritório",
    FulfillmentStatus.AWAITING_PACKING: "Aguardando Embalar",
    FulfillmentStatus.AWAITING_INVOICE: "Aguardando Gerar NF",
    FulfillmentStatus.AWAITING_PICKUP: "Aguardando Retirada",
    FulfillmentStatus.SHIPPED: "Enviado",
    FulfillmentStatus.DELIVERED: "Entregue",
    FulfillmentStatus.CANCELLED: "Cancelado",
}

_CANONICAL_ORDER = list(FulfillmentStatus)

TERMINAL_FULFILLMENT_STATUSES = frozenset(
    {FulfillmentStatus.DELIVERED, FulfillmentStatus.CANCELLED}
)
