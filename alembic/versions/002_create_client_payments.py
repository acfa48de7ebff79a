"""002: create client_payments table

Revision ID: 002
Revises: 001
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE client_payments (
            id                  VARCHAR(36)     PRIMARY KEY,
            order_id            VARCHAR(36)     NOT NULL REFERENCES orders(id),
            amount_cents        BIGINT          NOT NULL,
            paid_on             DATE            NOT NULL,
            method              VARCHAR(20)     NOT NULL,
            card_installments   SMALLINT,
            notes               TEXT,
            created_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_client_payments_amount    CHECK (amount_cents > 0),
            CONSTRAINT ck_client_payments_method    CHECK (
                method IN ('PIX', 'BANK_TRANSFER', 'CASH', 'CREDIT_CARD', 'OTHER')
            ),
            CONSTRAINT ck_client_payments_card      CHECK (
                card_installments IS NULL
                OR (method = 'CREDIT_CARD' AND card_installments BETWEEN 2 AND 12)
            )
        );
    """)
    op.execute(
        "CREATE INDEX idx_client_payments_order ON client_payments (order_id, paid_on, created_at);"
    )
    # Payments are append-only
    op.execute("""
        CREATE OR REPLACE FUNCTION fn_client_payments_immutable()
        RETURNS TRIGGER AS $$
        BEGIN
            RAISE EXCEPTION 'client_payments rows are immutable';
        END;
        $$ LANGUAGE plpgsql;
    """)
    op.execute("""
        CREATE TRIGGER trg_client_payments_immutable
            BEFORE UPDATE OR DELETE ON client_payments
            FOR EACH ROW EXECUTE FUNCTION fn_client_payments_immutable();
    """)


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS client_payments CASCADE;")
    op.execute("DROP FUNCTION IF EXISTS fn_client_payments_immutable();")
