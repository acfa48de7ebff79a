"""001: create orders table

Revision ID: 001
Revises:
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE OR REPLACE FUNCTION fn_update_timestamp()
        RETURNS TRIGGER AS $$
        BEGIN
            NEW.updated_at = NOW();
            RETURN NEW;
        END;
        $$ LANGUAGE plpgsql;
    """)
    op.execute("""
        CREATE TABLE orders (
            id                          VARCHAR(36)     PRIMARY KEY,
            customer_name               VARCHAR(200)    NOT NULL,
            client_id                   VARCHAR(64),
            supplier_id                 VARCHAR(64),
            product_name                VARCHAR(200)    NOT NULL,
            model                       VARCHAR(100)    NOT NULL DEFAULT '',
            capacity                    VARCHAR(50)     NOT NULL DEFAULT '',
            color                       VARCHAR(50)     NOT NULL DEFAULT '',
            condition                   VARCHAR(50)     NOT NULL DEFAULT '',
            order_date                  DATE            NOT NULL,
            purchase_price_cents        BIGINT          NOT NULL,
            selling_price_cents         BIGINT,
            notes                       TEXT,
            payment_method              VARCHAR(20)     NOT NULL,
            down_payment_cents          BIGINT          NOT NULL DEFAULT 0,
            installment_count           SMALLINT,
            annual_rate_bps             INT,
            uses_special_rate           BOOLEAN         NOT NULL DEFAULT FALSE,
            financed_amount_cents       BIGINT          NOT NULL DEFAULT 0,
            total_with_interest_cents   BIGINT          NOT NULL DEFAULT 0,
            installment_value_cents     BIGINT          NOT NULL DEFAULT 0,
            installments                JSONB           NOT NULL DEFAULT '[]'::jsonb,
            contract_status             VARCHAR(20),
            fulfillment_status          VARCHAR(30)     NOT NULL DEFAULT 'CREATED',
            history                     JSONB           NOT NULL DEFAULT '[]'::jsonb,
            arrival_date                DATE,
            imei                        VARCHAR(20),
            battery_health              SMALLINT,
            arrival_notes               TEXT,
            ready_for_delivery          BOOLEAN         NOT NULL DEFAULT FALSE,
            imei_blocked                BOOLEAN         NOT NULL DEFAULT FALSE,
            version                     INT             NOT NULL DEFAULT 1,
            created_at                  TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at                  TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_orders_purchase_price     CHECK (purchase_price_cents > 0),
            CONSTRAINT ck_orders_selling_price      CHECK (selling_price_cents IS NULL OR selling_price_cents > 0),
            CONSTRAINT ck_orders_payment_method     CHECK (
                payment_method IN ('CASH', 'CREDIT_CARD', 'BLU_FACILITA')
            ),
            CONSTRAINT ck_orders_down_payment       CHECK (down_payment_cents >= 0),
            CONSTRAINT ck_orders_installment_count  CHECK (installment_count IS NULL OR installment_count >= 1),
            CONSTRAINT ck_orders_rate               CHECK (annual_rate_bps IS NULL OR annual_rate_bps >= 0),
            CONSTRAINT ck_orders_financing_terms    CHECK (
                payment_method <> 'BLU_FACILITA'
                OR (installment_count IS NOT NULL AND annual_rate_bps IS NOT NULL)
            ),
            CONSTRAINT ck_orders_contract_status    CHECK (
                contract_status IS NULL
                OR contract_status IN ('EM_DIA', 'ATRASADO', 'PAGO_INTEGRALMENTE', 'CANCELADO')
            ),
            CONSTRAINT ck_orders_fulfillment_status CHECK (
                fulfillment_status IN (
                    'CREATED', 'PAYMENT_CONFIRMED', 'AWAITING_SUPPLIER_PAYMENT',
                    'PURCHASE_COMPLETED', 'IN_TRANSIT_TO_OFFICE', 'ARRIVED_AT_OFFICE',
                    'AWAITING_PACKING', 'AWAITING_INVOICE', 'AWAITING_PICKUP',
                    'SHIPPED', 'DELIVERED', 'CANCELLED'
                )
            ),
            CONSTRAINT ck_orders_battery_health     CHECK (
                battery_health IS NULL OR battery_health BETWEEN 0 AND 100
            ),
            CONSTRAINT ck_orders_installments_array CHECK (jsonb_typeof(installments) = 'array'),
            CONSTRAINT ck_orders_history_array      CHECK (jsonb_typeof(history) = 'array'),
            CONSTRAINT ck_orders_version            CHECK (version >= 1)
        );
    """)
    op.execute("CREATE INDEX idx_orders_created ON orders (created_at DESC, id DESC);")
    op.execute(
        "CREATE INDEX idx_orders_fulfillment ON orders (fulfillment_status, created_at DESC);"
    )
    op.execute("""
        CREATE INDEX idx_orders_financed
        ON orders (contract_status, created_at DESC)
        WHERE payment_method = 'BLU_FACILITA';
    """)
    op.execute("""
        CREATE TRIGGER trg_orders_updated_at
            BEFORE UPDATE ON orders
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)
    op.execute(
        "COMMENT ON TABLE orders IS 'Pedidos: dados do produto, parcelas BluFacilita e historico de status';"
    )


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS orders CASCADE;")
    op.execute("DROP FUNCTION IF EXISTS fn_update_timestamp();")
