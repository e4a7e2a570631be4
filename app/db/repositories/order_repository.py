"""
OrderRepository: order persistence for the checkout pipeline.

Encapsulates creation, lookups and the narrow set of updates the processors
are allowed to make (manual metadata and the instant status transition).
"""

import logging
from datetime import UTC, datetime, timedelta
from typing import Any, Dict, List, Optional

from app.db.repositories.base import BaseRepository, log_operation, with_retry
from app.domain.models import OrderDomain, OrderStatus
from app.utils.id_utils import is_valid_uuid

logger = logging.getLogger(__name__)


class OrderRepository(BaseRepository):
    """Repository for orders."""

    TABLE_NAME = "orders"

    # Columns written on creation (id and created_at come from the store)
    INSERT_COLUMNS = (
        "order_number",
        "shop_id",
        "customer_name",
        "customer_email",
        "customer_phone",
        "delivery_first_name",
        "delivery_last_name",
        "delivery_street",
        "delivery_postcode",
        "delivery_city",
        "delivery_phone",
        "use_same_address",
        "billing_first_name",
        "billing_last_name",
        "billing_street",
        "billing_postcode",
        "billing_city",
        "product",
        "liters",
        "price_per_liter",
        "base_price",
        "delivery_fee",
        "total_amount",
        "amount",
        "payment_method",
        "status",
        "processing_mode",
        "order_token",
        "currency",
        "exchange_rate",
        "eur_amount",
    )

    # Fields the manual processor may attach to an order
    METADATA_COLUMNS = ("temp_order_number", "selected_bank_account_id")

    @log_operation()
    async def create(self, order: OrderDomain) -> OrderDomain:
        """
        Insert a new order and return it with its generated id.

        ``orders.order_number`` is unique, so a colliding number fails the
        insert with a StoreException instead of creating a duplicate.

        Args:
            order: Order to persist

        Returns:
            OrderDomain: The persisted order
        """
        data = order.to_dict()
        params = {column: data[column] for column in self.INSERT_COLUMNS}
        placeholders = ", ".join(
            "CAST(:shop_id AS uuid)" if column == "shop_id" else f":{column}" for column in self.INSERT_COLUMNS
        )

        row = await self.execute(
            f"""
            INSERT INTO orders ({', '.join(self.INSERT_COLUMNS)})
            VALUES ({placeholders})
            RETURNING *
            """,
            params,
            returning=True,
        )
        created = OrderDomain.from_dict(row)
        logger.info(f"Created order {created.order_number} with ID: {created.id}")
        return created

    @with_retry(max_attempts=3)
    @log_operation()
    async def get_by_id(self, order_id: str) -> Optional[OrderDomain]:
        """
        Fetch an order by id.

        Returns:
            OrderDomain or None if it does not exist
        """
        if not is_valid_uuid(order_id):
            return None

        row = await self.fetch_one("SELECT * FROM orders WHERE id = CAST(:order_id AS uuid)", {"order_id": order_id})
        return OrderDomain.from_dict(row) if row else None

    @log_operation()
    async def update_metadata(self, order_id: str, fields: Dict[str, Any]) -> int:
        """
        Attach manual-path metadata to an order.

        Args:
            order_id: Order UUID
            fields: Subset of METADATA_COLUMNS

        Returns:
            int: Number of updated rows
        """
        unknown = set(fields) - set(self.METADATA_COLUMNS)
        if unknown:
            raise ValueError(f"Unsupported order metadata fields: {sorted(unknown)}")
        if not fields or not is_valid_uuid(order_id):
            return 0

        set_clauses: List[str] = []
        for key in fields:
            if key == "selected_bank_account_id":
                set_clauses.append(f"{key} = CAST(:{key} AS uuid)")
            else:
                set_clauses.append(f"{key} = :{key}")

        updated = await self.execute(
            f"UPDATE orders SET {', '.join(set_clauses)} WHERE id = CAST(:order_id AS uuid)",
            {"order_id": order_id, **fields},
        )
        logger.info(f"Updated order {order_id} metadata: {sorted(fields)}")
        return updated

    @log_operation()
    async def update_status_if(
        self,
        order_id: str,
        expected_status: OrderStatus,
        new_status: OrderStatus,
        invoice_sent: Optional[bool] = None,
    ) -> bool:
        """
        Compare-and-swap the order status.

        The update only applies when the stored status still equals
        ``expected_status``.

        Args:
            order_id: Order UUID
            expected_status: Status observed by the caller
            new_status: Status to write
            invoice_sent: Optional invoice-sent flag to write together with the status

        Returns:
            bool: True if the row was updated
        """
        set_clauses = ["status = :new_status"]
        params: Dict[str, Any] = {
            "order_id": order_id,
            "expected_status": OrderStatus(expected_status).value,
            "new_status": OrderStatus(new_status).value,
        }
        if invoice_sent is not None:
            set_clauses.append("invoice_sent = :invoice_sent")
            params["invoice_sent"] = invoice_sent

        updated = await self.execute(
            f"""
            UPDATE orders SET {', '.join(set_clauses)}
            WHERE id = CAST(:order_id AS uuid) AND status = :expected_status
            """,
            params,
        )
        if updated:
            logger.info(f"Order {order_id} status {params['expected_status']} -> {params['new_status']}")
        else:
            logger.warning(
                f"Order {order_id} status was not {params['expected_status']}, "
                f"skipped transition to {params['new_status']}"
            )
        return bool(updated)

    @with_retry(max_attempts=3)
    @log_operation()
    async def count_recent_by_email(self, email: str, window_seconds: int) -> int:
        """
        Count orders placed by an e-mail address within a time window.

        Args:
            email: Normalized customer e-mail
            window_seconds: Window length

        Returns:
            int: Number of orders created within the window
        """
        since = datetime.now(UTC) - timedelta(seconds=window_seconds)
        row = await self.fetch_one(
            """
            SELECT COUNT(*) AS order_count FROM orders
            WHERE LOWER(customer_email) = :email AND created_at >= :since
            """,
            {"email": email, "since": since},
        )
        return int(row["order_count"]) if row else 0
