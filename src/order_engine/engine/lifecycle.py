"""Order Lifecycle Manager - creates orders and owns every later state change."""

import asyncio
import random
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Awaitable, Callable, TypeVar
from uuid import UUID

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from redis.asyncio.client import Pipeline

from order_engine.config import get_settings
from order_engine.engine.outbox import Outbox
from order_engine.engine.pricing import MINOR_UNIT, ZERO, PricingCalculator
from order_engine.engine.promotions import PromoCodeValidator
from order_engine.engine.stock import StockLedger, StockMovement, total_quantities
from order_engine.exceptions import (
    ConcurrencyError,
    ConflictError,
    DependencyError,
    InvalidTransition,
    NotFoundError,
    OrderEngineError,
    ValidationError,
)
from order_engine.models.customer import Customer
from order_engine.models.events import OrderEvent, OrderEventType
from order_engine.models.menu import MenuItem
from order_engine.models.order import (
    CreateOrderRequest,
    CustomerInfo,
    Order,
    OrderFilters,
    OrderLineItem,
    OrderPage,
    OrderStatus,
    OrderType,
    PaymentStatus,
    StatusChange,
)
from order_engine.models.promo import PromoApplication
from order_engine.models.restaurant import Restaurant
from order_engine.state import keys
from order_engine.state.manager import StateManager
from order_engine.state.repository import OrderRepository
from order_engine.state.workflow import PRE_PREPARATION_STATUSES, OrderTransitions
from order_engine.utils.clock import utc_now
from order_engine.utils.logging import ComponentLogger
from order_engine.utils.tracing import OrderTracer

T = TypeVar("T")


class OrderQuote(BaseModel):
    """Checkout preview: what an order would cost right now."""

    subtotal: Decimal
    tax_amount: Decimal
    delivery_fee: Decimal
    discount_amount: Decimal
    total: Decimal
    promo_code: str | None = None


@dataclass
class OrderChange:
    """Writes to commit alongside an updated order."""

    events: list[OrderEvent] = field(default_factory=list)
    release: list[OrderLineItem] = field(default_factory=list)


ApplyChange = Callable[[Pipeline, Order], Awaitable[OrderChange | None]]


class OrderLifecycleManager:
    """
    Orchestrates order creation and the order status state machine.

    Every public operation is one unit of work committed in a single Redis
    transaction together with its outbox events. Lost races and store
    failures are retried a bounded number of times with backoff; every other
    error is surfaced to the caller unchanged.
    """

    def __init__(
        self,
        state_manager: StateManager,
        repository: OrderRepository | None = None,
        pricing: PricingCalculator | None = None,
        promotions: PromoCodeValidator | None = None,
        stock: StockLedger | None = None,
        outbox: Outbox | None = None,
    ):
        self.state = state_manager
        self.settings = get_settings()
        self.repository = repository or OrderRepository(state_manager)
        self.pricing = pricing or PricingCalculator(self.settings.default_tax_rate)
        self.promotions = promotions or PromoCodeValidator(self.repository)
        self.stock = stock or StockLedger(self.repository)
        self.outbox = outbox or Outbox(state_manager)
        self.logger = ComponentLogger("order_lifecycle")

    # Creation

    async def create_order(
        self,
        restaurant_id: str,
        request: CreateOrderRequest | dict[str, Any],
    ) -> Order:
        """
        Turn a checkout request into a durable, priced, stock-adjusted order.

        Args:
            restaurant_id: Restaurant the order is placed with
            request: Creation request or its dict form

        Returns:
            The committed order with its line items

        Raises:
            ValidationError: Malformed request
            NotFoundError: Unknown restaurant or menu item
            ConflictError: Unavailable item, out of stock or promo rejected
            ConcurrencyError, DependencyError: Retries exhausted
        """
        request = self._parse_request(request)
        tracer = OrderTracer("create_order", restaurant_id)

        with tracer.trace_step("validate_request"):
            restaurant = await self._load_restaurant(restaurant_id)
            self._validate_request(restaurant, request)

        order = await self._run_with_retry(
            "create_order",
            lambda: self._create_once(restaurant, request, tracer),
        )

        self.logger.logger.debug("order_trace", **tracer.get_trace_summary())
        self.logger.log_operation(
            "order_created",
            order_id=str(order.id),
            duration_ms=tracer.elapsed_ms,
            order_number=order.order_number,
            restaurant_id=restaurant_id,
            total=str(order.total),
            promo_code=order.promo_code,
        )
        return order

    async def preview_pricing(
        self,
        restaurant_id: str,
        request: CreateOrderRequest | dict[str, Any],
    ) -> OrderQuote:
        """Price a request without reserving stock or consuming a promo code."""
        request = self._parse_request(request)
        restaurant = await self._load_restaurant(restaurant_id)
        self._validate_request(restaurant, request)

        loaded = await self.repository.load_menu_items(
            await self.state.client(), self._menu_item_ids(request)
        )
        menu_items = self._resolve_menu_items(restaurant.id, loaded)
        pricing = self.pricing.calculate(
            [(menu_items[line.menu_item_id], line.quantity) for line in request.items],
            request.order_type,
            restaurant.settings.delivery,
            restaurant.settings.tax.rate,
        )
        self._check_minimum_order(restaurant, pricing.subtotal)

        application = None
        if request.promo_code:
            customer = await self.repository.get_customer(
                restaurant.id, request.customer_info.email
            )
            application = await self.promotions.validate(
                request.promo_code,
                restaurant.id,
                pricing.subtotal,
                customer_id=customer.id if customer else None,
            )

        discount = application.discount_amount if application else ZERO
        return OrderQuote(
            subtotal=pricing.subtotal,
            tax_amount=pricing.tax_amount,
            delivery_fee=pricing.delivery_fee,
            discount_amount=discount,
            total=max(pricing.pre_discount_total - discount, ZERO),
            promo_code=application.code if application else None,
        )

    async def _create_once(
        self,
        restaurant: Restaurant,
        request: CreateOrderRequest,
        tracer: OrderTracer,
    ) -> Order:
        now = utc_now()
        order_number = await self.repository.next_order_number(now)
        menu_item_ids = self._menu_item_ids(request)

        watch = [keys.menu_item_key(i) for i in menu_item_ids]
        watch += self.stock.stock_keys(menu_item_ids)
        watch.append(keys.customer_key(restaurant.id, request.customer_info.email))

        async with self.state.pipeline(*watch) as pipe:
            with tracer.trace_step("load"):
                loaded = await self.repository.load_menu_items(pipe, menu_item_ids)
                customer = await self.repository.load_customer(
                    pipe, restaurant.id, request.customer_info.email
                )
            menu_items = self._resolve_menu_items(restaurant.id, loaded)

            with tracer.trace_step("price"):
                pricing = self.pricing.calculate(
                    [(menu_items[line.menu_item_id], line.quantity) for line in request.items],
                    request.order_type,
                    restaurant.settings.delivery,
                    restaurant.settings.tax.rate,
                )

            self._check_minimum_order(restaurant, pricing.subtotal)

            application: PromoApplication | None = None
            if request.promo_code:
                with tracer.trace_step("promo"):
                    application = await self.promotions.watch_and_validate(
                        pipe,
                        request.promo_code,
                        restaurant.id,
                        pricing.subtotal,
                        customer_id=customer.id if customer else None,
                        now=now,
                    )
            discount = application.discount_amount if application else ZERO

            movements = self.stock.plan_reservation(
                menu_items,
                total_quantities((line.menu_item_id, line.quantity) for line in request.items),
            )

            customer = self._upsert_customer(customer, restaurant.id, request.customer_info, now)
            order = Order(
                order_number=order_number,
                restaurant_id=restaurant.id,
                customer_id=customer.id,
                order_type=request.order_type,
                items=[
                    OrderLineItem(
                        menu_item_id=line.menu_item_id,
                        name=menu_items[line.menu_item_id].name,
                        quantity=line.quantity,
                        unit_price=menu_items[line.menu_item_id].price,
                        line_total=menu_items[line.menu_item_id].price * line.quantity,
                        customizations=line.customizations,
                        notes=line.notes,
                    )
                    for line in request.items
                ],
                subtotal=pricing.subtotal,
                tax_amount=pricing.tax_amount,
                delivery_fee=pricing.delivery_fee,
                discount_amount=discount,
                total=max(pricing.pre_discount_total - discount, ZERO),
                customer_info=request.customer_info,
                delivery_address=request.delivery_address,
                promo_code_id=application.promo_code_id if application else None,
                promo_code=application.code if application else None,
                stock_reserved=bool(movements),
                notes=request.notes,
                status_history=[
                    StatusChange(from_status=None, to_status=OrderStatus.PENDING, changed_at=now)
                ],
                created_at=now,
                updated_at=now,
                estimated_ready_at=now + self._estimated_duration(restaurant, request.order_type),
            )

            events = [
                self._order_event(
                    OrderEventType.ORDER_CREATED,
                    order,
                    print_ticket=self._prints_on_creation(restaurant),
                )
            ]
            events += [self._low_stock_event(order, m) for m in movements if m.crossed_low_stock]

            with tracer.trace_step("commit"):
                pipe.multi()
                self.repository.stage_customer(pipe, customer)
                self.repository.stage_order(pipe, order, is_new=True)
                self.stock.stage_reservation(pipe, movements)
                if application:
                    self.promotions.stage_usage(pipe, restaurant.id, application, customer.id)
                for event in events:
                    self.outbox.stage(pipe, event)
                await pipe.execute()

        return order

    # Status machine

    async def update_status(
        self,
        order_id: UUID | str,
        new_status: OrderStatus | str,
        restaurant_id: str | None = None,
        reason: str | None = None,
    ) -> Order:
        """Move an order along the status machine."""
        try:
            new_status = OrderStatus(new_status)
        except ValueError as e:
            raise ValidationError(f"Unknown order status: {new_status}") from e

        if new_status == OrderStatus.CANCELLED:
            return await self.cancel_order(order_id, reason=reason, restaurant_id=restaurant_id)
        if new_status == OrderStatus.REFUNDED:
            raise ValidationError("Refunds must be issued through refund_order")

        async def apply(pipe: Pipeline, order: Order) -> OrderChange:
            OrderTransitions.validate(order.status, new_status, order.order_type)
            print_ticket = False
            if new_status == OrderStatus.CONFIRMED:
                print_ticket = await self._prints_on_confirmation(order.restaurant_id)
            order.record_transition(new_status, utc_now(), reason)
            return OrderChange(
                events=[
                    self._order_event(
                        OrderEventType.ORDER_STATUS_CHANGED,
                        order,
                        to_status=new_status.value,
                        reason=reason,
                        print_ticket=print_ticket,
                    )
                ]
            )

        order = await self._run_with_retry(
            "update_status",
            lambda: self._commit_order_change(order_id, restaurant_id, apply),
        )
        self.logger.log_operation(
            "order_status_updated",
            order_id=str(order.id),
            status=order.status.value,
        )
        return order

    async def cancel_order(
        self,
        order_id: UUID | str,
        reason: str | None = None,
        restaurant_id: str | None = None,
    ) -> Order:
        """
        Cancel a non-terminal order and give its stock back exactly once.

        Cancelling an already cancelled order is rejected as an invalid
        transition, so stock can never be restored twice.
        """

        async def apply(pipe: Pipeline, order: Order) -> OrderChange:
            OrderTransitions.validate(order.status, OrderStatus.CANCELLED, order.order_type)
            release = await self._take_reserved_stock(pipe, order)
            order.record_transition(OrderStatus.CANCELLED, utc_now(), reason)
            return OrderChange(
                events=[
                    self._order_event(
                        OrderEventType.ORDER_CANCELLED,
                        order,
                        reason=reason,
                        restocked=bool(release),
                    )
                ],
                release=release,
            )

        order = await self._run_with_retry(
            "cancel_order",
            lambda: self._commit_order_change(order_id, restaurant_id, apply),
        )
        self.logger.log_operation("order_cancelled", order_id=str(order.id), reason=reason)
        return order

    async def refund_order(
        self,
        order_id: UUID | str,
        amount: Decimal | str | int,
        reason: str,
        restock: bool | None = None,
        restaurant_id: str | None = None,
    ) -> Order:
        """
        Refund all or part of an order's captured payment.

        A refund leaving less than one minor unit of the balance outstanding
        moves the order to REFUNDED and settles the balance in full.
        Stock comes back only for orders that had not started preparation,
        unless ``restock`` says otherwise. A smaller amount is a partial
        refund: it only changes the payment status and never the order
        status or stock.
        """
        amount = self._parse_amount(amount)
        if not reason or not reason.strip():
            raise ValidationError("A refund reason is required")

        async def apply(pipe: Pipeline, order: Order) -> OrderChange:
            if order.status in (OrderStatus.CANCELLED, OrderStatus.REFUNDED):
                raise InvalidTransition(
                    order.status.value,
                    OrderStatus.REFUNDED.value,
                    f"{order.status.value} is a terminal status",
                )
            if order.payment_status not in (
                PaymentStatus.COMPLETED,
                PaymentStatus.PARTIAL_REFUND,
            ):
                raise ConflictError(
                    "Order has no captured payment to refund",
                    payment_status=order.payment_status.value,
                )

            # The balance may be refunded exactly or rounded to the cent
            remaining = order.refundable_amount
            settled = remaining.quantize(MINOR_UNIT, rounding=ROUND_HALF_UP)
            if amount > max(remaining, settled):
                raise ValidationError(
                    "Refund amount exceeds the refundable balance",
                    amount=str(amount),
                    refundable=str(settled),
                )

            full_refund = remaining - amount < MINOR_UNIT
            release: list[OrderLineItem] = []
            if full_refund:
                OrderTransitions.validate(order.status, OrderStatus.REFUNDED, order.order_type)
                should_restock = (
                    restock if restock is not None else order.status in PRE_PREPARATION_STATUSES
                )
                if should_restock:
                    release = await self._take_reserved_stock(pipe, order)
                order.record_transition(OrderStatus.REFUNDED, utc_now(), reason)
                order.payment_status = PaymentStatus.REFUNDED
                order.refunded_amount = order.total
            else:
                order.payment_status = PaymentStatus.PARTIAL_REFUND
                order.updated_at = utc_now()
                order.refunded_amount += amount

            return OrderChange(
                events=[
                    self._order_event(
                        OrderEventType.ORDER_REFUNDED,
                        order,
                        amount=str(amount),
                        reason=reason,
                        full_refund=full_refund,
                        restocked=bool(release),
                        refunded_total=str(order.refunded_amount),
                    )
                ],
                release=release,
            )

        order = await self._run_with_retry(
            "refund_order",
            lambda: self._commit_order_change(order_id, restaurant_id, apply),
        )
        self.logger.log_operation(
            "order_refunded",
            order_id=str(order.id),
            amount=str(amount),
            payment_status=order.payment_status.value,
        )
        return order

    async def update_notes(
        self,
        order_id: UUID | str,
        notes: str | None,
        restaurant_id: str | None = None,
    ) -> Order:
        """Replace an order's free-text notes."""

        async def apply(pipe: Pipeline, order: Order) -> OrderChange:
            order.notes = notes
            order.updated_at = utc_now()
            return OrderChange(
                events=[self._order_event(OrderEventType.ORDER_UPDATED, order, field="notes")]
            )

        return await self._run_with_retry(
            "update_notes",
            lambda: self._commit_order_change(order_id, restaurant_id, apply),
        )

    # Payments

    async def mark_payment_succeeded(
        self,
        order_id: UUID | str,
        payment_reference: str | None = None,
    ) -> Order:
        """
        React to "payment succeeded for order X".

        Repeated notifications for the same payment are no-ops. A pending
        order is confirmed; a closed order keeps its status.
        """

        async def apply(pipe: Pipeline, order: Order) -> OrderChange | None:
            if order.payment_status in (
                PaymentStatus.COMPLETED,
                PaymentStatus.PARTIAL_REFUND,
                PaymentStatus.REFUNDED,
            ):
                return None

            order.payment_status = PaymentStatus.COMPLETED
            order.payment_reference = payment_reference or order.payment_reference
            order.updated_at = utc_now()

            confirmed = order.status == OrderStatus.PENDING
            print_ticket = False
            if confirmed:
                print_ticket = await self._prints_on_confirmation(order.restaurant_id)
                order.record_transition(OrderStatus.CONFIRMED, order.updated_at, "payment received")
            elif OrderTransitions.is_terminal(order.status):
                self.logger.logger.warning(
                    "payment_on_closed_order",
                    order_id=str(order.id),
                    status=order.status.value,
                )

            return OrderChange(
                events=[
                    self._order_event(
                        OrderEventType.PAYMENT_RECEIVED,
                        order,
                        payment_reference=order.payment_reference,
                        status_changed=confirmed,
                        print_ticket=print_ticket,
                    )
                ]
            )

        return await self._run_with_retry(
            "mark_payment_succeeded",
            lambda: self._commit_order_change(order_id, None, apply),
        )

    async def mark_payment_failed(self, order_id: UUID | str, reason: str | None = None) -> Order:
        """Record a failed payment attempt on an unpaid order."""

        async def apply(pipe: Pipeline, order: Order) -> OrderChange:
            if order.payment_status not in (PaymentStatus.PENDING, PaymentStatus.FAILED):
                raise ConflictError(
                    "Payment already captured for this order",
                    payment_status=order.payment_status.value,
                )
            order.payment_status = PaymentStatus.FAILED
            order.updated_at = utc_now()
            return OrderChange(
                events=[self._order_event(OrderEventType.PAYMENT_FAILED, order, reason=reason)]
            )

        return await self._run_with_retry(
            "mark_payment_failed",
            lambda: self._commit_order_change(order_id, None, apply),
        )

    # Queries

    async def get_order(self, order_id: UUID | str, restaurant_id: str | None = None) -> Order:
        order = await self.repository.get_order(order_id, restaurant_id)
        if order is None:
            raise NotFoundError(f"Order {order_id} not found", order_id=str(order_id))
        return order

    async def list_orders(
        self,
        restaurant_id: str,
        filters: OrderFilters | None = None,
        page: int = 1,
        page_size: int = 20,
    ) -> OrderPage:
        return await self.repository.list_orders(restaurant_id, filters, page, page_size)

    # Helpers

    async def _run_with_retry(self, operation: str, attempt_fn: Callable[[], Awaitable[T]]) -> T:
        """
        Run one unit of work, retrying lost races and store failures.

        Every lost race means a competing unit of work committed, so an
        operation contending with fewer than ``conflict_max_retries`` others
        always reaches a definite outcome. Store failures get ``max_retries``
        attempts.
        """
        conflicts = 0
        failures = 0

        while True:
            try:
                return await attempt_fn()
            except (ConcurrencyError, DependencyError) as e:
                if isinstance(e, ConcurrencyError):
                    conflicts += 1
                    exhausted = conflicts >= self.settings.conflict_max_retries
                    max_retries = self.settings.conflict_max_retries
                else:
                    failures += 1
                    exhausted = failures >= self.settings.max_retries
                    max_retries = self.settings.max_retries
                attempt = conflicts + failures

                if exhausted:
                    self.logger.log_error(e.message, operation=operation, code=e.code)
                    raise

                # Exponential backoff with full jitter
                ceiling = self.settings.retry_delay * (2 ** (attempt - 1))
                wait_time = random.uniform(0, min(ceiling, self.settings.max_retry_delay))
                self.logger.log_retry(
                    operation=operation,
                    attempt=attempt,
                    max_retries=max_retries,
                    wait_seconds=wait_time,
                    error=e.message,
                )
                await asyncio.sleep(wait_time)
            except OrderEngineError as e:
                self.logger.log_rejection(operation, e.code, e.message, details=e.details)
                raise

    async def _commit_order_change(
        self,
        order_id: UUID | str,
        restaurant_id: str | None,
        apply: ApplyChange,
    ) -> Order:
        """Read an order under watch, apply a change and commit it atomically."""
        async with self.state.pipeline(keys.order_key(order_id)) as pipe:
            order = await self.repository.load_order(pipe, order_id)
            if order is None or (restaurant_id and order.restaurant_id != restaurant_id):
                raise NotFoundError(f"Order {order_id} not found", order_id=str(order_id))

            change = await apply(pipe, order)
            if change is None:
                return order

            pipe.multi()
            self.repository.stage_order(pipe, order)
            if change.release:
                self.stock.stage_release(pipe, change.release)
            for event in change.events:
                self.outbox.stage(pipe, event)
            await pipe.execute()

        return order

    async def _take_reserved_stock(self, pipe: Pipeline, order: Order) -> list[OrderLineItem]:
        """Claim the order's reserved stock for release; empty if already released."""
        if not order.stock_reserved:
            return []
        tracked = await self.stock.tracked_items(pipe, (i.menu_item_id for i in order.items))
        order.stock_reserved = False
        return [item for item in order.items if item.menu_item_id in tracked]

    def _parse_request(self, request: CreateOrderRequest | dict[str, Any]) -> CreateOrderRequest:
        if isinstance(request, CreateOrderRequest):
            return request
        try:
            return CreateOrderRequest.model_validate(request)
        except PydanticValidationError as e:
            raise ValidationError(
                "Invalid order request",
                errors=e.errors(include_url=False, include_context=False),
            ) from e

    @staticmethod
    def _parse_amount(amount: Decimal | str | int) -> Decimal:
        try:
            value = amount if isinstance(amount, Decimal) else Decimal(str(amount))
        except InvalidOperation as e:
            raise ValidationError(f"Invalid amount: {amount}") from e
        if not value.is_finite() or value <= 0:
            raise ValidationError("Refund amount must be positive", amount=str(amount))
        return value

    async def _load_restaurant(self, restaurant_id: str) -> Restaurant:
        restaurant = await self.repository.get_restaurant(restaurant_id)
        if restaurant is None:
            raise NotFoundError("Restaurant not found", restaurant_id=restaurant_id)
        return restaurant

    @staticmethod
    def _validate_request(restaurant: Restaurant, request: CreateOrderRequest) -> None:
        if not restaurant.is_active or not restaurant.accepting_orders:
            raise ConflictError(
                "Restaurant is not accepting orders", restaurant_id=restaurant.id
            )
        if not request.items:
            raise ValidationError("Order must contain at least one item")
        if request.order_type == OrderType.DELIVERY:
            if not restaurant.settings.delivery.enabled:
                raise ValidationError("Restaurant does not offer delivery")
            if request.delivery_address is None:
                raise ValidationError("Delivery address required for delivery orders")

    @staticmethod
    def _check_minimum_order(restaurant: Restaurant, subtotal: Decimal) -> None:
        minimum = restaurant.settings.ordering.minimum_order_amount
        if subtotal < minimum:
            raise ValidationError(
                f"Minimum order amount of {minimum} required",
                minimum_order_amount=str(minimum),
                subtotal=str(subtotal),
            )

    @staticmethod
    def _menu_item_ids(request: CreateOrderRequest) -> list[str]:
        return list(dict.fromkeys(line.menu_item_id for line in request.items))

    @staticmethod
    def _resolve_menu_items(
        restaurant_id: str,
        loaded: dict[str, MenuItem | None],
    ) -> dict[str, MenuItem]:
        resolved: dict[str, MenuItem] = {}
        for menu_item_id, item in loaded.items():
            if item is None or item.restaurant_id != restaurant_id:
                raise NotFoundError(
                    f"Menu item {menu_item_id} not found", menu_item_id=menu_item_id
                )
            resolved[menu_item_id] = item
        return resolved

    @staticmethod
    def _upsert_customer(
        existing: Customer | None,
        restaurant_id: str,
        info: CustomerInfo,
        now: datetime,
    ) -> Customer:
        if existing is None:
            return Customer(
                restaurant_id=restaurant_id,
                email=info.email,
                name=info.name,
                phone=info.phone,
                total_orders=1,
                created_at=now,
                updated_at=now,
            )
        return existing.model_copy(
            update={
                "name": info.name,
                "phone": info.phone,
                "total_orders": existing.total_orders + 1,
                "updated_at": now,
            }
        )

    def _estimated_duration(self, restaurant: Restaurant, order_type: OrderType) -> timedelta:
        if order_type == OrderType.DELIVERY:
            minutes = restaurant.settings.delivery.estimated_minutes
            if minutes is None:
                minutes = self.settings.default_delivery_minutes
        else:
            minutes = restaurant.settings.ordering.pickup_estimated_minutes
            if minutes is None:
                minutes = self.settings.default_pickup_minutes
        return timedelta(minutes=minutes)

    @staticmethod
    def _prints_on_creation(restaurant: Restaurant) -> bool:
        ordering = restaurant.settings.ordering
        return ordering.kitchen_printing_enabled and not ordering.order_confirmation_required

    async def _prints_on_confirmation(self, restaurant_id: str) -> bool:
        restaurant = await self.repository.get_restaurant(restaurant_id)
        if restaurant is None:
            return False
        ordering = restaurant.settings.ordering
        return ordering.kitchen_printing_enabled and ordering.order_confirmation_required

    @staticmethod
    def _order_event(event_type: OrderEventType, order: Order, **details: Any) -> OrderEvent:
        return OrderEvent(
            event_type=event_type,
            entity_id=str(order.id),
            restaurant_id=order.restaurant_id,
            payload=order.model_dump(mode="json"),
            details={"order_number": order.order_number, **details},
        )

    @staticmethod
    def _low_stock_event(order: Order, movement: StockMovement) -> OrderEvent:
        return OrderEvent(
            event_type=OrderEventType.LOW_STOCK,
            entity_type="MenuItem",
            entity_id=movement.menu_item_id,
            restaurant_id=order.restaurant_id,
            payload={
                "menu_item_id": movement.menu_item_id,
                "name": movement.name,
                "stock_count": movement.stock_after,
                "low_stock_threshold": movement.low_stock_threshold,
            },
            details={"order_number": order.order_number},
        )
