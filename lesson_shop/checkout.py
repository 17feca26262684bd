from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from enum import Enum
from functools import reduce
from typing import Any, Dict, List, Optional, Tuple

from lesson_shop.client import LessonServiceClient
from lesson_shop.errors import ErrorKind, ServiceError, ShopError, ValidationError
from lesson_shop.models import CartLine, Order
from lesson_shop.session import ShopSession, View

ZIP_RE = re.compile(r"\d+", re.ASCII)

DEFAULT_SUCCESS_MESSAGE = "Order placed successfully!"


class CheckoutState(Enum):
    IDLE = "Idle"
    VALIDATING = "Validating"
    SUBMITTING = "Submitting"
    RECONCILING_INVENTORY = "ReconcilingInventory"
    COMPLETED = "Completed"
    FAILED = "Failed"


class InventoryReconciliationError(ShopError):
    def __init__(self, lesson_id: str, cause: ShopError):
        if isinstance(cause, ServiceError) and cause.error.kind is ErrorKind.DEFAULT:
            message = str(cause)
        else:
            message = f"Failed to update inventory for lesson {lesson_id}: {cause}"
        super().__init__(message)
        self.lesson_id = lesson_id
        self.cause = cause


@dataclass(slots=True, frozen=True)
class ReconciliationResult:
    """
    Итог обновления остатков по строкам корзины.

    Отката нет: updated уже записаны на сервере, skipped так и не были отправлены.
    """

    updated: Tuple[str, ...] = ()
    skipped: Tuple[str, ...] = ()
    failed_lesson_id: Optional[str] = None
    error: Optional[ShopError] = None

    @property
    def ok(self) -> bool:
        return self.failed_lesson_id is None


@dataclass(slots=True, frozen=True)
class CheckoutResult:
    state: CheckoutState
    message: str
    reconciliation: Optional[ReconciliationResult] = None

    @property
    def ok(self) -> bool:
        return self.state is CheckoutState.COMPLETED


class Step(ABC):
    state: CheckoutState

    def __init__(self, session: ShopSession, checkout_id: int):
        self.session = session
        self.checkout_id = checkout_id

    @abstractmethod
    def name(self) -> str: ...

    @abstractmethod
    def execute(self) -> None: ...

    def log(self, message: str) -> None:
        self.session.log(f"[checkout={self.checkout_id}] {message}")

    def run(self) -> None:
        self.log(f"STEP {self.name()}")
        self.execute()
        self.log(f"STEP {self.name()} OK")


class ValidateCheckout(Step):
    state = CheckoutState.VALIDATING

    def name(self) -> str:
        return "ValidateCheckout"

    def execute(self) -> None:
        customer = self.session.customer
        if customer.missing_fields():
            raise ValidationError("Please fill out all required fields before submitting the order.")
        if not ZIP_RE.fullmatch(customer.zip):
            raise ValidationError("Please enter a valid ZIP code (numbers only).")
        if self.session.cart.is_empty():
            raise ValidationError("Your cart is empty. Add an item before placing an order.")


class SubmitOrder(Step):
    state = CheckoutState.SUBMITTING

    def __init__(self, session: ShopSession, checkout_id: int, client: LessonServiceClient):
        super().__init__(session, checkout_id)
        self.client = client
        self.response: Dict[str, Any] = {}

    def name(self) -> str:
        return "SubmitOrder"

    def execute(self) -> None:
        order = Order.from_cart(self.session.customer, self.session.cart)
        self.response = self.client.create_order(order)
        self.log(f"order placed: lines={len(order.lines)} response={self.response}")


class ReconcileInventory(Step):
    state = CheckoutState.RECONCILING_INVENTORY

    def __init__(self, session: ShopSession, checkout_id: int, client: LessonServiceClient):
        super().__init__(session, checkout_id)
        self.client = client
        self.result: Optional[ReconciliationResult] = None

    def name(self) -> str:
        return "ReconcileInventory"

    def _reconcile_line(self, result: ReconciliationResult, line: CartLine) -> ReconciliationResult:
        if not result.ok:
            return replace(result, skipped=result.skipped + (line.lesson_id,))

        available = line.lesson.available_inventory
        try:
            self.client.update_inventory(line.lesson_id, available)
        except ShopError as e:
            self.log(f"inventory update failed: {line.lesson_id}: {e}")
            return replace(result, failed_lesson_id=line.lesson_id, error=e)

        self.log(f"inventory updated: {line.lesson_id} (available={available})")
        return replace(result, updated=result.updated + (line.lesson_id,))

    def execute(self) -> None:
        # Строго по очереди: следующий PUT уходит только после ответа на предыдущий.
        self.result = reduce(self._reconcile_line, self.session.cart.lines, ReconciliationResult())
        if not self.result.ok:
            raise InventoryReconciliationError(self.result.failed_lesson_id, self.result.error)


class CheckoutCoordinator:
    def __init__(self, session: ShopSession, client: LessonServiceClient):
        self.session = session
        self.client = client
        self.state = CheckoutState.IDLE
        self.history: List[CheckoutState] = [CheckoutState.IDLE]
        self.attempts = 0

    def _transition(self, state: CheckoutState) -> None:
        self.session.log(f"[checkout={self.attempts}] {self.state.value} -> {state.value}")
        self.state = state
        self.history.append(state)

    def checkout(self) -> CheckoutResult:
        self.attempts += 1
        self.state = CheckoutState.IDLE
        self.history = [CheckoutState.IDLE]

        cart = self.session.cart
        self.session.log(
            f"[checkout={self.attempts}] CHECKOUT START lines={len(cart.lines)} items={cart.total_item_count()}"
        )

        submit = SubmitOrder(self.session, self.attempts, self.client)
        reconcile = ReconcileInventory(self.session, self.attempts, self.client)
        steps: List[Step] = [ValidateCheckout(self.session, self.attempts), submit, reconcile]

        try:
            for step in steps:
                self._transition(step.state)
                step.run()
        except ShopError as e:
            self._transition(CheckoutState.FAILED)
            self.session.log(f"[checkout={self.attempts}] CHECKOUT FAILED: {e}")
            self.session.notify(str(e), logging.ERROR)
            return CheckoutResult(CheckoutState.FAILED, str(e), reconcile.result)

        message = submit.response.get("message") or DEFAULT_SUCCESS_MESSAGE
        self.session.customer.reset()
        cart.clear()
        self.session.view = View.CATALOG
        self._transition(CheckoutState.COMPLETED)
        self.session.log(f"[checkout={self.attempts}] CHECKOUT OK")
        self.session.notify(str(message))
        return CheckoutResult(CheckoutState.COMPLETED, str(message), reconcile.result)
