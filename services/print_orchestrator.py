# -*- coding: utf-8 -*-
"""
طباعة مجموعة مستندات الطلب (فاتورة ضريبية، إيصال استلام، نسخة الكاشير).

Browsers throttle windows opened at the same moment, so the documents of one
order are staggered with fixed delays. The delays only order the window
opens; they do not wait for anything, since print dialogs report nothing
back. Each document is isolated: a failure is logged and the rest of the set
still prints.
"""
from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from collections import deque
from typing import Callable, Deque, List, Optional, Tuple

from services.print_dispatcher import HeadlessPresenter, PrintOptions, Presenter, print_document
from templates.print_config import FULL_INVOICE_SET, get_print_options

logger = logging.getLogger(__name__)


class Scheduler(ABC):
    """Runs a callable after a delay (seconds)."""

    @abstractmethod
    def call_later(self, delay: float, fn: Callable[[], None]) -> None:
        ...


class TimerScheduler(Scheduler):
    """Background timers; used when printing to a real browser.

    ``timers`` only holds timers that have not fired yet.
    """

    def __init__(self):
        self.timers: List[threading.Timer] = []
        self._lock = threading.Lock()

    def call_later(self, delay, fn):
        if delay <= 0:
            fn()
            return

        def run():
            try:
                fn()
            finally:
                with self._lock:
                    self.timers.remove(timer)

        timer = threading.Timer(delay, run)
        timer.daemon = True
        with self._lock:
            self.timers.append(timer)
        timer.start()


class SynchronousScheduler(Scheduler):
    """يشغّل المهام فوراً بالترتيب ويسجّل التأخير المطلوب (وضع بدون متصفح)."""

    def __init__(self, keep: int = 100):
        self.delays: Deque[float] = deque(maxlen=keep)

    def call_later(self, delay, fn):
        self.delays.append(delay)
        fn()


class PrintOrchestrator:
    """Renders documents and dispatches them to a presenter."""

    def __init__(self, renderer, presenter: Optional[Presenter] = None,
                 scheduler: Optional[Scheduler] = None, default_options: Optional[PrintOptions] = None):
        self.renderer = renderer
        self.presenter = presenter or HeadlessPresenter()
        self.scheduler = scheduler or SynchronousScheduler()
        self.default_options = default_options

    def options_for(self, document_type: str) -> PrintOptions:
        # document defaults win for kitchen tickets (no buttons, auto-close)
        if self.default_options and document_type != 'kitchen_ticket':
            return self.default_options
        return PrintOptions.from_mapping(get_print_options(document_type))

    def print_one(self, document_type: str, record, options: Optional[PrintOptions] = None):
        """Render one document and send it to the presenter. Errors propagate."""
        html = self.renderer.render(document_type, record)
        title = self.renderer.document_title(document_type, record)
        logger.info("Printing %s", title)
        return print_document(html, title, options or self.options_for(document_type), self.presenter)

    def print_kitchen_ticket(self, order, options=None):
        return self.print_one('kitchen_ticket', order, options)

    def print_tax_invoice(self, record, options=None):
        return self.print_one('tax_invoice', record, options)

    def print_customer_receipt(self, record, options=None):
        return self.print_one('customer_receipt', record, options)

    def print_cashier_copy(self, record, options=None):
        return self.print_one('cashier_copy', record, options)

    def print_sales_receipt(self, record, options=None):
        return self.print_one('sales_receipt', record, options)

    def print_employee_card(self, card, options=None):
        return self.print_one('employee_card', card, options)

    def _isolated(self, document_type: str, record) -> Callable[[], None]:
        def step():
            try:
                self.print_one(document_type, record)
            except Exception:
                logger.exception("Failed to print %s for order %s", document_type, record.order_number)
        return step

    def print_full_invoice_set(self, record, steps: Optional[List[Tuple[str, float]]] = None) -> None:
        """Tax invoice, then customer receipt (+0.5s), then cashier copy (+1s).

        Returns as soon as the steps are scheduled.
        """
        for document_type, delay in steps or FULL_INVOICE_SET:
            self.scheduler.call_later(delay, self._isolated(document_type, record))
