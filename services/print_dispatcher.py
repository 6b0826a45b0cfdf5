# -*- coding: utf-8 -*-
"""
تجهيز المستند للطباعة وإرساله إلى نافذة المتصفح.

prepare_print_html() adds the print CSS, the print/close control bar and the
auto-print script. A Presenter then puts the page in front of the printer:
BrowserPresenter opens a real browser window (falling back to a hidden
iframe host page), HeadlessPresenter keeps the page in memory.

Printing is fire-and-forget: browsers give no reliable "print finished"
signal, so nothing here waits for the dialog.
"""
from __future__ import annotations

import html as html_lib
import logging
import os
import re
import tempfile
import threading
import webbrowser
from abc import ABC, abstractmethod
from collections import deque
from dataclasses import dataclass, replace
from itertools import count
from pathlib import Path
from typing import Any, Deque, List, Mapping, Optional

from templates.print_config import PRINT_BUTTONS

logger = logging.getLogger(__name__)

PRINT_DELAY_MS = 300
CLOSE_DELAY_MS = 1000
IFRAME_PRINT_DELAY_MS = 500
IFRAME_REMOVE_DELAY_MS = 1000

_TRUE = ('1', 'true', 'yes', 'on')


def _as_bool(value, default: bool) -> bool:
    if value is None or value == '':
        return default
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in _TRUE


@dataclass(frozen=True)
class PrintOptions:
    paper_width: str = '80mm'
    auto_print: bool = True
    auto_close: bool = False
    show_print_button: bool = True

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]] = None, base: Optional["PrintOptions"] = None) -> "PrintOptions":
        """Options from JSON/query args; missing keys keep the ``base`` values."""
        base = base or cls()
        if not data:
            return base
        width = data.get('paper_width') or data.get('paperWidth') or base.paper_width
        if not re.fullmatch(r'\d+(\.\d+)?(mm|cm|in|px)', str(width)):
            raise ValueError(f"invalid paper width {width!r}")
        return replace(
            base,
            paper_width=str(width),
            auto_print=_as_bool(data.get('auto_print', data.get('autoPrint')), base.auto_print),
            auto_close=_as_bool(data.get('auto_close', data.get('autoClose')), base.auto_close),
            show_print_button=_as_bool(data.get('show_print_button', data.get('showPrintButton')), base.show_print_button),
        )


def print_styles(options: PrintOptions) -> str:
    w = options.paper_width
    return (
        '\n<style>\n'
        '  @media print {\n'
        f'    @page {{ size: {w} auto; margin: 0; }}\n'
        '    body { margin: 0; padding: 0; }\n'
        '    .no-print { display: none !important; }\n'
        f'    .invoice-container, .receipt, .ticket, .card {{ max-width: {w}; }}\n'
        '  }\n'
        '</style>\n'
    )


def print_controls() -> str:
    return (
        '\n<div class="no-print print-controls" style="text-align: center; margin-top: 20px; padding: 20px;">\n'
        '  <button type="button" onclick="window.print()" style="padding: 12px 32px; font-size: 16px; '
        'background: #b45309; color: white; border: none; border-radius: 8px; cursor: pointer; margin-left: 10px;">'
        f"{PRINT_BUTTONS['print_text_ar']}</button>\n"
        '  <button type="button" onclick="window.close()" style="padding: 12px 32px; font-size: 16px; '
        'background: #6b7280; color: white; border: none; border-radius: 8px; cursor: pointer;">'
        f"{PRINT_BUTTONS['close_text_ar']}</button>\n"
        '</div>\n'
    )


def auto_print_script(options: PrintOptions) -> str:
    close = f'setTimeout(function () {{ window.close(); }}, {CLOSE_DELAY_MS});' if options.auto_close else ''
    return (
        '\n<script data-print="auto">\n'
        'window.addEventListener("load", function () {\n'
        f'  setTimeout(function () {{ window.print(); {close} }}, {PRINT_DELAY_MS});\n'
        '});\n'
        '</script>\n'
    )


_AUTO_PRINT_RE = re.compile(r'<script data-print="auto">.*?</script>\n?', re.DOTALL)


def _insert_before(document: str, closing_tag: str, snippet: str) -> str:
    idx = document.lower().rfind(closing_tag)
    if idx == -1:
        return document + snippet
    return document[:idx] + snippet + document[idx:]


def _set_title(document: str, title: str) -> str:
    escaped = html_lib.escape(title)
    pattern = re.compile(r'<title>.*?</title>', re.IGNORECASE | re.DOTALL)
    if pattern.search(document):
        return pattern.sub(lambda _: f'<title>{escaped}</title>', document, count=1)
    return _insert_before(document, '</head>', f'<title>{escaped}</title>')


def prepare_print_html(document: str, title: str, options: Optional[PrintOptions] = None) -> str:
    """Inject print CSS, controls and the auto-print script into a document."""
    options = options or PrintOptions()
    document = _set_title(document, title)
    # print CSS goes in even when the template has its own @media print block
    document = _insert_before(document, '</head>', print_styles(options))
    # without auto-print the button bar is the only way to print
    wants_controls = options.show_print_button or not options.auto_print
    if wants_controls and '<div class="no-print' not in document:
        document = _insert_before(document, '</body>', print_controls())
    if options.auto_print:
        document = _insert_before(document, '</body>', auto_print_script(options))
    return document


@dataclass
class PrintHandle:
    """A document sent to a print surface (browser window or in-memory capture)."""
    title: str
    html: str
    options: PrintOptions
    location: Optional[str] = None


class Presenter(ABC):
    """Puts a prepared document in front of the printer."""

    @abstractmethod
    def present(self, document: str, title: str, options: PrintOptions) -> Optional[PrintHandle]:
        ...


class HeadlessPresenter(Presenter):
    """يحتفظ بالمستندات في الذاكرة ويعتبر الطباعة ناجحة (للاختبارات ووضع الكشك).

    ``keep`` caps how many recent documents stay in memory (None keeps all).
    """

    def __init__(self, keep: Optional[int] = None):
        self.printed: Deque[PrintHandle] = deque(maxlen=keep)
        self._lock = threading.Lock()

    def present(self, document, title, options):
        handle = PrintHandle(title=title, html=document, options=options)
        with self._lock:
            self.printed.append(handle)
        logger.debug("Captured print document %r (%d bytes)", title, len(document))
        return handle

    @property
    def titles(self) -> List[str]:
        return [h.title for h in self.printed]


def iframe_host_page(document: str, title: str) -> str:
    """صفحة مضيفة تطبع المستند من إطار iframe مخفي ثم تزيله."""
    # the host page triggers print itself
    document = _AUTO_PRINT_RE.sub('', document)
    srcdoc = html_lib.escape(document, quote=True)
    return (
        '<!DOCTYPE html>\n<html><head><meta charset="UTF-8">'
        f'<title>{html_lib.escape(title)}</title></head><body>\n'
        '<iframe id="print-frame" style="position: absolute; left: -9999px; top: -9999px; width: 0; height: 0; border: 0;" '
        f'srcdoc="{srcdoc}"></iframe>\n'
        '<script>\n'
        'var frame = document.getElementById("print-frame");\n'
        'frame.addEventListener("load", function () {\n'
        '  setTimeout(function () {\n'
        '    frame.contentWindow.print();\n'
        f'    setTimeout(function () {{ frame.parentNode.removeChild(frame); }}, {IFRAME_REMOVE_DELAY_MS});\n'
        f'  }}, {IFRAME_PRINT_DELAY_MS});\n'
        '});\n'
        '</script>\n</body></html>\n'
    )


class BrowserPresenter(Presenter):
    """Opens the document in a new browser window.

    When the browser refuses a new window (no browser, popup blocked), the
    document is printed from a hidden iframe in a host page opened in the
    current window instead; that path returns None.
    """

    _seq = count(1)

    def __init__(self, opener=None, fallback_opener=None, workdir: Optional[str] = None):
        self.opener = opener or webbrowser.open_new
        self.fallback_opener = fallback_opener or (lambda url: webbrowser.open(url, new=0))
        self.workdir = workdir

    def _write(self, content: str, prefix: str) -> Path:
        directory = self.workdir or tempfile.gettempdir()
        os.makedirs(directory, exist_ok=True)
        fd, path = tempfile.mkstemp(prefix=f"{prefix}-{next(self._seq)}-", suffix='.html', dir=directory)
        with os.fdopen(fd, 'w', encoding='utf-8') as f:
            f.write(content)
        return Path(path)

    def _open(self, opener, url: str) -> bool:
        try:
            return bool(opener(url))
        except webbrowser.Error as e:
            logger.info("Browser refused %s: %s", url, e)
            return False

    def present(self, document, title, options):
        path = self._write(document, 'print')
        url = path.as_uri()
        if self._open(self.opener, url):
            logger.info("Opened print window %r -> %s", title, path)
            return PrintHandle(title=title, html=document, options=options, location=url)

        logger.info("New window blocked for %r, printing through hidden iframe", title)
        host = self._write(iframe_host_page(document, title), 'print-frame')
        if not self._open(self.fallback_opener, host.as_uri()):
            logger.warning("No browser available to print %r; document left at %s", title, path)
        return None


def print_document(document: str, title: str, options: Optional[PrintOptions] = None,
                   presenter: Optional[Presenter] = None) -> Optional[PrintHandle]:
    """Prepare ``document`` for printing and hand it to ``presenter``.

    Returns the presenter's handle (None for the iframe fallback). Does not
    wait for the print dialog.
    """
    options = options or PrintOptions()
    presenter = presenter or BrowserPresenter()
    prepared = prepare_print_html(document, title, options)
    return presenter.present(prepared, title, options)
