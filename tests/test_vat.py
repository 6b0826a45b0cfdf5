# -*- coding: utf-8 -*-
from decimal import Decimal
from itertools import product

import pytest

from utils.vat import breakdown_for, compute_vat_breakdown, format_money, format_percent, to_decimal


def test_scenario_114_total():
    b = compute_vat_breakdown(Decimal('114.00'))
    assert b.net_before_vat == Decimal('99.13')
    assert b.vat_amount == Decimal('14.87')
    assert b.total == Decimal('114.00')
    assert b.subtotal_before_discounts == Decimal('99.13')
    assert not b.has_discounts


@pytest.mark.parametrize('total', ['114.00', '0.01', '57.50', '10', '1234.56', '999.99'])
@pytest.mark.parametrize('items_discount,promo,invoice', list(product(['0', '7.35'], ['0', '23'], ['0', '16'])))
def test_net_plus_vat_equals_total(total, items_discount, promo, invoice):
    b = compute_vat_breakdown(total, items_discount=items_discount, promo_discount=promo, invoice_discount=invoice)
    assert b.net_before_vat + b.vat_amount == Decimal(total).quantize(Decimal('0.01'))


def test_discounts_are_shown_ex_vat(full_record):
    b = breakdown_for(full_record)
    assert b.net_before_vat == Decimal('150.00')
    assert b.vat_amount == Decimal('22.50')
    assert b.items_discount_ex_vat == Decimal('10.00')
    assert b.promo_discount_ex_vat == Decimal('20.00')
    assert b.invoice_discount_ex_vat == Decimal('13.91')
    assert b.subtotal_before_discounts == Decimal('193.91')
    assert b.rate_percent == '15'


def test_custom_rate():
    b = compute_vat_breakdown('105', rate='0.05')
    assert b.net_before_vat == Decimal('100.00')
    assert b.vat_amount == Decimal('5.00')
    assert b.rate_percent == '5'


def test_negative_rate_rejected():
    with pytest.raises(ValueError):
        compute_vat_breakdown('10', rate='-0.1')


def test_formatting():
    assert format_money(Decimal('12.3')) == '12.30'
    assert format_money('0.005') == '0.01'
    assert format_money(None) == '0.00'
    assert format_percent(Decimal('10.0')) == '10'
    assert to_decimal(0.1) == Decimal('0.1')


def test_to_decimal_rejects_garbage():
    with pytest.raises(ValueError):
        to_decimal('twelve')


@pytest.mark.parametrize('value', ['NaN', 'Infinity', '-inf', Decimal('Infinity'), float('nan'), '1e30', True])
def test_to_decimal_rejects_non_finite_and_huge(value):
    with pytest.raises(ValueError):
        to_decimal(value)


def test_to_decimal_accepts_large_but_sane_amounts():
    assert to_decimal('999999999.99') == Decimal('999999999.99')
    assert format_money('-0.5') == '-0.50'
