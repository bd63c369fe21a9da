"""
tests/test_views.py
===================

Unit tests for the aggregations in refurb.views
"""

from refurb.models import Controller, ControllerStatus, Unit
from refurb.views import format_money, inventory_summary, status_counts, status_histogram, total_profit


def test_total_profit_example():
    assert format_money(total_profit([Unit("XBX-101", cost=50, sale=80)])) == "30.00"


def test_total_profit_empty():
    assert format_money(total_profit([])) == "0.00"


def test_status_histogram_example():
    units = [Unit("a", status="Sold"), Unit("b", status="Sold"), Unit("c", status="Intake")]
    assert status_histogram(units) == {"Sold": 2, "Intake": 1}


def test_status_counts_fills_zeroes_in_order():
    ctrls = [Controller("c1", status="Sold"), Controller("c2", status="Mystery")]
    counts = status_counts(ctrls, ControllerStatus)
    assert list(counts)[: len(ControllerStatus)] == [s.value for s in ControllerStatus]
    assert counts["Sold"] == 1
    assert counts["Intake"] == 0
    assert counts["Mystery"] == 1


def test_inventory_summary():
    units = [
        Unit("a", status="Ready to Sell", cost=10),
        Unit("b", status="Sold", cost=20, sale=60),
        Unit("c"),
    ]
    assert inventory_summary(units) == {
        "total": 3, "ready_to_sell": 1, "sold": 1, "total_profit": 30.0,
    }
