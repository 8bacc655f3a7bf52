import time

import pytest

from finledger.core.errors import DeadlineExceeded
from finledger.ledger import Deadline
from finledger.ledger.deadline import check_deadline


def test_never_has_no_remaining_budget():
    d = Deadline.never()
    assert d.remaining() is None
    assert not d.expired()
    d.check()


def test_after_counts_down():
    d = Deadline.after(60)
    remaining = d.remaining()
    assert remaining is not None and 0 < remaining <= 60
    d.check()


def test_elapsed_deadline_raises():
    d = Deadline(time.monotonic() - 1)
    assert d.expired()
    assert d.remaining() == 0.0
    with pytest.raises(DeadlineExceeded, match="sum_expenses"):
        d.check("sum_expenses")


def test_cancel_raises_even_without_expiry():
    d = Deadline.never()
    d.cancel()
    assert d.cancelled
    with pytest.raises(DeadlineExceeded, match="cancelled"):
        check_deadline(d, "fetch_account")


def test_check_deadline_accepts_none():
    check_deadline(None, "fetch_account")
