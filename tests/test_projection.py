"""Tests for cash-flow projection."""

from dataclasses import replace
from datetime import date, timedelta
from decimal import Decimal

import pytest

from billcast.domain.entities import (
    CreditCardPayment,
    FinanceSnapshot,
    IncomeFrequency,
    ObligationSources,
    Paycheck,
    PaycheckConfig,
    SavingsPayment,
)
from billcast.domain.errors import MissingDependencyError
from billcast.domain.projection import (
    ProjectionService,
    next_paycheck_overview,
    project_cash_flow,
    thirty_day_outlook,
)


def _paycheck(day, amount="2000"):
    return Paycheck(id=f"p-{day.isoformat()}", amount=Decimal(amount), payment_date=day)


def _savings(day, amount="100"):
    return SavingsPayment(id=f"s-{day.isoformat()}", amount=Decimal(amount), payment_date=day)


class TestProjectCashFlow:
    def test_single_period_balance(self, make_one_time_bill, categories):
        bills = (
            make_one_time_bill(id="a", amount="500", due=date(2024, 3, 5)),
            make_one_time_bill(id="b", amount="300", due=date(2024, 3, 20)),
        )
        sources = ObligationSources(bills=bills, categories=categories)

        periods = project_cash_flow(
            Decimal("1000"),
            sources,
            [_paycheck(date(2024, 3, 1))],
            window_start=date(2024, 3, 1),
            window_months=1,
        )

        assert len(periods) == 1
        assert periods[0].obligations_total == Decimal("800")
        assert periods[0].ending_balance == Decimal("2200")

    def test_periods_are_half_open(self, make_one_time_bill, categories):
        on_second_payday = make_one_time_bill(id="edge", amount="100", due=date(2024, 3, 15))
        sources = ObligationSources(bills=(on_second_payday,), categories=categories)

        periods = project_cash_flow(
            Decimal("0"),
            sources,
            [_paycheck(date(2024, 3, 1)), _paycheck(date(2024, 3, 15))],
            window_start=date(2024, 3, 1),
            window_months=1,
        )

        assert periods[0].period_end == date(2024, 3, 15)
        assert periods[0].obligations == ()
        assert [occ.id for occ in periods[1].obligations] == ["edge"]
        assert periods[1].period_end == date(2024, 4, 1)

    def test_balance_carries_and_is_conserved(self, make_bill, categories):
        rent = make_bill(id="rent", amount="1200", day_of_month=1, start=date(2024, 1, 1))
        phone = make_bill(id="phone", amount="80", day_of_month=20, start=date(2024, 1, 20))
        sources = ObligationSources(bills=(rent, phone), categories=categories)
        paychecks = [_paycheck(date(2024, 3, 1)), _paycheck(date(2024, 3, 15)), _paycheck(date(2024, 4, 1))]

        periods = project_cash_flow(
            Decimal("500"),
            sources,
            paychecks,
            window_start=date(2024, 3, 1),
            window_months=2,
            savings_payments=[_savings(date(2024, 3, 16)), _savings(date(2024, 5, 2))],
        )

        assert [p.ending_balance for p in periods] == [
            Decimal("1300"),
            Decimal("3120"),
            Decimal("3840"),
        ]
        for previous, current in zip(periods, periods[1:]):
            assert current.starting_balance == previous.ending_balance
        for period in periods:
            assert period.ending_balance == (
                period.starting_balance
                + period.paycheck.amount
                - period.obligations_total
                - period.savings_total
            )

    def test_savings_toggle(self, categories):
        sources = ObligationSources(categories=categories)
        paychecks = [_paycheck(date(2024, 3, 1))]
        savings = [_savings(date(2024, 3, 10), "250")]

        with_savings = project_cash_flow(
            Decimal("0"), sources, paychecks, date(2024, 3, 1), 1, savings, include_savings=True
        )
        without_savings = project_cash_flow(
            Decimal("0"), sources, paychecks, date(2024, 3, 1), 1, savings, include_savings=False
        )

        assert with_savings[0].ending_balance == Decimal("1750")
        assert without_savings[0].ending_balance == Decimal("2000")
        assert without_savings[0].savings_payments == ()

    def test_credit_card_duplicates_counted_once(self, make_one_time_bill, categories):
        first = make_one_time_bill(id="cc1", amount="150", due=date(2024, 3, 5), category_id="c-cc")
        second = make_one_time_bill(id="cc2", amount="150", due=date(2024, 3, 5), category_id="c-cc")
        sources = ObligationSources(bills=(first, second), categories=categories)

        periods = project_cash_flow(
            Decimal("0"), sources, [_paycheck(date(2024, 3, 1))], date(2024, 3, 1), 1
        )

        assert [occ.id for occ in periods[0].obligations] == ["cc1"]
        assert periods[0].ending_balance == Decimal("1850")

    def test_paychecks_outside_window_are_ignored(self, categories):
        sources = ObligationSources(categories=categories)
        paychecks = [_paycheck(date(2024, 2, 28)), _paycheck(date(2024, 3, 10)), _paycheck(date(2024, 4, 1))]

        periods = project_cash_flow(Decimal("0"), sources, paychecks, date(2024, 3, 1), 1)

        assert [p.paycheck.payment_date for p in periods] == [date(2024, 3, 10)]

    def test_no_paychecks_in_window(self, categories):
        with pytest.raises(MissingDependencyError, match="No paychecks found in the next 6 months"):
            project_cash_flow(
                Decimal("0"), ObligationSources(categories=categories), [], date(2024, 3, 1)
            )


class TestNextPaycheckOverview:
    def test_unpaid_bills_reduce_projected_balance(
        self, make_one_time_bill, categories, checking_account
    ):
        bills = (
            make_one_time_bill(id="today", amount="40", due=date(2024, 3, 10)),
            make_one_time_bill(id="paid", amount="90", due=date(2024, 3, 12), is_paid=True),
            make_one_time_bill(id="payday", amount="60", due=date(2024, 3, 15)),
            make_one_time_bill(id="later", amount="500", due=date(2024, 3, 16)),
        )
        sources = ObligationSources(bills=bills, categories=categories)

        overview = next_paycheck_overview(
            date(2024, 3, 10), date(2024, 3, 15), [checking_account], sources
        )

        assert [occ.id for occ in overview.obligations] == ["today", "paid", "payday"]
        assert overview.unpaid_total == Decimal("100")
        assert overview.available_funds == Decimal("2500")
        assert overview.projected_balance == Decimal("2400")

    def test_missing_next_pay_date(self, categories, checking_account):
        with pytest.raises(MissingDependencyError, match="Next pay date is not available"):
            next_paycheck_overview(
                date(2024, 3, 10), None, [checking_account], ObligationSources(categories=categories)
            )


def test_thirty_day_outlook(make_one_time_bill, categories, checking_account):
    bills = (
        make_one_time_bill(id="now", amount="100", due=date(2024, 3, 10)),
        make_one_time_bill(id="horizon", amount="50", due=date(2024, 4, 9)),
        make_one_time_bill(id="beyond", amount="999", due=date(2024, 4, 10)),
    )
    card_payments = [
        CreditCardPayment(id="x", credit_card_id="visa", amount=Decimal("75"), payment_date=date(2024, 3, 10)),
        CreditCardPayment(id="y", credit_card_id="visa", amount=Decimal("200"), payment_date=date(2024, 3, 25)),
    ]
    paychecks = [_paycheck(date(2024, 3, 15)), _paycheck(date(2024, 4, 9))]

    outlook = thirty_day_outlook(
        date(2024, 3, 10),
        [checking_account],
        ObligationSources(bills=bills, categories=categories),
        card_payments,
        paychecks,
    )

    assert outlook.end_date == date(2024, 4, 9)
    assert [occ.id for occ in outlook.bills] == ["now", "horizon"]
    assert [p.id for p in outlook.card_payments] == ["y"]
    assert [p.payment_date for p in outlook.paychecks] == [date(2024, 3, 15)]
    assert outlook.total_expected_funds == Decimal("4500")
    assert outlook.remaining_after_bills == Decimal("4150")


class TestProjectionService:
    @pytest.fixture
    def snapshot(self, make_bill, categories, visa_card, checking_account):
        rent = make_bill(id="rent", amount="1200", day_of_month=1, start=date(2024, 1, 1))
        return FinanceSnapshot(
            bills=(rent,),
            credit_cards=(visa_card,),
            debit_cards=(checking_account,),
            categories=categories,
            profile=PaycheckConfig(
                income_amount=Decimal("2000"), income_frequency=IncomeFrequency.BI_MONTHLY
            ),
            savings_payments=(_savings(date(2024, 3, 20)),),
        )

    def test_overview_includes_both_card_paths(self, snapshot):
        overview = ProjectionService(snapshot).next_paycheck_overview(date(2024, 3, 16))

        assert overview.next_pay_date == date(2024, 3, 31)
        assert sorted(occ.id for occ in overview.obligations) == ["cc-payment-visa", "cc-visa"]
        assert overview.projected_balance == Decimal("2265")

    def test_income_book_seeds_from_overview(self, snapshot):
        book = ProjectionService(snapshot).income_book(date(2024, 3, 16), window_months=1)

        assert book.starting_balance == Decimal("2265")
        assert [p.period_start for p in book.periods] == [date(2024, 3, 31), date(2024, 4, 15)]
        assert [occ.id for occ in book.periods[0].obligations] == ["rent"]
        assert book.periods[0].ending_balance == Decimal("3065")
        assert book.periods[1].ending_balance == Decimal("5065")

    def test_income_book_with_explicit_balance(self, snapshot):
        book = ProjectionService(snapshot).income_book(
            date(2024, 3, 1), window_months=1, include_savings=False, starting_balance=Decimal("0")
        )

        assert [p.period_start for p in book.periods] == [date(2024, 3, 15), date(2024, 3, 31)]
        assert book.periods[0].obligations_total == Decimal("35")
        assert book.periods[-1].ending_balance == Decimal("3965")

    def test_outlook_carries_pay_dates(self, snapshot):
        outlook = ProjectionService(snapshot).thirty_day_outlook(date(2024, 3, 10))

        assert outlook.pay_dates.next_pay_date == date(2024, 3, 15)
        assert [occ.id for occ in outlook.bills] == ["rent"]

    def test_outlook_without_profile(self, snapshot):
        outlook = ProjectionService(replace(snapshot, profile=None)).thirty_day_outlook(date(2024, 3, 10))

        assert outlook.pay_dates is None
        assert outlook.paychecks == ()

    def test_recent_savings_newest_first(self, snapshot):
        payments = tuple(_savings(date(2024, 1, 1) + timedelta(days=i)) for i in range(120))
        service = ProjectionService(replace(snapshot, savings_payments=payments))

        recent = service.recent_savings_payments()

        assert len(recent) == 100
        assert recent[0].payment_date == payments[-1].payment_date
