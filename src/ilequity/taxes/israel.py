"""Israeli income tax, social security and capital gains model."""

from __future__ import annotations

from dataclasses import dataclass

from ilequity.taxes.constants import TaxTables, load_tax_tables


@dataclass(frozen=True, slots=True)
class EquityIncomeTax:
    """Income tax attributed to equity work income.

    Attributes:
        income_tax: Post-credit tax owed because of the equity slice.
        credit_points_reduction: Credit absorbed by the equity slice. For
            display only; already reflected in ``income_tax``.
    """

    income_tax: float
    credit_points_reduction: float


@dataclass(frozen=True, slots=True)
class CapitalGainsTax:
    """Capital gains tax split into the base rate and the surtax."""

    base_tax: float
    surtax: float
    total_tax: float


class IsraeliTaxModel:
    """Israeli progressive income tax with credit points.

    Also computes Bituah Leumi, health insurance and capital gains tax.
    Every method is a pure function of its arguments and the immutable
    tables loaded for ``tax_year``.
    """

    def __init__(self, tax_year: int = 2025) -> None:
        self._tables: TaxTables = load_tax_tables(tax_year)

    @property
    def tables(self) -> TaxTables:
        return self._tables

    @property
    def tax_year(self) -> int:
        return self._tables.tax_year

    def progressive_tax(self, annual_income: float) -> float:
        """Compute income tax on ``annual_income`` before credit points."""
        if annual_income <= 0:
            return 0.0
        tax = 0.0
        remaining = annual_income
        for bracket in self._tables.brackets:
            taxable_in_bracket = min(remaining, bracket.size)
            if taxable_in_bracket <= 0:
                break
            tax += taxable_in_bracket * bracket.rate
            remaining -= taxable_in_bracket
        return tax

    def marginal_rate(self, annual_income: float) -> float:
        """Return the rate of the bracket containing ``annual_income``."""
        brackets = self._tables.brackets
        if annual_income <= 0:
            return brackets[0].rate
        for bracket in brackets:
            if annual_income <= bracket.ceiling:
                return bracket.rate
        return brackets[-1].rate

    def credit_points_value(self, credit_points: float) -> float:
        """Annual NIS value of ``credit_points``."""
        return credit_points * self._tables.credit_point_value

    def apply_credit_points(self, tax: float, credit_points: float) -> tuple[float, float]:
        """Reduce ``tax`` by the credit value, never below zero.

        Returns:
            ``(final_tax, credit_used)``.
        """
        final_tax = max(0.0, tax - self.credit_points_value(credit_points))
        return final_tax, tax - final_tax

    def equity_income_tax(
        self,
        work_income: float,
        annual_salary: float,
        credit_points: float,
    ) -> EquityIncomeTax:
        """Attribute post-credit income tax to equity work income.

        Credit points offset the combined liability on salary plus equity,
        so the equity share is the difference between the post-credit tax
        on the combined income and on the salary alone.

        Args:
            work_income: Equity work income in NIS.
            annual_salary: Annual salary in NIS.
            credit_points: Number of credit points.
        """
        if work_income <= 0:
            return EquityIncomeTax(income_tax=0.0, credit_points_reduction=0.0)

        tax_on_salary = self.progressive_tax(annual_salary)
        tax_on_combined = self.progressive_tax(annual_salary + work_income)

        salary_after_credits, _ = self.apply_credit_points(tax_on_salary, credit_points)
        combined_after_credits, _ = self.apply_credit_points(tax_on_combined, credit_points)

        equity_tax = combined_after_credits - salary_after_credits
        credit_used = (tax_on_combined - tax_on_salary) - equity_tax
        return EquityIncomeTax(
            income_tax=max(0.0, equity_tax),
            credit_points_reduction=max(0.0, credit_used),
        )

    def bituah_leumi(self, work_income: float, annual_salary: float = 0.0) -> float:
        """Social security on work income, within the ceiling left by salary."""
        if work_income <= 0:
            return 0.0
        rates = self._tables.bituah_leumi
        remaining_ceiling = max(0.0, rates.ceiling - min(annual_salary, rates.ceiling))
        return min(work_income, remaining_ceiling) * rates.general_rate

    def bituah_leumi_on_total(self, total_work_income: float) -> float:
        """Social security on a combined work income, capped at the ceiling."""
        if total_work_income <= 0:
            return 0.0
        rates = self._tables.bituah_leumi
        return min(total_work_income, rates.ceiling) * rates.general_rate

    def health_insurance(self, work_income: float) -> float:
        """Health insurance on work income. No ceiling."""
        if work_income <= 0:
            return 0.0
        return work_income * self._tables.bituah_leumi.health_rate

    def capital_gains_tax(
        self,
        capital_gain: float,
        total_capital_gains: float | None = None,
    ) -> CapitalGainsTax:
        """Compute base capital gains tax and surtax.

        Args:
            capital_gain: Gain being taxed, in NIS.
            total_capital_gains: Cumulative gains the surtax threshold is
                measured against. Defaults to ``capital_gain``.
        """
        if capital_gain <= 0:
            return CapitalGainsTax(base_tax=0.0, surtax=0.0, total_tax=0.0)
        if total_capital_gains is None:
            total_capital_gains = capital_gain

        rates = self._tables.capital_gains
        base_tax = capital_gain * rates.base_rate
        above_threshold = min(capital_gain, total_capital_gains - rates.surtax_threshold)
        surtax = max(0.0, above_threshold) * rates.surtax_rate
        return CapitalGainsTax(base_tax=base_tax, surtax=surtax, total_tax=base_tax + surtax)

    def effective_capital_gains_rate(self) -> float:
        """Flat combined rate used when aggregating a portfolio."""
        return self._tables.capital_gains.effective_rate
