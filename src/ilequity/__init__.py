"""ilequity: net-of-tax value of Israeli employee stock options and RSUs."""

__version__ = "0.1.0"

from ilequity.analytics.sensitivity import PriceSweep as PriceSweep
from ilequity.analytics.sensitivity import price_sweep as price_sweep
from ilequity.config.defaults import default_personal_info as default_personal_info
from ilequity.config.defaults import empty_portfolio as empty_portfolio
from ilequity.config.schema import Grant as Grant
from ilequity.config.schema import PersonalInfo as PersonalInfo
from ilequity.config.schema import Portfolio as Portfolio
from ilequity.config.schema import RSUGrant as RSUGrant
from ilequity.config.schema import SimulationParams as SimulationParams
from ilequity.config.schema import StockOptionGrant as StockOptionGrant
from ilequity.core.engine import calculate as calculate
from ilequity.core.engine import calculate_grant_result as calculate_grant_result
from ilequity.core.options import available_quantity as available_quantity
from ilequity.core.options import calculate_option_result as calculate_option_result
from ilequity.core.options import detect_route as detect_route
from ilequity.core.results import CalculationResult as CalculationResult
from ilequity.core.results import PackageResult as PackageResult
from ilequity.core.results import TaxBreakdown as TaxBreakdown
from ilequity.core.rsus import calculate_rsu_result as calculate_rsu_result
from ilequity.core.vesting import vested_quantity as vested_quantity
from ilequity.taxes.israel import IsraeliTaxModel as IsraeliTaxModel
