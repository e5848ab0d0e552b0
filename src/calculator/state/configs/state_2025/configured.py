"""
States whose returns need nothing beyond ``StateTaxConfig``: brackets or a
flat rate, standard or itemized deductions, exemptions, and credits sized
from federal amounts.
"""

from __future__ import annotations

from typing import Callable, List

from calculator.decimal_math import cents
from calculator.state.base_state_calculator import ConfiguredStateModule
from calculator.state.state_tax_config import (
    FEDERAL_TAXABLE_INCOME,
    ITEMIZED_FEDERAL,
    ITEMIZED_UNCAPPED_SALT,
    SCALE_TAX,
    StateTaxConfig,
    bracket_floors,
    bracket_table,
    status_amounts,
)

ME_RATES = (0.058, 0.0675, 0.0715)

ME_2025 = StateTaxConfig(
    state_code="ME",
    state_name="Maine",
    tax_year=2025,
    form_label="ME 1040ME",
    node_prefix="form1040me",
    is_flat_tax=False,
    brackets=bracket_table(
        bracket_floors((0, 26800, 63450), ME_RATES),
        bracket_floors((0, 53600, 126900), ME_RATES),
        hoh=bracket_floors((0, 40200, 95150), ME_RATES),
    ),
    standard_deduction=status_amounts(15000, 30000, hoh=22500),
    personal_exemption_amount=status_amounts(5150, 10300, qw=5150),
    eitc_percentage=0.25,
    apportionment_method=SCALE_TAX,
)

NM_RATES = (0.015, 0.032, 0.043, 0.047, 0.049, 0.059)

NM_2025 = StateTaxConfig(
    state_code="NM",
    state_name="New Mexico",
    tax_year=2025,
    form_label="NM PIT-1",
    node_prefix="pit1",
    is_flat_tax=False,
    brackets=bracket_table(
        bracket_floors((0, 5500, 16500, 33500, 66500, 210000), NM_RATES),
        bracket_floors((0, 8000, 25000, 50000, 100000, 315000), NM_RATES),
        mfs=bracket_floors((0, 4000, 12500, 25000, 50000, 157500), NM_RATES),
        hoh=bracket_floors((0, 8000, 25000, 50000, 100000, 315000), NM_RATES),
    ),
    standard_deduction=status_amounts(15000, 30000, hoh=22500),
    eitc_percentage=0.25,
    apportionment_method=SCALE_TAX,
)

DE_BRACKETS = bracket_floors(
    (0, 2000, 5000, 10000, 20000, 25000, 60000),
    (0.0, 0.022, 0.039, 0.048, 0.052, 0.0555, 0.066),
)

DE_2025 = StateTaxConfig(
    state_code="DE",
    state_name="Delaware",
    tax_year=2025,
    form_label="DE Form 200-01",
    node_prefix="form200",
    is_flat_tax=False,
    brackets=bracket_table(DE_BRACKETS, DE_BRACKETS),
    standard_deduction=status_amounts(3250, 6500, qw=6500),
    # $110 credit per personal exemption
    personal_exemption_amount=status_amounts(110, 110),
    dependent_exemption_amount=cents(110),
    exemption_is_credit=True,
    eitc_percentage=0.20,
    eitc_refundable=False,
    apportionment_method=SCALE_TAX,
)

VA_BRACKETS = bracket_floors((0, 3000, 5000, 17000), (0.02, 0.03, 0.05, 0.0575))

VA_2025 = StateTaxConfig(
    state_code="VA",
    state_name="Virginia",
    tax_year=2025,
    form_label="VA Form 760",
    node_prefix="form760",
    is_flat_tax=False,
    brackets=bracket_table(VA_BRACKETS, VA_BRACKETS),
    standard_deduction=status_amounts(8000, 16000, hoh=16000),
    personal_exemption_amount=status_amounts(930, 1860, qw=930),
    dependent_exemption_amount=cents(930),
    eitc_percentage=0.20,
    eitc_refundable=False,
)

GA_2025 = StateTaxConfig(
    state_code="GA",
    state_name="Georgia",
    tax_year=2025,
    form_label="GA Form 500",
    node_prefix="form500",
    is_flat_tax=True,
    flat_rate=0.0519,
    standard_deduction=status_amounts(12000, 24000),
    dependent_exemption_amount=cents(4000),
    apportionment_method=SCALE_TAX,
)

NC_2025 = StateTaxConfig(
    state_code="NC",
    state_name="North Carolina",
    tax_year=2025,
    form_label="NC D-400",
    node_prefix="d400",
    is_flat_tax=True,
    flat_rate=0.0425,
    standard_deduction=status_amounts(12750, 25500, hoh=19125),
    hsa_addback=True,
    apportionment_method=SCALE_TAX,
)

CO_2025 = StateTaxConfig(
    state_code="CO",
    state_name="Colorado",
    tax_year=2025,
    form_label="CO DR 0104",
    node_prefix="dr0104",
    is_flat_tax=True,
    flat_rate=0.044,
    starts_from=FEDERAL_TAXABLE_INCOME,
    eitc_percentage=0.35,
)

MI_2025 = StateTaxConfig(
    state_code="MI",
    state_name="Michigan",
    tax_year=2025,
    form_label="MI-1040",
    node_prefix="mi1040",
    is_flat_tax=True,
    flat_rate=0.0425,
    personal_exemption_amount=status_amounts(5800, 11600, qw=5800),
    dependent_exemption_amount=cents(5800),
    eitc_percentage=0.30,
    apportionment_method=SCALE_TAX,
)

AZ_2025 = StateTaxConfig(
    state_code="AZ",
    state_name="Arizona",
    tax_year=2025,
    form_label="AZ Form 140",
    node_prefix="form140",
    is_flat_tax=True,
    flat_rate=0.025,
    standard_deduction=status_amounts(15000, 30000, hoh=22500),
    apportionment_method=SCALE_TAX,
)

IN_2025 = StateTaxConfig(
    state_code="IN",
    state_name="Indiana",
    tax_year=2025,
    form_label="IN IT-40",
    node_prefix="it40",
    is_flat_tax=True,
    flat_rate=0.03,
    personal_exemption_amount=status_amounts(1000, 2000, qw=1000),
    dependent_exemption_amount=cents(1500),
    eitc_percentage=0.10,
    apportionment_method=SCALE_TAX,
)

KY_2025 = StateTaxConfig(
    state_code="KY",
    state_name="Kentucky",
    tax_year=2025,
    form_label="KY Form 740",
    node_prefix="form740",
    is_flat_tax=True,
    flat_rate=0.04,
    standard_deduction=status_amounts(3160, 6320),
    pension_exclusion_limit=cents(31110),
    apportionment_method=SCALE_TAX,
)

NY_RATES = (0.04, 0.045, 0.0525, 0.0585, 0.0625, 0.0685, 0.0965, 0.103, 0.109)

NY_2025 = StateTaxConfig(
    state_code="NY",
    state_name="New York",
    tax_year=2025,
    form_label="NY IT-201",
    node_prefix="it201",
    is_flat_tax=False,
    brackets=bracket_table(
        bracket_floors((0, 8500, 11700, 13900, 80650, 215400, 1077550, 5000000, 25000000), NY_RATES),
        bracket_floors((0, 17150, 23600, 27900, 161550, 323200, 2155350, 5000000, 25000000), NY_RATES),
        hoh=bracket_floors((0, 12800, 17650, 20900, 107650, 269300, 1616450, 5000000, 25000000), NY_RATES),
    ),
    standard_deduction=status_amounts(8000, 16050, hoh=11200),
    itemized_deductions=ITEMIZED_UNCAPPED_SALT,
    dependent_exemption_amount=cents(1000),
    eitc_percentage=0.30,
    apportionment_method=SCALE_TAX,
)

AL_2025 = StateTaxConfig(
    state_code="AL",
    state_name="Alabama",
    tax_year=2025,
    form_label="AL Form 40",
    node_prefix="form40",
    is_flat_tax=False,
    brackets=bracket_table(
        bracket_floors((0, 500, 3000), (0.02, 0.04, 0.05)),
        bracket_floors((0, 1000, 6000), (0.02, 0.04, 0.05)),
    ),
    standard_deduction=status_amounts(3000, 8500, mfs=4250, hoh=5200),
    personal_exemption_amount=status_amounts(1500, 3000, hoh=3000),
    dependent_exemption_amount=cents(1000),
    tax_exempt_interest_addback=True,
    federal_tax_deduction=True,
)

AR_BRACKETS = bracket_floors((0, 4400, 8800), (0.02, 0.04, 0.044))

AR_2025 = StateTaxConfig(
    state_code="AR",
    state_name="Arkansas",
    tax_year=2025,
    form_label="AR1000F",
    node_prefix="ar1000f",
    is_flat_tax=False,
    brackets=bracket_table(AR_BRACKETS, AR_BRACKETS),
    standard_deduction=status_amounts(2340, 4680),
    # $29 credit per personal exemption
    personal_exemption_amount=status_amounts(29, 29),
    dependent_exemption_amount=cents(29),
    exemption_is_credit=True,
    eitc_percentage=0.20,
    eitc_refundable=False,
    apportionment_method=SCALE_TAX,
)

DC_BRACKETS = bracket_floors(
    (0, 10000, 40000, 60000, 250000, 500000, 1000000),
    (0.04, 0.06, 0.065, 0.085, 0.0925, 0.0975, 0.1075),
)

DC_2025 = StateTaxConfig(
    state_code="DC",
    state_name="District of Columbia",
    tax_year=2025,
    form_label="DC D-40",
    node_prefix="d40",
    is_flat_tax=False,
    brackets=bracket_table(DC_BRACKETS, DC_BRACKETS),
    standard_deduction=status_amounts(15000, 30000, hoh=22500),
    itemized_deductions=ITEMIZED_FEDERAL,
)

HI_RATES = (0.014, 0.032, 0.055, 0.064, 0.068, 0.072, 0.076, 0.079, 0.0825, 0.09, 0.10, 0.11)
HI_SINGLE = (0, 2400, 4800, 9600, 14400, 19200, 24000, 36000, 48000, 150000, 175000, 200000)

HI_2025 = StateTaxConfig(
    state_code="HI",
    state_name="Hawaii",
    tax_year=2025,
    form_label="HI N-11",
    node_prefix="n11",
    is_flat_tax=False,
    brackets=bracket_table(
        bracket_floors(HI_SINGLE, HI_RATES),
        bracket_floors(tuple(2 * floor for floor in HI_SINGLE), HI_RATES),
        hoh=bracket_floors((0, 3600, 7200, 14400, 21600, 28800, 36000, 54000, 72000, 225000, 262500, 300000),
                           HI_RATES),
    ),
    standard_deduction=status_amounts(2200, 4400, hoh=3212),
    personal_exemption_amount=status_amounts(1144, 2288),
    dependent_exemption_amount=cents(1144),
    eitc_percentage=0.20,
    eitc_refundable=False,
    food_credit_per_exemption=cents(110),
    food_credit_agi_limit=status_amounts(30000, 50000, mfs=25000, hoh=40000),
    food_credit_refundable=False,
    apportionment_method=SCALE_TAX,
)

IA_2025 = StateTaxConfig(
    state_code="IA",
    state_name="Iowa",
    tax_year=2025,
    form_label="IA 1040",
    node_prefix="ia1040",
    is_flat_tax=True,
    flat_rate=0.038,
    standard_deduction=status_amounts(15000, 30000, hoh=22500),
    personal_exemption_amount=status_amounts(40, 40),
    dependent_exemption_amount=cents(40),
    exemption_is_credit=True,
    tax_exempt_interest_addback=True,
    eitc_percentage=0.15,
    eitc_refundable=False,
)

ID_2025 = StateTaxConfig(
    state_code="ID",
    state_name="Idaho",
    tax_year=2025,
    form_label="ID Form 40",
    node_prefix="id40",
    is_flat_tax=True,
    flat_rate=0.05695,
    starts_from=FEDERAL_TAXABLE_INCOME,
    social_security_agi_limit=status_amounts(75000, 100000),
    social_security_exclusion_cap=status_amounts(34332, 68664),
    child_credit_per_child=cents(205),
    # grocery credit, $20 more for each filer 65 or older
    food_credit_per_exemption=cents(100),
    food_credit_senior_amount=cents(20),
)

KS_2025 = StateTaxConfig(
    state_code="KS",
    state_name="Kansas",
    tax_year=2025,
    form_label="KS K-40",
    node_prefix="k40",
    is_flat_tax=False,
    brackets=bracket_table(
        bracket_floors((0, 15000, 30000), (0.031, 0.0525, 0.057)),
        bracket_floors((0, 30000, 60000), (0.031, 0.0525, 0.057)),
    ),
    standard_deduction=status_amounts(3500, 8000, mfs=4000, hoh=6000),
    personal_exemption_amount=status_amounts(2250, 4500),
    dependent_exemption_amount=cents(2250),
    social_security_agi_limit=status_amounts(75000, 75000),
    dependent_care_credit_rate=0.25,
    food_credit_per_exemption=cents(125),
    food_credit_agi_limit=status_amounts(30615, 30615),
    apportionment_method=SCALE_TAX,
)

LA_2025 = StateTaxConfig(
    state_code="LA",
    state_name="Louisiana",
    tax_year=2025,
    form_label="LA IT-540",
    node_prefix="it540",
    is_flat_tax=True,
    flat_rate=0.03,
    standard_deduction=status_amounts(12500, 25000, hoh=25000),
    # $100 credit per dependent
    dependent_exemption_amount=cents(100),
    exemption_is_credit=True,
    tax_exempt_interest_addback=True,
    eitc_percentage=0.05,
    eitc_refundable=False,
)

MN_RATES = (0.0535, 0.068, 0.0785, 0.0985)

MN_2025 = StateTaxConfig(
    state_code="MN",
    state_name="Minnesota",
    tax_year=2025,
    form_label="MN M1",
    node_prefix="m1",
    is_flat_tax=False,
    brackets=bracket_table(
        bracket_floors((0, 31690, 104090, 193240), MN_RATES),
        bracket_floors((0, 46330, 184040, 321450), MN_RATES),
        mfs=bracket_floors((0, 23165, 92020, 160725), MN_RATES),
        hoh=bracket_floors((0, 38770, 155000, 256550), MN_RATES),
    ),
    standard_deduction=status_amounts(14600, 29200, hoh=21900),
    itemized_deductions=ITEMIZED_UNCAPPED_SALT,
    # working family credit
    eitc_percentage=0.25,
    child_credit_per_child=cents(1750),
    child_credit_refundable=True,
    apportionment_method=SCALE_TAX,
)

MO_BRACKETS = bracket_floors(
    (0, 1207, 2414, 3621, 4828, 6035, 7242),
    (0.02, 0.025, 0.03, 0.035, 0.04, 0.045, 0.048),
)

MO_2025 = StateTaxConfig(
    state_code="MO",
    state_name="Missouri",
    tax_year=2025,
    form_label="MO-1040",
    node_prefix="mo1040",
    is_flat_tax=False,
    brackets=bracket_table(MO_BRACKETS, MO_BRACKETS),
    standard_deduction=status_amounts(15000, 30000, hoh=22500),
    social_security_agi_limit=status_amounts(100000, 100000),
    federal_tax_deduction=True,
    federal_tax_deduction_cap=status_amounts(5000, 10000),
    apportionment_method=SCALE_TAX,
)

MS_BRACKETS = bracket_floors((0, 10000), (0.0, 0.044))

MS_2025 = StateTaxConfig(
    state_code="MS",
    state_name="Mississippi",
    tax_year=2025,
    form_label="MS Form 80-105",
    node_prefix="form80105",
    is_flat_tax=False,
    brackets=bracket_table(MS_BRACKETS, MS_BRACKETS),
    standard_deduction=status_amounts(2300, 4600, hoh=3400),
    personal_exemption_amount=status_amounts(6000, 12000, hoh=9500),
    dependent_exemption_amount=cents(1500),
    retirement_income_exempt=True,
    tax_exempt_interest_addback=True,
    apportionment_method=SCALE_TAX,
)

MT_BRACKETS = bracket_floors((0, 21100), (0.047, 0.059))

MT_2025 = StateTaxConfig(
    state_code="MT",
    state_name="Montana",
    tax_year=2025,
    form_label="MT Form 2",
    node_prefix="mtform2",
    is_flat_tax=False,
    brackets=bracket_table(MT_BRACKETS, MT_BRACKETS),
    # 20% of state AGI, capped
    standard_deduction=status_amounts(5540, 11080),
    standard_deduction_rate=0.20,
    personal_exemption_amount=status_amounts(3000, 6000),
    dependent_exemption_amount=cents(3000),
    apportionment_method=SCALE_TAX,
)

ND_RATES = (0.0, 0.0195, 0.025)

ND_2025 = StateTaxConfig(
    state_code="ND",
    state_name="North Dakota",
    tax_year=2025,
    form_label="ND-1",
    node_prefix="nd1",
    is_flat_tax=False,
    starts_from=FEDERAL_TAXABLE_INCOME,
    brackets=bracket_table(
        bracket_floors((0, 48475, 244825), ND_RATES),
        bracket_floors((0, 80975, 298075), ND_RATES),
        hoh=bracket_floors((0, 64950, 271100), ND_RATES),
    ),
)

NE_RATES = (0.0246, 0.0351, 0.0584)

NE_2025 = StateTaxConfig(
    state_code="NE",
    state_name="Nebraska",
    tax_year=2025,
    form_label="NE 1040N",
    node_prefix="ne1040n",
    is_flat_tax=False,
    brackets=bracket_table(
        bracket_floors((0, 3700, 22170), NE_RATES),
        bracket_floors((0, 7390, 44350), NE_RATES),
        hoh=bracket_floors((0, 5550, 28600), NE_RATES),
    ),
    standard_deduction=status_amounts(15000, 30000, hoh=22500),
    personal_exemption_amount=status_amounts(157, 157),
    dependent_exemption_amount=cents(157),
    exemption_is_credit=True,
    dependent_care_credit_rate=0.25,
    eitc_percentage=0.10,
    apportionment_method=SCALE_TAX,
)

OK_RATES = (0.0025, 0.0075, 0.0175, 0.0275, 0.0375, 0.0475)
OK_JOINT = bracket_floors((0, 2000, 5000, 7500, 9800, 12200), OK_RATES)

OK_2025 = StateTaxConfig(
    state_code="OK",
    state_name="Oklahoma",
    tax_year=2025,
    form_label="OK Form 511",
    node_prefix="form511",
    is_flat_tax=False,
    brackets=bracket_table(bracket_floors((0, 1000, 2500, 3750, 4900, 7200), OK_RATES), OK_JOINT, hoh=OK_JOINT),
    standard_deduction=status_amounts(15000, 30000, hoh=22500),
    itemized_deductions=ITEMIZED_FEDERAL,
    personal_exemption_amount=status_amounts(1000, 2000),
    dependent_exemption_amount=cents(1000),
    eitc_percentage=0.05,
    eitc_refundable=False,
    child_credit_per_child=cents(100),
    apportionment_method=SCALE_TAX,
)

OR_RATES = (0.0475, 0.0675, 0.0875, 0.099)

OR_2025 = StateTaxConfig(
    state_code="OR",
    state_name="Oregon",
    tax_year=2025,
    form_label="OR-40",
    node_prefix="or40",
    is_flat_tax=False,
    brackets=bracket_table(
        bracket_floors((0, 4050, 10200, 125000), OR_RATES),
        bracket_floors((0, 8100, 20400, 250000), OR_RATES),
        hoh=bracket_floors((0, 6500, 16350, 200000), OR_RATES),
    ),
    standard_deduction=status_amounts(2745, 5495, hoh=4420),
    itemized_deductions=ITEMIZED_UNCAPPED_SALT,
    social_security_taxable=True,
    personal_exemption_amount=status_amounts(236, 236),
    dependent_exemption_amount=cents(236),
    exemption_is_credit=True,
    exemption_credit_agi_limit=status_amounts(100000, 200000),
    eitc_percentage=0.12,
    eitc_percentage_no_children=0.09,
    apportionment_method=SCALE_TAX,
)

RI_BRACKETS = bracket_floors((0, 79900, 181650), (0.0375, 0.0475, 0.0599))

RI_2025 = StateTaxConfig(
    state_code="RI",
    state_name="Rhode Island",
    tax_year=2025,
    form_label="RI-1040",
    node_prefix="ri1040",
    is_flat_tax=False,
    brackets=bracket_table(RI_BRACKETS, RI_BRACKETS),
    standard_deduction=status_amounts(15000, 30000, hoh=22500),
    personal_exemption_amount=status_amounts(4700, 9400),
    dependent_exemption_amount=cents(4700),
    social_security_taxable=True,
    eitc_percentage=0.15,
    apportionment_method=SCALE_TAX,
)

VT_RATES = (0.0335, 0.066, 0.076, 0.0875)

VT_2025 = StateTaxConfig(
    state_code="VT",
    state_name="Vermont",
    tax_year=2025,
    form_label="VT IN-111",
    node_prefix="in111",
    is_flat_tax=False,
    starts_from=FEDERAL_TAXABLE_INCOME,
    brackets=bracket_table(
        bracket_floors((0, 47900, 116000, 242000), VT_RATES),
        bracket_floors((0, 79950, 193300, 294600), VT_RATES),
        mfs=bracket_floors((0, 39975, 96650, 147300), VT_RATES),
        hoh=bracket_floors((0, 64200, 165700, 268300), VT_RATES),
    ),
    eitc_percentage=0.38,
    dependent_care_credit_rate=0.24,
    apportionment_method=SCALE_TAX,
)

WV_BRACKETS = bracket_floors((0, 10000, 25000), (0.0236, 0.0315, 0.0512))

WV_2025 = StateTaxConfig(
    state_code="WV",
    state_name="West Virginia",
    tax_year=2025,
    form_label="WV IT-140",
    node_prefix="it140",
    is_flat_tax=False,
    brackets=bracket_table(WV_BRACKETS, WV_BRACKETS),
    standard_deduction=status_amounts(15000, 30000, hoh=22500),
    personal_exemption_amount=status_amounts(2000, 4000),
    dependent_exemption_amount=cents(2000),
    apportionment_method=SCALE_TAX,
)

CONFIGS = (
    ME_2025, NM_2025, DE_2025, VA_2025, GA_2025, NC_2025, CO_2025, MI_2025, AZ_2025, IN_2025, KY_2025, NY_2025,
    AL_2025, AR_2025, DC_2025, HI_2025, IA_2025, ID_2025, KS_2025, LA_2025, MN_2025, MO_2025, MS_2025,
    MT_2025, ND_2025, NE_2025, OK_2025, OR_2025, RI_2025, VT_2025, WV_2025,
)


def _factory(config: StateTaxConfig) -> Callable[[int], ConfiguredStateModule]:
    def build(tax_year: int) -> ConfiguredStateModule:
        return ConfiguredStateModule(config.for_year(tax_year))
    return build


FACTORIES: List[Callable[[int], ConfiguredStateModule]] = [_factory(c) for c in CONFIGS]
