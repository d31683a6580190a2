from __future__ import annotations

from taxplanner.data._schedule import province, schedule
from taxplanner.models import (
    CPPParameters,
    EIParameters,
    FederalTaxData,
    MileageRates,
    RRSPLimits,
    TaxData,
)

FEDERAL_2024 = FederalTaxData(
    brackets=schedule(
        (55_867, 0.15),
        (111_733, 0.205),
        (173_205, 0.26),
        (246_752, 0.29),
        (None, 0.33),
    ),
    basic_personal_amount=15_705.0,
    cpp=CPPParameters(
        max_pensionable_earnings=68_500.0,
        rate=0.0595,
        exemption=3_500.0,
        max_contribution=3_867.50,
    ),
    ei=EIParameters(max_insurable_earnings=63_200.0, rate=0.0166, max_premium=1_049.12),
)

PROVINCES_2024 = {
    "AB": province(
        [(148_269, 0.10), (177_922, 0.12), (237_230, 0.13), (355_845, 0.14), (None, 0.15)],
        bpa=21_003.0,
    ),
    "BC": province(
        [
            (47_937, 0.0506),
            (95_875, 0.077),
            (110_076, 0.105),
            (133_664, 0.1229),
            (181_232, 0.147),
            (252_752, 0.168),
            (None, 0.205),
        ],
        bpa=12_580.0,
    ),
    "MB": province([(47_000, 0.108), (100_000, 0.1275), (None, 0.174)], bpa=15_780.0),
    "NB": province(
        [(49_958, 0.094), (99_916, 0.14), (185_064, 0.16), (None, 0.195)],
        bpa=13_044.0,
    ),
    "NL": province(
        [
            (43_198, 0.087),
            (86_395, 0.145),
            (154_244, 0.158),
            (215_943, 0.178),
            (275_870, 0.198),
            (551_739, 0.208),
            (1_103_478, 0.213),
            (None, 0.218),
        ],
        bpa=10_818.0,
    ),
    "NS": province(
        [(29_590, 0.0879), (59_180, 0.1495), (93_000, 0.1667), (150_000, 0.175), (None, 0.21)],
        bpa=8_481.0,
    ),
    "NT": province(
        [(50_597, 0.059), (101_198, 0.086), (164_525, 0.122), (None, 0.1405)],
        bpa=17_373.0,
    ),
    "NU": province(
        [(53_268, 0.04), (106_537, 0.07), (173_205, 0.09), (None, 0.115)],
        bpa=18_767.0,
    ),
    "ON": province(
        [(51_446, 0.0505), (102_894, 0.0915), (150_000, 0.1116), (220_000, 0.1216), (None, 0.1316)],
        bpa=12_399.0,
        surtax=(5_554.0, 0.20, 7_108.0, 0.36),
    ),
    "PE": province(
        [(32_656, 0.0965), (64_313, 0.1363), (105_000, 0.1665), (140_000, 0.18), (None, 0.1875)],
        bpa=13_500.0,
    ),
    "QC": province(
        [(51_780, 0.14), (103_545, 0.19), (126_000, 0.24), (None, 0.2575)],
        bpa=18_056.0,
    ),
    "SK": province([(52_057, 0.105), (148_734, 0.125), (None, 0.145)], bpa=18_491.0),
    "YT": province(
        [(55_867, 0.064), (111_733, 0.09), (173_205, 0.109), (500_000, 0.128), (None, 0.15)],
        bpa=15_705.0,
    ),
}

TAX_DATA_2024 = TaxData(
    year=2024,
    federal=FEDERAL_2024,
    provinces=PROVINCES_2024,
    rrsp=RRSPLimits(max_contribution=31_560.0, percentage_limit=0.18),
    mileage_rates=MileageRates(first_5000km=0.70, after_5000km=0.64),
    last_updated="2024-01-15",
    source="CRA published rates (built-in)",
)
