"""Core constants used across DataEngine modules.

This module centralizes source file names, canonical dataset names,
and the fixed structural markers of each input format.
"""

from __future__ import annotations

from pathlib import Path

DEFAULT_DATA_ROOT = Path(".")
DEFAULT_DUMP_LIMIT = 4
DEFAULT_LOOKUP_DATASET = "CountyUnemployment"
DEFAULT_ROW_LENGTH_POLICY = "pad"
DEFAULT_DUPLICATE_HEADER_POLICY = "error"
SUPPORTED_ROW_LENGTH_POLICIES = ("pad", "strict")
SUPPORTED_DUPLICATE_HEADER_POLICIES = ("error", "last_wins")
SOURCE_MANIFEST_VERSION = 1

COUNTY_EMPLOYMENT_WAGES = "CountyEmploymentWages"
COUNTY_LIST = "CountyList"
COUNTY_MEDIAN_INCOME = "CountyMedianIncome"
COUNTY_POPULATION_TAX = "CountyPopulationTax"
COUNTY_UNEMPLOYMENT = "CountyUnemployment"
STATE_EXPORTS = "StateExports"
STATE_TAX_RATES = "StateTaxRates"

DEFAULT_SOURCE_FILE_NAMES = {
    COUNTY_EMPLOYMENT_WAGES: "US_St_Cn_Table_Workforce_Wages.xml",
    COUNTY_LIST: "usa_county_list.csv",
    COUNTY_MEDIAN_INCOME: "Median_Income_County.json",
    COUNTY_POPULATION_TAX: "Population_By_County_State_County_Tax.csv",
    COUNTY_UNEMPLOYMENT: "Unemployment_By_County.xlsx",
    STATE_EXPORTS: "Exports By State 2012.xlsx",
    STATE_TAX_RATES: "StateTaxRates.xlsx",
}
SOURCE_LABELS = {
    COUNTY_EMPLOYMENT_WAGES: "County Employment Wages XML",
    COUNTY_LIST: "USA County List CSV",
    COUNTY_MEDIAN_INCOME: "County Median Income JSON",
    COUNTY_POPULATION_TAX: "County Population Tax CSV",
    COUNTY_UNEMPLOYMENT: "County Unemployment Excel",
    STATE_EXPORTS: "Exports By State Excel",
    STATE_TAX_RATES: "State Tax Rates Excel",
}
DATASET_LOAD_ORDER = (
    COUNTY_POPULATION_TAX,
    COUNTY_LIST,
    COUNTY_UNEMPLOYMENT,
    STATE_EXPORTS,
    STATE_TAX_RATES,
    COUNTY_MEDIAN_INCOME,
    COUNTY_EMPLOYMENT_WAGES,
)
DATASET_COLLECTION_ORDER = (
    COUNTY_EMPLOYMENT_WAGES,
    COUNTY_LIST,
    COUNTY_MEDIAN_INCOME,
    COUNTY_POPULATION_TAX,
    COUNTY_UNEMPLOYMENT,
    STATE_EXPORTS,
    STATE_TAX_RATES,
)

XML_SKIPPED_LEADING_LINES = 2
XML_ATTRIBUTES_PER_RECORD = 19
XML_RECORD_OPEN_TAG = "<record>"
XML_RECORD_CLOSE_TAG = "</record>"
XML_FOOTER_LINE = "</state-county-wage-data>"
