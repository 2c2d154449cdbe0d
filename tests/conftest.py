"""Shared fixtures: small raw Storm Data frames shaped like the archive."""

import pandas as pd
import pytest


def make_raw(rows: list[dict]) -> pd.DataFrame:
    """Build a raw archive frame, filling unspecified fields with no-impact defaults."""
    defaults = {
        "EVTYPE": "TORNADO",
        "BGN_DATE": "1/1/2000 0:00:00",
        "FATALITIES": 0,
        "INJURIES": 0,
        "PROPDMG": 0.0,
        "PROPDMGEXP": "",
        "CROPDMG": 0.0,
        "CROPDMGEXP": "",
    }
    return pd.DataFrame([{**defaults, **row} for row in rows])


@pytest.fixture()
def raw_rows():
    """A mix of impactful, impact-free, old and odd-coded rows."""
    return make_raw(
        [
            {"EVTYPE": "TSTM WIND", "BGN_DATE": "1/1/1999 0:00:00",
             "FATALITIES": 1, "PROPDMG": 5, "PROPDMGEXP": "K"},
            {"EVTYPE": "THUNDERSTORM WINDS", "BGN_DATE": "1/2/1999 0:00:00",
             "INJURIES": 2, "PROPDMG": 1, "PROPDMGEXP": "M"},
            {"EVTYPE": "HURRICANE EDOUARD", "BGN_DATE": "8/25/2008 0:00:00",
             "PROPDMG": 2.5, "PROPDMGEXP": "B", "CROPDMG": 10, "CROPDMGEXP": "m"},
            {"EVTYPE": "TYPHOON", "BGN_DATE": "9/1/2004 0:00:00",
             "INJURIES": 4, "PROPDMG": 500, "PROPDMGEXP": "k"},
            {"EVTYPE": "HEAVY SNOW", "BGN_DATE": "1/27/1994 0:00:00",
             "INJURIES": 5},
            {"EVTYPE": "TORNADO", "BGN_DATE": "6/5/2001 0:00:00",
             "PROPDMG": 60, "PROPDMGEXP": "+"},
            {"EVTYPE": "HEAT", "BGN_DATE": "7/4/2011 0:00:00"},
        ]
    )


@pytest.fixture()
def filter_params():
    return {"min_year": 1996, "max_year": None, "strict": False}


@pytest.fixture()
def ranking_params():
    return {"top_n": 20}


@pytest.fixture()
def raw_factory():
    """The ``make_raw`` builder, for tests that need their own rows."""
    return make_raw
