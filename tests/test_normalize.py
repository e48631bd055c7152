import pytest

from footprints.normalize import clean_cn_province, normalize_cn_province, normalize_us_state


def test_us_abbreviation_and_full_name_collapse() -> None:
    assert normalize_us_state("CA") == "California"
    assert normalize_us_state("ca") == normalize_us_state("California")


@pytest.mark.parametrize(
    "raw",
    [
        "DC",
        "D.C.",
        "d c",
        "District of Columbia",
        "Washington DC",
        "Washington D.C.",
        "Washington, D.C.",
        "Washington, DC, USA",
        "D.C., United States",
    ],
)
def test_us_dc_spellings(raw: str) -> None:
    assert normalize_us_state(raw) == "District of Columbia"


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("Commonwealth of Massachusetts", "Massachusetts"),
        ("New York State", "New York"),
        ("Kentucky Commonwealth", "Kentucky"),
        ("Texas, United States", "Texas"),
        ("Oregon, USA", "Oregon"),
        ("  North   Carolina ", "North Carolina"),
        ("CA , USA", "California"),
        ("tx, United States of America", "Texas"),
    ],
)
def test_us_prefix_and_suffix_stripping(raw: str, expected: str) -> None:
    assert normalize_us_state(raw) == expected


@pytest.mark.parametrize("raw", [None, "", "   ", "ZZ"])
def test_us_unmappable_is_none(raw) -> None:
    assert normalize_us_state(raw) is None


def test_cn_clean_strips_suffixes() -> None:
    assert clean_cn_province("Zhejiang Province") == "Zhejiang"
    assert clean_cn_province("Hong Kong SAR") == "Hong Kong"
    assert clean_cn_province("Guangxi Zhuang Autonomous Region") == "Guangxi Zhuang"
    assert clean_cn_province("Shanghai city") == "Shanghai"


def test_cn_candidates_include_raw_clean_and_chinese() -> None:
    assert normalize_cn_province("Zhejiang Province") == {"Zhejiang Province", "Zhejiang", "浙江省"}


def test_cn_candidates_deduplicate_clean_input() -> None:
    assert normalize_cn_province("Beijing") == {"Beijing", "北京市"}


def test_cn_unknown_name_keeps_text_only() -> None:
    assert normalize_cn_province("Atlantis Province") == {"Atlantis Province", "Atlantis"}


@pytest.mark.parametrize("raw", [None, "", "  "])
def test_cn_blank_is_empty(raw) -> None:
    assert normalize_cn_province(raw) == set()
