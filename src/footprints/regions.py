"""Static region vocabularies used to reconcile geocoder names with map features."""

from __future__ import annotations

import logging
from functools import lru_cache
from types import MappingProxyType
from typing import Mapping

import geonamescache

LOGGER = logging.getLogger(__name__)

DISTRICT_OF_COLUMBIA = "District of Columbia"

# Upper-cased, punctuation replaced by spaces, whitespace collapsed.
DC_SPELLINGS = frozenset(
    {
        "DC",
        "D C",
        "DISTRICT OF COLUMBIA",
        "WASHINGTON DC",
        "WASHINGTON D C",
    }
)

# Province-level divisions, cleaned English name -> full Chinese name as used by
# the province vector data's ``name`` property.
CN_EN_TO_ZH: Mapping[str, str] = MappingProxyType(
    {
        "Beijing": "北京市",
        "Tianjin": "天津市",
        "Shanghai": "上海市",
        "Chongqing": "重庆市",
        "Hebei": "河北省",
        "Shanxi": "山西省",
        "Liaoning": "辽宁省",
        "Jilin": "吉林省",
        "Heilongjiang": "黑龙江省",
        "Jiangsu": "江苏省",
        "Zhejiang": "浙江省",
        "Anhui": "安徽省",
        "Fujian": "福建省",
        "Jiangxi": "江西省",
        "Shandong": "山东省",
        "Henan": "河南省",
        "Hubei": "湖北省",
        "Hunan": "湖南省",
        "Guangdong": "广东省",
        "Hainan": "海南省",
        "Sichuan": "四川省",
        "Guizhou": "贵州省",
        "Yunnan": "云南省",
        "Shaanxi": "陕西省",
        "Gansu": "甘肃省",
        "Qinghai": "青海省",
        "Taiwan": "台湾省",
        "Inner Mongolia": "内蒙古自治区",
        "Nei Mongol": "内蒙古自治区",
        "Guangxi": "广西壮族自治区",
        "Guangxi Zhuang": "广西壮族自治区",
        "Tibet": "西藏自治区",
        "Xizang": "西藏自治区",
        "Ningxia": "宁夏回族自治区",
        "Ningxia Hui": "宁夏回族自治区",
        "Xinjiang": "新疆维吾尔自治区",
        "Xinjiang Uygur": "新疆维吾尔自治区",
        "Xinjiang Uyghur": "新疆维吾尔自治区",
        "Hong Kong": "香港特别行政区",
        "Macau": "澳门特别行政区",
        "Macao": "澳门特别行政区",
    }
)


@lru_cache(maxsize=1)
def us_state_names() -> Mapping[str, str]:
    """Two-letter USPS code -> full state name, read-only."""
    gc = geonamescache.GeonamesCache()
    table = {
        code.upper(): payload["name"]
        for code, payload in gc.get_us_states().items()
        if payload.get("name")
    }
    table.setdefault("DC", DISTRICT_OF_COLUMBIA)
    LOGGER.debug("Loaded %d US state abbreviations", len(table))
    return MappingProxyType(table)
