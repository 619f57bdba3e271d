"""Display strings for the supported locales (Thai and English)."""

STRINGS: dict[str, dict[str, str]] = {
    "th": {
        "meters": "{value} ม.",
        "kilometers": "{value} กม.",
        "minutes": "{value} นาที",
        "unnamed_place": "สถานที่ไม่ระบุชื่อ",
        "area_name": "พื้นที่ที่เลือก",
        "area_summary": "พบสถานที่ {count} แห่งในรัศมี {radius} จากจุดที่เลือก",
        "car_route_title": "รถยนต์ส่วนตัว / แท็กซี่",
        "cost": "~{value} บาท",
    },
    "en": {
        "meters": "{value} m",
        "kilometers": "{value} km",
        "minutes": "{value} min",
        "unnamed_place": "Unnamed place",
        "area_name": "Selected area",
        "area_summary": "Found {count} places within {radius} of the selected point",
        "car_route_title": "Private car / Taxi",
        "cost": "~{value} THB",
    },
}

# Secondary-language name tag used after name:<locale> and plain name.
SECONDARY_NAME_TAG = {"th": "name:en", "en": "name:th"}


def text(locale: str, key: str, **kwargs) -> str:
    table = STRINGS.get(locale, STRINGS["th"])
    return table[key].format(**kwargs)
