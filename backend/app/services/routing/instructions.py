"""Turn-by-turn phrasing for OSRM maneuvers.

Each maneuver type maps to a pair of templates: one used when the step has
a road name, one when it does not. ``{dir}`` is the translated modifier.
Unknown maneuver types fall back to "{type} {dir} {road}".
"""

from typing import Optional

DIRECTIONS: dict[str, dict[str, str]] = {
    "th": {
        "left": "ซ้าย",
        "right": "ขวา",
        "slight left": "เบี่ยงซ้าย",
        "slight right": "เบี่ยงขวา",
        "sharp left": "ซ้ายหักศอก",
        "sharp right": "ขวาหักศอก",
        "straight": "ตรงไป",
        "uturn": "กลับรถ",
    },
    "en": {
        "left": "left",
        "right": "right",
        "slight left": "slightly left",
        "slight right": "slightly right",
        "sharp left": "sharp left",
        "sharp right": "sharp right",
        "straight": "straight",
        "uturn": "U-turn",
    },
}

MANEUVERS: dict[str, dict[str, tuple[str, str]]] = {
    "th": {
        "depart": ("เริ่มต้น มุ่งหน้าไปทาง{dir} ไปตาม {road}", "เริ่มต้น มุ่งหน้าไปทาง{dir}"),
        "arrive": ("ถึงจุดหมายที่ {road}", "ถึงจุดหมาย"),
        "turn": ("เลี้ยว{dir} เข้าสู่ {road}", "เลี้ยว{dir}"),
        "merge": ("เบี่ยง{dir} เพื่อเชื่อมต่อกับ {road}", "เบี่ยง{dir} เพื่อเชื่อมต่อ"),
        "on ramp": ("ชิด{dir} เพื่อขึ้นทางลาด/ทางด่วน {road}", "ชิด{dir} เพื่อขึ้นทางลาด/ทางด่วน"),
        "off ramp": ("ชิด{dir} เพื่อลงจากทางลาด/ทางด่วน {road}", "ชิด{dir} เพื่อลงจากทางลาด/ทางด่วน"),
        "fork": ("ที่ทางแยก ชิด{dir} เข้าสู่ {road}", "ที่ทางแยก ชิด{dir}"),
        "end of road": ("เลี้ยว{dir} เมื่อสุดทาง {road}", "เลี้ยว{dir} เมื่อสุดทาง"),
        "roundabout": ("ที่วงเวียน ใช้ทางออก{dir}", "ที่วงเวียน ใช้ทางออก{dir}"),
        "rotary": ("เข้าวงเวียน เข้าสู่ {road}", "เข้าวงเวียน"),
        "exit roundabout": ("ออกจากวงเวียน เข้าสู่ {road}", "ออกจากวงเวียน"),
        "exit rotary": ("ออกจากวงเวียน เข้าสู่ {road}", "ออกจากวงเวียน"),
        "new name": ("ขับต่อไปยัง {road}", "ขับต่อไป{dir}"),
        "continue": ("ขับต่อไปยัง {road}", "ขับต่อไป{dir}"),
        "notification": ("โปรดระวัง: {dir}", "โปรดระวัง: {dir}"),
    },
    "en": {
        "depart": ("Head {dir} on {road}", "Head {dir}"),
        "arrive": ("Arrive at {road}", "Arrive at your destination"),
        "turn": ("Turn {dir} onto {road}", "Turn {dir}"),
        "merge": ("Merge {dir} onto {road}", "Merge {dir}"),
        "on ramp": ("Keep {dir} to take the ramp onto {road}", "Keep {dir} to take the ramp"),
        "off ramp": ("Keep {dir} to exit onto {road}", "Keep {dir} to exit"),
        "fork": ("At the fork, keep {dir} onto {road}", "At the fork, keep {dir}"),
        "end of road": ("At the end of the road, turn {dir} onto {road}", "At the end of the road, turn {dir}"),
        "roundabout": ("At the roundabout, take the {dir} exit", "At the roundabout, take the {dir} exit"),
        "rotary": ("Enter the rotary onto {road}", "Enter the rotary"),
        "exit roundabout": ("Exit the roundabout onto {road}", "Exit the roundabout"),
        "exit rotary": ("Exit the rotary onto {road}", "Exit the rotary"),
        "new name": ("Continue onto {road}", "Continue {dir}"),
        "continue": ("Continue onto {road}", "Continue {dir}"),
        "notification": ("Note: {dir}", "Note: {dir}"),
    },
}


def translate_direction(modifier: Optional[str], locale: str = "th") -> str:
    """Translate an OSRM modifier; unknown modifiers pass through unchanged."""
    if not modifier:
        return ""
    return DIRECTIONS.get(locale, DIRECTIONS["th"]).get(modifier, modifier)


def _road_name(name: Optional[str]) -> str:
    name = (name or "").strip()
    return "" if name == "road" else name


def translate_instruction(
    maneuver_type: str,
    modifier: Optional[str],
    name: Optional[str],
    locale: str = "th",
) -> str:
    """Build a localized instruction for one maneuver. Never raises on unknown types."""
    direction = translate_direction(modifier, locale)
    road = _road_name(name)
    templates = MANEUVERS.get(locale, MANEUVERS["th"]).get(maneuver_type)

    if templates is None:
        instruction = f"{maneuver_type or ''} {direction} {road}"
    else:
        with_road, without_road = templates
        instruction = (with_road if road else without_road).format(dir=direction, road=road)

    instruction = " ".join(instruction.split())
    return instruction or (maneuver_type or "")
