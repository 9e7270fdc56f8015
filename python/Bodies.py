"""
Catalog of the bodies the viewer can focus, in focus order.

Each body has one description per detail level; the presentation side
shows the one matching the current DetailLevel.
"""

from typing import Dict, List, Optional


class Body:
    def __init__(self, name: str, descriptions: Dict[str, str], moons: Optional[List[str]] = None, orbital_period: float = 0.0):
        self.name = name
        self.descriptions = descriptions
        self.moons = list(moons or [])
        # Earth days, 0 for the Sun
        self.orbital_period = orbital_period

    def describe(self, level_label: str) -> str:
        return self.descriptions.get(level_label) or self.descriptions.get("overview", "")


SOLAR_SYSTEM: List[Body] = [
    Body(
        "Sun",
        {
            "overview": "The Sun is the star at the center of our Solar System.",
            "detailed": "A yellow dwarf star, the Sun provides light and heat to all planets. It contains 99.86% of the Solar System's mass.",
            "deep": "The Sun is a G-type main-sequence star with a surface temperature of 5,778 K. It formed 4.6 billion years ago and will continue to shine for another 5 billion years.",
        },
    ),
    Body(
        "Mercury",
        {
            "overview": "Mercury is the smallest and innermost planet in the Solar System.",
            "detailed": "Mercury has no moons and no atmosphere. It's heavily cratered and experiences extreme temperature variations.",
            "deep": "Mercury's surface temperature ranges from -180°C to 430°C. It has a large iron core and completes one orbit every 88 Earth days.",
        },
        orbital_period=88,
    ),
    Body(
        "Venus",
        {
            "overview": "Venus is the second planet from the Sun and Earth's closest planetary neighbor.",
            "detailed": "Venus has a thick atmosphere of carbon dioxide and sulfuric acid clouds. It's the hottest planet in our Solar System.",
            "deep": "Venus has a runaway greenhouse effect with surface temperatures reaching 462°C. It rotates backwards compared to most planets.",
        },
        orbital_period=225,
    ),
    Body(
        "Earth",
        {
            "overview": "Earth is our home planet and the only known planet with life.",
            "detailed": "Earth has one moon, liquid water, and a protective atmosphere. It's the only planet known to support life.",
            "deep": "Earth formed 4.54 billion years ago. It has a magnetic field that protects life from solar radiation and cosmic rays.",
        },
        moons=["Moon"],
        orbital_period=365,
    ),
    Body(
        "Mars",
        {
            "overview": "Mars is the fourth planet from the Sun, often called the Red Planet.",
            "detailed": "Mars has two moons, thin atmosphere, and evidence of ancient water. It's a target for future human exploration.",
            "deep": "Mars has the largest volcano in the Solar System (Olympus Mons) and evidence of ancient river valleys and lake beds.",
        },
        moons=["Phobos", "Deimos"],
        orbital_period=687,
    ),
    Body(
        "Jupiter",
        {
            "overview": "Jupiter is the largest planet in our Solar System.",
            "detailed": "Jupiter is a gas giant with 79 known moons. It has a Great Red Spot storm that has raged for centuries.",
            "deep": "Jupiter's mass is 2.5 times that of all other planets combined. It acts as a cosmic vacuum cleaner, protecting inner planets from asteroids.",
        },
        moons=["Io", "Europa", "Ganymede", "Callisto"],
        orbital_period=4333,
    ),
    Body(
        "Saturn",
        {
            "overview": "Saturn is famous for its spectacular ring system.",
            "detailed": "Saturn has 82 moons and beautiful rings made of ice, rock, and dust. It's the least dense planet in our Solar System.",
            "deep": "Saturn's rings are only about 10 meters thick but span 280,000 km. The planet could float in water if there was an ocean large enough.",
        },
        moons=["Titan", "Enceladus", "Mimas"],
        orbital_period=10759,
    ),
    Body(
        "Uranus",
        {
            "overview": "Uranus is the seventh planet from the Sun and an ice giant.",
            "detailed": "Uranus rotates on its side and has 27 moons. It appears blue-green due to methane in its atmosphere.",
            "deep": "Uranus was the first planet discovered with a telescope. It has 13 faint rings and experiences extreme seasons due to its tilted axis.",
        },
        moons=["Miranda", "Ariel", "Umbriel"],
        orbital_period=30687,
    ),
    Body(
        "Neptune",
        {
            "overview": "Neptune is the eighth and farthest known planet from the Sun.",
            "detailed": "Neptune is an ice giant with 14 moons and the strongest winds in the Solar System, reaching 2,100 km/h.",
            "deep": "Neptune was predicted mathematically before it was discovered. It has a Great Dark Spot storm similar to Jupiter's Great Red Spot.",
        },
        moons=["Triton", "Proteus"],
        orbital_period=60190,
    ),
]


def load_bodies(entries=None) -> List[Body]:
    """
    Build a catalog from config entries (list of dicts with at least "name").
    Falls back to SOLAR_SYSTEM when nothing usable is given.
    """
    if not entries:
        return list(SOLAR_SYSTEM)
    bodies = []
    for entry in entries:
        if isinstance(entry, str):
            entry = {"name": entry}
        if not isinstance(entry, dict) or not entry.get("name"):
            print(f"[PY] Ignoring malformed body entry: {entry!r}")
            continue
        bodies.append(
            Body(
                entry["name"],
                entry.get("descriptions", {}),
                moons=entry.get("moons"),
                orbital_period=entry.get("orbital_period", 0.0),
            )
        )
    return bodies or list(SOLAR_SYSTEM)
