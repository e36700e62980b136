"""
OSM tag helpers

Highway classification and the tag predicates used by the sink island check
"""

from enum import Enum
from typing import Mapping, Optional


class HighwayTag(Enum):
    """Values of the OSM ``highway`` key, declared from most to least important"""
    MOTORWAY = "motorway"
    TRUNK = "trunk"
    PRIMARY = "primary"
    SECONDARY = "secondary"
    TERTIARY = "tertiary"
    UNCLASSIFIED = "unclassified"
    RESIDENTIAL = "residential"
    SERVICE = "service"
    MOTORWAY_LINK = "motorway_link"
    TRUNK_LINK = "trunk_link"
    PRIMARY_LINK = "primary_link"
    SECONDARY_LINK = "secondary_link"
    TERTIARY_LINK = "tertiary_link"
    LIVING_STREET = "living_street"
    TRACK = "track"
    ROAD = "road"
    BUS_GUIDEWAY = "bus_guideway"
    RACEWAY = "raceway"
    PEDESTRIAN = "pedestrian"
    FOOTWAY = "footway"
    STEPS = "steps"
    PATH = "path"
    CORRIDOR = "corridor"
    BRIDLEWAY = "bridleway"
    CYCLEWAY = "cycleway"
    CONSTRUCTION = "construction"
    PROPOSED = "proposed"
    PLATFORM = "platform"
    ELEVATOR = "elevator"
    NO = "no"

    @classmethod
    def from_string(cls, value: str) -> "HighwayTag":
        """Parse a highway value case-insensitively (``SERVICE`` and ``service`` both work)"""
        try:
            return cls(value.strip().lower())
        except (AttributeError, ValueError):
            raise ValueError(f"Unknown highway type: {value!r}") from None

    @classmethod
    def from_tags(cls, tags: Mapping[str, str]) -> Optional["HighwayTag"]:
        value = tags.get("highway")
        if not value:
            return None
        try:
            return cls.from_string(value)
        except ValueError:
            return None

    @property
    def importance(self) -> int:
        """Rank where 0 is most important; links rank with the road they connect"""
        return _IMPORTANCE.get(self, len(_IMPORTANCE_ORDER))

    def is_more_important_than_or_equal_to(self, other: "HighwayTag") -> bool:
        return self.importance <= other.importance

    def is_car_navigable(self) -> bool:
        return self in CAR_NAVIGABLE_HIGHWAYS

    def is_pedestrian_navigable(self) -> bool:
        return self in PEDESTRIAN_NAVIGABLE_HIGHWAYS


_IMPORTANCE_ORDER = [
    (HighwayTag.MOTORWAY, HighwayTag.MOTORWAY_LINK),
    (HighwayTag.TRUNK, HighwayTag.TRUNK_LINK),
    (HighwayTag.PRIMARY, HighwayTag.PRIMARY_LINK),
    (HighwayTag.SECONDARY, HighwayTag.SECONDARY_LINK),
    (HighwayTag.TERTIARY, HighwayTag.TERTIARY_LINK),
    (HighwayTag.UNCLASSIFIED,),
    (HighwayTag.RESIDENTIAL,),
    (HighwayTag.SERVICE,),
    (HighwayTag.LIVING_STREET, HighwayTag.TRACK, HighwayTag.ROAD),
]

_IMPORTANCE = {
    tag: rank
    for rank, group in enumerate(_IMPORTANCE_ORDER)
    for tag in group
}

CAR_NAVIGABLE_HIGHWAYS = frozenset({
    HighwayTag.MOTORWAY, HighwayTag.TRUNK, HighwayTag.PRIMARY,
    HighwayTag.SECONDARY, HighwayTag.TERTIARY, HighwayTag.UNCLASSIFIED,
    HighwayTag.RESIDENTIAL, HighwayTag.SERVICE, HighwayTag.MOTORWAY_LINK,
    HighwayTag.TRUNK_LINK, HighwayTag.PRIMARY_LINK, HighwayTag.SECONDARY_LINK,
    HighwayTag.TERTIARY_LINK, HighwayTag.LIVING_STREET, HighwayTag.TRACK,
    HighwayTag.ROAD,
})

PEDESTRIAN_NAVIGABLE_HIGHWAYS = frozenset({
    HighwayTag.PEDESTRIAN, HighwayTag.FOOTWAY, HighwayTag.STEPS,
    HighwayTag.PATH, HighwayTag.CORRIDOR, HighwayTag.LIVING_STREET,
    HighwayTag.TRACK, HighwayTag.BRIDLEWAY,
})

# Amenities whose driveways legitimately dead-end
AMENITY_VALUES_TO_EXCLUDE = frozenset({
    "parking",
    "parking_space",
    "motorcycle_parking",
    "parking_entrance",
})

SYNTHETIC_BOUNDARY_NODE_KEY = "synthetic_boundary_node"
SYNTHETIC_BOUNDARY_NODE_VALUES = frozenset({"yes", "existing"})


def is_car_navigable(tags: Mapping[str, str]) -> bool:
    highway = HighwayTag.from_tags(tags)
    return highway is not None and highway.is_car_navigable()


def is_pedestrian_navigable(tags: Mapping[str, str]) -> bool:
    highway = HighwayTag.from_tags(tags)
    return highway is not None and highway.is_pedestrian_navigable()


def is_aerial_way(tags: Mapping[str, str]) -> bool:
    """Airport taxiways and runways"""
    return tags.get("aeroway") in ("taxiway", "runway")


def is_ferry(tags: Mapping[str, str]) -> bool:
    return tags.get("route") == "ferry"


def is_area(tags: Mapping[str, str]) -> bool:
    return tags.get("area") == "yes"


def has_service_value(tags: Mapping[str, str]) -> bool:
    return bool(tags.get("service", "").strip())


def is_service_road(tags: Mapping[str, str]) -> bool:
    """highway=service carrying a service=* subtype (driveway, parking_aisle, ...)"""
    return HighwayTag.from_tags(tags) is HighwayTag.SERVICE and has_service_value(tags)


def is_excluded_amenity(tags: Mapping[str, str]) -> bool:
    return tags.get("amenity") in AMENITY_VALUES_TO_EXCLUDE


def is_synthetic_boundary(tags: Mapping[str, str]) -> bool:
    return tags.get(SYNTHETIC_BOUNDARY_NODE_KEY) in SYNTHETIC_BOUNDARY_NODE_VALUES
