"""
Edge eligibility - which edges take part in graph traversal at all
"""

from ..graph import Edge
from ..graph.tags import is_aerial_way, is_area, is_car_navigable, is_ferry


class EdgeEligibilityFilter:
    """Pure predicate over edges; ineligible edges are invisible to the search"""

    @staticmethod
    def is_eligible(edge) -> bool:
        """
        Check various elements of the edge to make sure that we should be looking at it

        Returns:
            True for car navigable road edges that are not taxiways, runways,
            ferry routes or highways tagged as areas
        """
        if not isinstance(edge, Edge):
            return False
        tags = edge.tags
        return (
            # Airport taxiways and runways often create sink islands
            not is_aerial_way(tags)
            and is_car_navigable(tags)
            and not is_ferry(tags)
            # Closed polygons mislabeled as lines
            and not is_area(tags)
        )

    def __call__(self, edge) -> bool:
        return self.is_eligible(edge)
