from typing import Mapping

from board_agent.services.geometry import BBox


class GeometryCache:
    """Command-scoped map of object id -> bounding box.

    Created when a command starts and dropped when it ends. Every call that
    produces geometry writes here; every call that needs geometry looks here
    first and falls back to one store read on a miss.
    """

    def __init__(self) -> None:
        self._boxes: dict[str, BBox] = {}

    def __contains__(self, object_id: str) -> bool:
        return object_id in self._boxes

    def __len__(self) -> int:
        return len(self._boxes)

    def get(self, object_id: str) -> BBox | None:
        return self._boxes.get(object_id)

    def set(self, object_id: str, box: BBox) -> None:
        self._boxes[object_id] = box

    def update_from_record(self, object_id: str, record: Mapping) -> BBox:
        box = BBox.from_record(record)
        self._boxes[object_id] = box
        return box

    def seed(self, objects: Mapping[str, Mapping]) -> None:
        for object_id, record in objects.items():
            if isinstance(record, Mapping):
                self.update_from_record(object_id, record)

    def discard(self, object_id: str) -> None:
        self._boxes.pop(object_id, None)
