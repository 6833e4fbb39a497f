from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from meshtidy.host.shape import ShapeAccessor

logger = logging.getLogger(__name__)

REGENERATE_NOTICE = "The skin partition was removed, please regenerate it with the skin partition operation"


def drop_stale_partition(shape: ShapeAccessor) -> bool:
    """
    Delete the skin partition of a shape whose vertex layout has changed.

    The partition has no incremental update path, so it is removed rather
    than patched. Returns True when a partition was found and deleted.
    """
    partition = shape.find_skin_partition()
    if partition is None:
        return False

    shape.delete_block(partition)
    logger.warning(REGENERATE_NOTICE)
    return True
