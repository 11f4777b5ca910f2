"""Merge the original and formatted segmentations of a file."""

from nofmt.errors import BlockMismatchError
from nofmt.formatting.ir import Document
from nofmt.log import get_logger

logger = get_logger(__name__)


def check_topology(original: Document, processed: Document) -> None:
    """Ensure both documents have the same block count and tags.

    Raises:
        BlockMismatchError: If the block layouts differ
    """
    if len(original) != len(processed) or original.tags != processed.tags:
        raise BlockMismatchError(original.tags, processed.tags)


def reconcile(original: Document, processed: Document) -> bytes:
    """Build the final output from two aligned documents.

    Formatted blocks come from `processed`, unformatted blocks from
    `original`. The choice is made on the processed block's tag.

    Args:
        original: Segmentation of the source as read
        processed: Segmentation of the formatter's output

    Returns:
        The merged file contents

    Raises:
        BlockMismatchError: If the block layouts differ
    """
    check_topology(original, processed)

    parts: list[bytes] = []
    for before, after in zip(original.blocks, processed.blocks):
        block = after if after.formatted else before
        parts.extend(block.lines)

    logger.debug(
        "reconciled %d block(s), %d kept verbatim",
        len(processed),
        processed.tags.count(False),
    )
    return b"".join(parts)
