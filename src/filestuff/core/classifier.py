"""Entry classification for the tree builder."""

from filestuff.types.models import EntryKind, ResourceValues, TraversalMode


def is_expandable(attributes: ResourceValues) -> bool:
    """Check whether an entry may be expanded into a Directory.

    Only real directories qualify. Symbolic links are never followed and
    packages are opaque, so both stay leaves.

    Args:
        attributes: Metadata snapshot of the entry

    Returns:
        True if the entry is a directory that is neither a link nor a package
    """
    return (
        attributes.is_directory is True
        and attributes.is_symbolic_link is not True
        and attributes.is_package is not True
    )


def classify(mode: TraversalMode, attributes: ResourceValues) -> EntryKind:
    """Decide whether a discovered entry becomes a leaf or a branch candidate.

    Args:
        mode: Traversal mode of the current load
        attributes: Metadata snapshot of the entry

    Returns:
        ``EntryKind.LEAF`` in shallow mode or for non-expandable entries,
        ``EntryKind.BRANCH_CANDIDATE`` otherwise

    Examples:
        >>> classify(TraversalMode.SHALLOW, ResourceValues(is_directory=True))
        <EntryKind.LEAF: 'leaf'>
        >>> classify(TraversalMode.DEEP, ResourceValues(is_directory=True))
        <EntryKind.BRANCH_CANDIDATE: 'branch_candidate'>
    """
    if mode is TraversalMode.SHALLOW:
        return EntryKind.LEAF
    if is_expandable(attributes):
        return EntryKind.BRANCH_CANDIDATE
    return EntryKind.LEAF
