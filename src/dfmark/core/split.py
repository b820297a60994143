"""Blockquote regrouping into plain quote, section, and note runs"""

from dfmark.core.models import Note, Section, SplitToken, TokenKind, payload


def child_blocks(tokens: list) -> list[list]:
    """Group a flat token span into its top-level blocks.

    Each block is a single nesting-0 token or an open..close span.
    """
    blocks: list[list] = []
    depth = 0
    for tok in tokens:
        if depth == 0:
            blocks.append([])
        blocks[-1].append(tok)
        depth += tok.nesting
    return blocks


def matching_close(tokens: list, idx: int) -> int:
    """Return the index of the token closing the one opened at idx."""
    depth = 0
    for i in range(idx, len(tokens)):
        depth += tokens[i].nesting
        if depth == 0:
            return i
    raise ValueError(f"Unbalanced token stream: {tokens[idx].type} at {idx} is never closed")


def kind_key(block: list) -> tuple:
    """Classify a child block: section/note (with their label) or plain."""
    head = block[0]
    data = payload(head)
    if head.type == TokenKind.section.value and isinstance(data, Section):
        return ("section", data.attributes)
    if head.type == TokenKind.note.value and isinstance(data, Note):
        return ("note", data.note_type)
    return ("plain",)


def split_blockquote(children: list[list]) -> list[SplitToken]:
    """Partition child blocks into maximal runs of the same kind, preserving order."""
    groups: list[SplitToken] = []
    current_key = None
    for block in children:
        key = kind_key(block)
        if not groups or key != current_key:
            marker = block[0] if key[0] != "plain" else None
            groups.append(SplitToken(token=marker))
            current_key = key
        groups[-1].inner.append(block)
    return groups
