"""Singly linked lists: cycle detection, appending and reversing."""

from typing import Iterator, Optional


class Node:
    """One node of a singly linked list."""

    __slots__ = ("value", "next")

    def __init__(self, value: int = 0, next: Optional["Node"] = None) -> None:
        self.value = value
        self.next = next

    def __repr__(self) -> str:
        return f"Node({self.value!r})"


def has_cycle(head: Optional[Node]) -> bool:
    """Return True if following next links from head ever loops."""
    slow = fast = head
    while fast is not None and fast.next is not None:
        fast = fast.next.next
        slow = slow.next
        if fast is slow:
            return True
    return False


def append_node(head: Optional[Node], value: int) -> Node:
    """Append a node holding value at the end; return the (possibly new) head."""
    node = Node(value)
    if head is None:
        return node
    tail = head
    while tail.next is not None:
        tail = tail.next
    tail.next = node
    return head


def reverse_list(head: Optional[Node]) -> Optional[Node]:
    """Reverse the list in place and return its new head."""
    prev = None
    while head is not None:
        head.next, prev, head = prev, head, head.next
    return prev


def iter_values(head: Optional[Node]) -> Iterator[int]:
    """Yield the values of the list from head onwards."""
    while head is not None:
        yield head.value
        head = head.next


def list_size(head: Optional[Node]) -> int:
    """Return the number of nodes in the list."""
    return sum(1 for _ in iter_values(head))