"""Record a short session of list operations into an HTML transcript."""

import logging

from rich.logging import RichHandler

from linkview import ListView


class Node:
    def __init__(self, data=None, prev=None, next=None):
        self.prev = prev
        self.data = data
        self.next = next


class LinkedList:
    def __init__(self):
        self.head = None
        self.tail = None
        self.size = 0

    def add(self, item):
        node = Node(item, prev=self.tail)
        if self.tail is None:
            self.head = node
        else:
            self.tail.next = node
        self.tail = node
        self.size += 1

    def remove_first(self):
        node = self.head
        self.head = node.next
        if self.head is None:
            self.tail = None
        else:
            self.head.prev = None
        self.size -= 1
        return node.data


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(message)s", handlers=[RichHandler()])

    lst = LinkedList()
    with ListView(lst, "list_transcript.html", node_type=Node, echo=True) as view:
        for item in "ABC":
            lst.add(item)
            view.record(f"add({item})")
        view.record(f"size() -> {lst.size}", diagram=False)
        lst.remove_first()
        view.record("removeFirst()")


if __name__ == "__main__":
    main()
