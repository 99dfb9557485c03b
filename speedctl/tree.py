"""Minimal composed node tree with shadow roots.

Nodes form ordinary parent/child trees. A shadow root is the top of its own
tree and points back to its host, so walking from any node to the document
means following ``parent_node`` and, at the top of each shadow tree, jumping
to ``host``. ``composed_parent`` is the only traversal primitive the router
relies on; anything exposing ``parent_node``/``host`` works with it.
"""

import logging

from .utils import EDITABLE_TAGS, SETTINGS_UI_CLASS


def composed_parent(node):
    """Next node on the way to the document, crossing shadow boundaries."""
    if node is None:
        return None
    parent = getattr(node, "parent_node", None)
    if parent is not None:
        return parent
    return getattr(node, "host", None)


def composed_path(node, next_node=composed_parent) -> list:
    path = []
    seen = set()
    while node is not None and id(node) not in seen:
        seen.add(id(node))
        path.append(node)
        node = next_node(node)
    return path


def is_editable(node, next_node=composed_parent) -> bool:
    """True when key presses on ``node`` belong to a text field or the settings UI."""
    for current in composed_path(node, next_node):
        tag = str(getattr(current, "tag", "") or "").lower()
        if tag in EDITABLE_TAGS:
            return True
        if getattr(current, "content_editable", False):
            return True
        if SETTINGS_UI_CLASS in getattr(current, "classes", ()):
            return True
    return False


class Node:
    def __init__(self, tag: str = "div", classes=(), content_editable: bool = False, text: str = ""):
        self.tag = tag.lower()
        self.parent_node = None
        self.children = []
        self.shadow_root = None
        self.classes = set(classes)
        self.content_editable = content_editable
        self.text_content = text
        self._listeners = {}

    def __repr__(self):
        return f"<{type(self).__name__} {self.tag}>"

    def append_child(self, child):
        if child.parent_node is not None:
            child.parent_node.remove_child(child)
        child.parent_node = self
        self.children.append(child)
        return child

    def remove_child(self, child):
        if child in self.children:
            self.children.remove(child)
            child.parent_node = None
        return child

    def remove(self):
        if self.parent_node is not None:
            self.parent_node.remove_child(self)

    def attach_shadow(self):
        if self.shadow_root is None:
            self.shadow_root = ShadowRoot(self)
        return self.shadow_root

    def root_node(self):
        node = self
        while node.parent_node is not None:
            node = node.parent_node
        return node

    @property
    def is_connected(self) -> bool:
        root = self.root_node()
        if isinstance(root, Document):
            return True
        if isinstance(root, ShadowRoot):
            return root.host.is_connected
        return False

    def contains(self, other) -> bool:
        """Plain (non-composed) containment, like DOM ``Node.contains``."""
        node = other
        while node is not None:
            if node is self:
                return True
            node = node.parent_node
        return False

    def set_class(self, name: str, enabled: bool):
        if enabled:
            self.classes.add(name)
        else:
            self.classes.discard(name)

    def add_event_listener(self, event_type: str, callback):
        callbacks = self._listeners.setdefault(event_type, [])
        if callback not in callbacks:
            callbacks.append(callback)

    def remove_event_listener(self, event_type: str, callback):
        callbacks = self._listeners.get(event_type, [])
        if callback in callbacks:
            callbacks.remove(callback)

    def listeners(self, event_type: str) -> list:
        return list(self._listeners.get(event_type, []))

    def dispatch_event(self, event_type: str, event):
        """Bubble ``event`` from this node along its composed path.

        Listeners run in registration order on each node; bubbling stops after
        the node on which ``event.stop_propagation()`` was called.
        """
        if getattr(event, "target", None) is None:
            event.target = self
        for node in composed_path(self):
            for callback in node.listeners(event_type):
                try:
                    callback(event)
                except Exception:
                    logging.exception("Listener failed for %s on %r", event_type, node)
            if getattr(event, "propagation_stopped", False):
                break
        return not getattr(event, "default_prevented", False)


class ShadowRoot(Node):
    def __init__(self, host: Node):
        super().__init__("#shadow-root")
        self.host = host

    def __repr__(self):
        return f"<ShadowRoot of {self.host!r}>"


class Document(Node):
    def __init__(self):
        super().__init__("#document")
        self.body = self.append_child(Node("body"))
