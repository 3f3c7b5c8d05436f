"""logic/dialogue.py — Dialogue node graphs and the live conversation.

Dialogue trees are loaded from ``data/dialogue.toml`` into a
DialogueManager.  Each tree is keyed by NPC id and holds an *ordered*
dict of nodes; the first node opens the conversation.

Node format::

    {
        "id": "greeting",
        "text": "Welcome, survivor!",
        "choices": [
            {"id": "trade", "text": "Show me your wares.", "action": "open_trade"},
            {"id": "info",  "text": "Tell me more.",        "next": "info"},
        ]
    }

Choice fields:
    text      — what the player says
    next      — node id to advance to (omit to end the conversation)
    action    — string command for an external collaborator
                ("open_trade", "give_quest", "recruit", ...)

A choice whose ``next`` names a node the tree does not have raises
UnknownDialogueNode.  The engine catches it, logs "unexpected node"
and closes the conversation.
"""

from __future__ import annotations
try:
    import tomllib
except ModuleNotFoundError:  # Python < 3.11
    import tomli as tomllib
from dataclasses import dataclass, field
from pathlib import Path

DIALOGUE_PATH = Path(__file__).resolve().parent.parent / "data" / "dialogue.toml"


class UnknownDialogueNode(LookupError):
    """A choice pointed at a node id its tree does not define."""

    def __init__(self, tree_id: str, node_id: str):
        super().__init__(f"unexpected node {node_id!r} in tree {tree_id!r}")
        self.tree_id = tree_id
        self.node_id = node_id


# ── Dialogue manager ────────────────────────────────────────────────


@dataclass
class DialogueManager:
    """Holds every dialogue tree, keyed by tree id (normally the NPC id)."""
    _trees: dict[str, dict[str, dict]] = field(default_factory=dict)

    def register(self, tree_id: str, nodes: list[dict] | dict[str, dict]):
        if isinstance(nodes, dict):
            self._trees[tree_id] = dict(nodes)
            return
        tree: dict[str, dict] = {}
        for node in nodes:
            tree[node["id"]] = node
        self._trees[tree_id] = tree

    def get_tree(self, tree_id: str) -> dict[str, dict] | None:
        return self._trees.get(tree_id)

    def get_node(self, tree_id: str, node_id: str) -> dict | None:
        tree = self._trees.get(tree_id)
        if tree:
            return tree.get(node_id)
        return None

    def first_node(self, tree_id: str) -> dict | None:
        tree = self._trees.get(tree_id)
        if not tree:
            return None
        return next(iter(tree.values()))

    def __contains__(self, tree_id: str) -> bool:
        return tree_id in self._trees

    def __len__(self) -> int:
        return len(self._trees)

    def start(self, npc_id: str, tree_id: str | None = None,
              npc_name: str = "") -> "DialogueSession":
        """Open a conversation at the tree's first node.

        An NPC without a tree still gets a session: one line of
        history and no choices.
        """
        tree_id = tree_id or npc_id
        node = self.first_node(tree_id)
        session = DialogueSession(manager=self, npc_id=npc_id,
                                  tree_id=tree_id, npc_name=npc_name or npc_id)
        if node is None:
            session.history.append(f"{session.npc_name} has nothing to say.")
            return session
        session._enter(node)
        return session


def load_dialogue(path: str | Path | None = None,
                  manager: DialogueManager | None = None) -> DialogueManager:
    """Load dialogue.toml: each top-level array of tables is one tree."""
    manager = manager if manager is not None else DialogueManager()
    path = Path(path) if path is not None else DIALOGUE_PATH
    if not path.exists():
        print(f"[DIALOGUE] {path} not found, no conversations loaded")
        return manager
    with open(path, "rb") as f:
        raw = tomllib.load(f)
    for tree_id, nodes in raw.items():
        if isinstance(nodes, list):
            manager.register(tree_id, nodes)
    print(f"[DIALOGUE] Loaded {len(manager)} trees from {path.name}")
    return manager


# ── Live conversation ───────────────────────────────────────────────


@dataclass
class DialogueSession:
    """An open conversation with one NPC."""
    manager: DialogueManager = field(repr=False)
    npc_id: str
    tree_id: str
    npc_name: str = ""
    node_id: str = ""
    history: list[str] = field(default_factory=list)
    choices: list[dict] = field(default_factory=list)
    ended: bool = False

    def _enter(self, node: dict):
        self.node_id = node.get("id", "")
        self.history.append(node.get("text", ""))
        self.choices = list(node.get("choices", []))

    def choose(self, index: int) -> dict | None:
        """Pick choice *index* (0-based).

        Returns the chosen choice dict, or None if *index* is not one of
        the current choices.  Raises UnknownDialogueNode when the choice
        points at a node the tree lacks; the session is left unchanged
        apart from the player's line in the history.
        """
        if self.ended or not 0 <= index < len(self.choices):
            return None
        choice = self.choices[index]
        self.history.append(f"> {choice.get('text', '')}")
        nxt = choice.get("next")
        if not nxt:
            self.ended = True
            self.choices = []
            return choice
        node = self.manager.get_node(self.tree_id, nxt)
        if node is None:
            raise UnknownDialogueNode(self.tree_id, nxt)
        self._enter(node)
        return choice

    def snapshot(self) -> dict:
        return {"npc_id": self.npc_id, "tree_id": self.tree_id,
                "npc_name": self.npc_name, "node_id": self.node_id,
                "history": list(self.history), "ended": self.ended}

    @classmethod
    def restore(cls, manager: DialogueManager, data: dict) -> "DialogueSession":
        session = cls(manager=manager, npc_id=data["npc_id"],
                      tree_id=data.get("tree_id", data["npc_id"]),
                      npc_name=data.get("npc_name", ""),
                      node_id=data.get("node_id", ""),
                      history=list(data.get("history", [])),
                      ended=data.get("ended", False))
        node = manager.get_node(session.tree_id, session.node_id)
        if node is not None and not session.ended:
            session.choices = list(node.get("choices", []))
        return session
