#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/web2md/registry.py
"""Rule registry for node-to-Markdown dispatch.

The registry is an ordered list of rules scanned from the most recently
registered to the oldest; the first rule whose predicate matches wins. This
makes every registration an override of whatever was registered before it,
built-in rules included.

Registration is copy-on-write behind a lock. A conversion works from an
immutable ``RegistrySnapshot`` taken when it starts, so rules registered while
it runs are never observed by it.

Examples
--------
Drop navigation and keep ``<sup>`` as raw HTML for every later conversion:

    >>> from web2md.registry import default_registry
    >>> default_registry.remove("nav")
    >>> default_registry.keep("sup")

Use a private registry instead of the process-wide one:

    >>> from web2md import convert
    >>> from web2md.registry import RuleRegistry
    >>> registry = RuleRegistry()
    >>> registry.remove("aside")
    >>> result = convert(tree, registry=registry)

"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Optional

from web2md.constants import DisplayKind
from web2md.exceptions import RuleError, ValidationError, Web2MdError
from web2md.nodes import Node
from web2md.rules import BUILTIN_RULES, PASSTHROUGH_RULE, Rule, ignore_rule, keep_rule
from web2md.whitespace import DisplayTable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RegistrySnapshot:
    """Immutable view of a registry at one point in time.

    Parameters
    ----------
    rules : tuple of Rule
        Rules in registration order
    display : DisplayTable
        Display classification used for whitespace and sibling joining

    """

    rules: tuple[Rule, ...]
    display: DisplayTable

    def resolve(self, node: Node) -> Rule:
        """Return the last registered rule matching ``node``, or the passthrough rule."""
        for rule in reversed(self.rules):
            try:
                matched = rule.match(node)
            except (Web2MdError, RecursionError):
                raise
            except Exception as e:
                raise RuleError(
                    f"Rule '{rule.name}' failed to match {node.describe()}: {e}",
                    rule_name=rule.name,
                    tag=getattr(node, "tag", None),
                    original_error=e,
                ) from e
            if matched:
                return rule
        logger.debug(f"No rule matches {node.describe()}; rendering its children only")
        return PASSTHROUGH_RULE


class RuleRegistry:
    """Ordered, overridable collection of conversion rules.

    Parameters
    ----------
    include_builtins : bool, default True
        Start from the built-in rule set. An empty registry renders every
        element through the passthrough rule.

    """

    def __init__(self, include_builtins: bool = True):
        """Initialize the registry with the built-in rules."""
        self._lock = threading.Lock()
        self._rules: tuple[Rule, ...] = BUILTIN_RULES if include_builtins else ()
        self._display = DisplayTable()

    def register(self, rule: Rule) -> None:
        """Append a rule; it takes precedence over every rule registered earlier.

        Parameters
        ----------
        rule : Rule
            Rule to register

        Raises
        ------
        ValidationError
            If ``rule`` is not a ``Rule``

        """
        if not isinstance(rule, Rule):
            raise ValidationError(
                f"Expected a Rule, got {type(rule).__name__}", parameter_name="rule", parameter_value=rule
            )
        with self._lock:
            if any(existing.name == rule.name for existing in self._rules):
                logger.debug(f"Rule '{rule.name}' already registered; the new rule overrides it")
            self._rules = self._rules + (rule,)
        logger.debug(f"Registered rule: {rule.name}")

    def unregister(self, name: str) -> bool:
        """Remove every rule with the given name.

        Returns
        -------
        bool
            True if a rule was removed, False if none had that name

        """
        with self._lock:
            remaining = tuple(rule for rule in self._rules if rule.name != name)
            removed = len(remaining) != len(self._rules)
            self._rules = remaining
        if removed:
            logger.debug(f"Unregistered rule: {name}")
        return removed

    def keep(self, *tags: str) -> None:
        """Emit elements with these tags as raw HTML."""
        if tags:
            self.register(keep_rule(f"keep:{','.join(tags)}", *tags))

    def remove(self, *tags: str) -> None:
        """Drop elements with these tags together with their content."""
        if tags:
            self.register(ignore_rule(f"remove:{','.join(tags)}", *tags))

    def set_display(self, tag: str, kind: DisplayKind) -> None:
        """Classify ``tag`` as a block, inline or preformatted element.

        Raises
        ------
        ValidationError
            If ``kind`` is not a display kind

        """
        try:
            with self._lock:
                self._display = self._display.with_override(tag, kind)
        except ValueError as e:
            raise ValidationError(str(e), parameter_name="kind", parameter_value=kind, original_error=e) from e

    def resolve(self, node: Node) -> Rule:
        """Return the rule that would render ``node`` right now."""
        return self.snapshot().resolve(node)

    def names(self) -> list[str]:
        """Rule names in registration order."""
        return [rule.name for rule in self._rules]

    def snapshot(self) -> RegistrySnapshot:
        with self._lock:
            return RegistrySnapshot(rules=self._rules, display=self._display)

    def copy(self) -> RuleRegistry:
        """Return an independent registry with the same rules and display table."""
        clone = RuleRegistry(include_builtins=False)
        snapshot = self.snapshot()
        clone._rules = snapshot.rules
        clone._display = snapshot.display
        return clone

    def __len__(self) -> int:
        return len(self._rules)

    def __repr__(self) -> str:
        return f"RuleRegistry({len(self._rules)} rules)"


default_registry = RuleRegistry()


def get_default_registry(registry: Optional[RuleRegistry] = None) -> RuleRegistry:
    """Return ``registry`` if given, else the process-wide default."""
    return registry if registry is not None else default_registry


__all__ = ["RegistrySnapshot", "RuleRegistry", "default_registry", "get_default_registry"]
