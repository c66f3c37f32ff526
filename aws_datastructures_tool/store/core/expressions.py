"""
Condition and update expression builder.

Collects predicates and update clauses with their attribute-name and value
placeholders, then renders the keyword arguments of a DynamoDB call:

    builder = ExpressionBuilder()
    builder.equals("pk", "mylist")
    builder.range("skN", RangeCap.score(1), RangeCap.score(5))
    client.query_page(builder.key_condition())
"""

from typing import Any

from .range_caps import RangeCap


class ExpressionBuilder:
    """Accumulates conditions and update clauses for one request."""

    def __init__(self) -> None:
        self.conditions: list[str] = []
        self.clauses: dict[str, list[str]] = {}
        self.names: dict[str, str] = {}
        self.values: dict[str, Any] = {}

    def _name(self, attribute: str) -> str:
        placeholder = f"#{attribute}" if attribute.isidentifier() else f"#n{len(self.names)}"
        self.names[placeholder] = attribute
        return placeholder

    def _value(self, value: Any) -> str:
        placeholder = f":v{len(self.values)}"
        self.values[placeholder] = value
        return placeholder

    def equals(self, attribute: str, value: Any) -> "ExpressionBuilder":
        self.conditions.append(f"{self._name(attribute)} = {self._value(value)}")
        return self

    def compare(self, attribute: str, operator: str, value: Any) -> "ExpressionBuilder":
        """Add ``attribute <operator> value`` for one of =, <, <=, >, >=."""
        if operator not in ("=", "<", "<=", ">", ">="):
            raise ValueError(f"Unsupported comparison operator: {operator}")
        self.conditions.append(f"{self._name(attribute)} {operator} {self._value(value)}")
        return self

    def between(self, attribute: str, low: Any, high: Any) -> "ExpressionBuilder":
        name = self._name(attribute)
        self.conditions.append(f"{name} BETWEEN {self._value(low)} AND {self._value(high)}")
        return self

    def begins_with(self, attribute: str, prefix: str) -> "ExpressionBuilder":
        self.conditions.append(f"begins_with({self._name(attribute)}, {self._value(prefix)})")
        return self

    def exists(self, attribute: str) -> "ExpressionBuilder":
        self.conditions.append(f"attribute_exists({self._name(attribute)})")
        return self

    def not_exists(self, attribute: str) -> "ExpressionBuilder":
        self.conditions.append(f"attribute_not_exists({self._name(attribute)})")
        return self

    def absent_or_one_of(self, attribute: str, *values: Any) -> "ExpressionBuilder":
        """Add ``attribute_not_exists(attribute) OR attribute IN (values)``."""
        name = self._name(attribute)
        placeholders = ", ".join(self._value(value) for value in values)
        self.conditions.append(f"(attribute_not_exists({name}) OR {name} IN ({placeholders}))")
        return self

    def range(self, attribute: str, lower: RangeCap, upper: RangeCap) -> "ExpressionBuilder":
        """
        Add the predicate for a pair of range caps.

        Both caps present gives BETWEEN (exclusive ends are filtered by the
        caller), one cap gives a single comparison, none adds nothing.
        """
        if lower.present() and upper.present():
            return self.between(attribute, lower.to_attribute(), upper.to_attribute())
        if lower.present():
            return self.compare(attribute, ">" if lower.exclusive else ">=", lower.to_attribute())
        if upper.present():
            return self.compare(attribute, "<" if upper.exclusive else "<=", upper.to_attribute())
        return self

    def set(self, attribute: str, value: Any) -> "ExpressionBuilder":
        self.clauses.setdefault("SET", []).append(f"{self._name(attribute)} = {self._value(value)}")
        return self

    def add(self, attribute: str, value: Any) -> "ExpressionBuilder":
        self.clauses.setdefault("ADD", []).append(f"{self._name(attribute)} {self._value(value)}")
        return self

    def _placeholders(self) -> dict[str, Any]:
        kwargs: dict[str, Any] = {}
        if self.names:
            kwargs["ExpressionAttributeNames"] = dict(self.names)
        if self.values:
            kwargs["ExpressionAttributeValues"] = dict(self.values)
        return kwargs

    def condition_expression(self) -> str | None:
        if not self.conditions:
            return None
        return " AND ".join(self.conditions)

    def update_expression(self) -> str | None:
        if not self.clauses:
            return None
        return " ".join(f"{action} {', '.join(parts)}" for action, parts in self.clauses.items())

    def condition(self) -> dict[str, Any]:
        """Arguments for a conditional PutItem/DeleteItem (empty when unconditional)."""
        kwargs = self._placeholders()
        expression = self.condition_expression()
        if expression:
            kwargs["ConditionExpression"] = expression
        return kwargs

    def key_condition(self) -> dict[str, Any]:
        """Arguments for a Query."""
        return {"KeyConditionExpression": self.condition_expression(), **self._placeholders()}

    def update(self) -> dict[str, Any]:
        """Arguments for an UpdateItem, including its condition if any."""
        kwargs = self.condition()
        kwargs["UpdateExpression"] = self.update_expression()
        return kwargs
