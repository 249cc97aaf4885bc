"""Tests for the block-evaluated Cypher DSL."""

from typing import Any

import pytest

from cypherkit.core.base import ErrorCode
from cypherkit.core.errors import MissingIndexError, UnknownArgumentError
from cypherkit.dsl import Cypher
from cypherkit.dsl.registry import FragmentKind


def cypher(block: Any) -> str:
    return str(Cypher(block))


# =============================================================================
# Start entities
# =============================================================================


class TestStart:
    def test_start_node_with_traversal(self) -> None:
        def block(q: Cypher) -> str:
            q.node(3).outgoing_to("x")
            return "x"

        assert cypher(block) == "START n0=node(3) MATCH (n0)-->(x) RETURN x"

    def test_multiple_node_ids(self) -> None:
        assert cypher(lambda q: q.node(1, 2, 3)) == "START n0=node(1,2,3) RETURN n0"

    def test_start_names_follow_registry_size(self) -> None:
        def block(q: Cypher) -> Any:
            a = q.node(1)
            b = q.node(2)
            a.outgoing_to(b)
            return b

        assert cypher(block) == "START n0=node(1),n1=node(2) MATCH (n0)-->(n1) RETURN n1"

    def test_start_relationship(self) -> None:
        assert cypher(lambda q: q.rel(5)) == "START r0=relationship(5) RETURN r0"

    def test_renamed_start(self) -> None:
        def block(q: Cypher) -> str:
            q.node(3).as_("a").outgoing_to("b")
            return "b"

        assert cypher(block) == "START a=node(3) MATCH (a)-->(b) RETURN b"

    def test_index_query(self, index_resolver: Any) -> None:
        result = cypher(lambda q: q.query(index_resolver, "name:A*"))
        assert result == "START n0=node:Person_exact(name:A*) RETURN n0"

    def test_index_query_with_index_type(self, index_resolver: Any) -> None:
        result = cypher(lambda q: q.query(index_resolver, "bio:graph", "fulltext"))
        assert result == "START n0=node:Person_fulltext(bio:graph) RETURN n0"

    def test_index_lookup(self, index_resolver: Any) -> None:
        result = cypher(lambda q: q.lookup(index_resolver, "name", "Andreas"))
        assert result == 'START n0=node:Person_exact(name="Andreas") RETURN n0'

    def test_lookup_uses_index_type_of_key(self, index_resolver: Any) -> None:
        result = cypher(lambda q: q.lookup(index_resolver, "bio", "graphs"))
        assert result == 'START n0=node:Person_fulltext(bio="graphs") RETURN n0'


# =============================================================================
# Pattern chains
# =============================================================================


class TestPatternChains:
    def test_named_relationship(self) -> None:
        def block(q: Cypher) -> str:
            q.node(3).outgoing("r").outgoing("x")
            return "r"

        assert cypher(block) == "START n0=node(3) MATCH (n0)-[r]->(x) RETURN r"

    @pytest.mark.parametrize(
        ("method", "expected"),
        [
            ("outgoing_to", "(n0)-->(x)"),
            ("incoming_from", "(n0)<--(x)"),
            ("relate_to", "(n0)--(x)"),
        ],
    )
    def test_node_hop_connectors(self, method: str, expected: str) -> None:
        def block(q: Cypher) -> str:
            getattr(q.node(1), method)("x")
            return "x"

        assert cypher(block) == f"START n0=node(1) MATCH {expected} RETURN x"

    @pytest.mark.parametrize(
        ("method", "expected"),
        [
            ("outgoing", "(n0)-[r]->(x)"),
            ("incoming", "(n0)<-[r]-(x)"),
            ("related", "(n0)-[r]-(x)"),
        ],
    )
    def test_relationship_connectors(self, method: str, expected: str) -> None:
        def block(q: Cypher) -> str:
            getattr(getattr(q.node(1), method)("r"), method)("x")
            return "x"

        assert cypher(block) == f"START n0=node(1) MATCH {expected} RETURN x"

    def test_long_chain_is_emitted_once(self) -> None:
        def block(q: Cypher) -> str:
            q.node(1).outgoing_to("a").incoming_from("b").relate_to("c")
            return "c"

        query = Cypher(block)
        assert str(query) == "START n0=node(1) MATCH (n0)-->(a)<--(b)--(c) RETURN c"
        assert query.expressions.kinds().count(FragmentKind.MATCH) == 1

    def test_mixed_relationship_chain(self) -> None:
        def block(q: Cypher) -> str:
            q.node(1).outgoing("r").outgoing("b").incoming("s").related("c")
            return "c"

        assert cypher(block) == "START n0=node(1) MATCH (n0)-[r]->(b)<-[s]-(c) RETURN c"

    def test_hop_followed_by_relationship(self) -> None:
        def block(q: Cypher) -> str:
            q.node(1).outgoing_to("a").outgoing("r").outgoing("b")
            return "b"

        assert cypher(block) == "START n0=node(1) MATCH (n0)-->(a)-[r]->(b) RETURN b"

    def test_two_chains_are_comma_separated(self) -> None:
        def block(q: Cypher) -> str:
            n = q.node(1)
            n.outgoing_to("a")
            n.incoming_from("b")
            return "a"

        assert cypher(block) == "START n0=node(1) MATCH (n0)-->(a),(n0)<--(b) RETURN a"

    def test_walk_from_tail_reaches_head(self) -> None:
        seen: dict[str, Any] = {}

        def block(q: Cypher) -> None:
            head = q.node(1).outgoing("r")
            seen["head"] = head
            seen["tail"] = head.outgoing("x")

        Cypher(block)
        tail = seen["tail"]
        assert tail.find_match_start() is seen["head"]
        assert [s.connector for s in tail.chain.walk(tail)] == ["-", "->"]

    def test_rel_variable_expression(self) -> None:
        def block(q: Cypher) -> Any:
            r = q.rel("r?")
            q.node(3).outgoing(r).outgoing("x")
            return r

        assert cypher(block) == "START n0=node(3) MATCH (n0)-[r?]->(x) RETURN r"

    def test_rel_variable_with_type(self) -> None:
        def block(q: Cypher) -> Any:
            r = q.rel("friend:KNOWS")
            q.node(3).outgoing(r).outgoing("x")
            return r

        assert cypher(block) == "START n0=node(3) MATCH (n0)-[friend:KNOWS]->(x) RETURN friend"

    def test_unbound_node_variable(self) -> None:
        def block(q: Cypher) -> Any:
            x = q.node()
            q.node(3).outgoing_to(x)
            return x

        assert cypher(block) == "START n0=node(3) MATCH (n0)-->(v0) RETURN v0"

    def test_named_node_variable(self) -> None:
        def block(q: Cypher) -> Any:
            friend = q.node("friend")
            q.node(3).outgoing_to(friend)
            return friend

        assert cypher(block) == "START n0=node(3) MATCH (n0)-->(friend) RETURN friend"

    def test_shortest_path(self) -> None:
        def block(q: Cypher) -> Any:
            return q.shortest_path(lambda q: q.node(1).outgoing_to("x"))

        assert cypher(block) == "START n0=node(1) MATCH m2 = shortestPath((n0)-->(x)) RETURN m2"

    def test_shortest_path_wraps_whole_chain_from_its_tail(self) -> None:
        seen: dict[str, Any] = {}

        def block(q: Cypher) -> Any:
            seen["tail"] = q.shortest_path(lambda q: q.node(1).outgoing("r").outgoing("x"))
            return seen["tail"]

        query = Cypher(block)
        tail = seen["tail"]
        assert tail is tail.chain.segments[-1]
        assert tail.find_match_start() is tail.chain.segments[0]
        assert str(query) == f"START n0=node(1) MATCH {tail.var_name} = shortestPath((n0)-[r]->(x)) RETURN {tail.var_name}"


# =============================================================================
# Filters
# =============================================================================


class TestWhere:
    def test_property_comparison(self) -> None:
        def block(q: Cypher) -> Any:
            n = q.node(3)
            n.outgoing_to("x")
            n["age"] > 30
            return n

        assert cypher(block) == "START n0=node(3) MATCH (n0)-->(x) WHERE (n0.age > 30) RETURN n0"

    def test_and_combination_is_parenthesized(self) -> None:
        def block(q: Cypher) -> Any:
            n = q.node(1)
            (n["a"] < 1) & (n["b"] > 2)
            return n

        query = Cypher(block)
        assert str(query) == "START n0=node(1) WHERE ((n0.a < 1) and (n0.b > 2)) RETURN n0"
        assert query.expressions.kinds().count(FragmentKind.WHERE) == 1

    def test_or_combination_with_string_literal(self) -> None:
        def block(q: Cypher) -> Any:
            n = q.node(1)
            (n["name"] == "x") | (n["b"] != 2)
            return n

        assert cypher(block) == 'START n0=node(1) WHERE ((n0.name = "x") or (n0.b <> 2)) RETURN n0'

    def test_literals(self) -> None:
        def block(q: Cypher) -> Any:
            n = q.node(1)
            (n["active"] == True) & (n["deleted"] == None)  # noqa: E711, E712
            return n

        assert cypher(block) == "START n0=node(1) WHERE ((n0.active = true) and (n0.deleted = null)) RETURN n0"

    def test_property_to_property_comparison(self) -> None:
        def block(q: Cypher) -> Any:
            a = q.node(1)
            b = q.node(2)
            a["age"] >= b["age"]
            return a

        assert cypher(block) == "START n0=node(1),n1=node(2) WHERE (n0.age >= n1.age) RETURN n0"

    def test_negation(self) -> None:
        def block(q: Cypher) -> Any:
            n = q.node(1)
            ~(n["a"] < 1)
            return n

        assert cypher(block) == "START n0=node(1) WHERE not (n0.a < 1) RETURN n0"

    def test_negation_inside_combination(self) -> None:
        def block(q: Cypher) -> Any:
            n = q.node(1)
            (n["a"] < 1).not_() & (n["b"] > 2)
            return n

        assert cypher(block) == "START n0=node(1) WHERE (not (n0.a < 1) and (n0.b > 2)) RETURN n0"

    def test_negation_keeps_original_and_position(self) -> None:
        seen: dict[str, Any] = {}

        def block(q: Cypher) -> Any:
            n = q.node(1)
            first = n["a"] < 1
            n["b"] > 2
            seen["first"] = first
            seen["negated"] = -first
            return n

        query = Cypher(block)
        first, negated = seen["first"], seen["negated"]
        assert first.negated is False
        assert str(first) == "(n0.a < 1)"
        assert negated.negated is True
        assert query.expressions[1] is negated
        assert first not in query.expressions
        assert str(query) == "START n0=node(1) WHERE not (n0.a < 1) (n0.b > 2) RETURN n0"

    def test_negating_absorbed_operand_adds_no_fragment(self) -> None:
        seen: dict[str, Any] = {}

        def block(q: Cypher) -> Any:
            n = q.node(1)
            a = n["a"] < 1
            a & (n["b"] > 2)
            seen["negated"] = ~a
            return n

        query = Cypher(block)
        assert seen["negated"] not in query.expressions
        assert str(seen["negated"]) == "not (n0.a < 1)"
        assert str(query) == "START n0=node(1) WHERE ((n0.a < 1) and (n0.b > 2)) RETURN n0"

    def test_negated_absorbed_operand_can_be_combined(self) -> None:
        def block(q: Cypher) -> Any:
            n = q.node(1)
            a = n["a"] < 1
            a & (n["b"] > 2)
            ~a | (n["c"] == 3)
            return n

        assert cypher(block) == (
            "START n0=node(1) WHERE ((n0.a < 1) and (n0.b > 2)) (not (n0.a < 1) or (n0.c = 3)) RETURN n0"
        )

    def test_regex_match(self) -> None:
        def block(q: Cypher) -> Any:
            n = q.node(1)
            n["name"].matches("A.*")
            return n

        assert cypher(block) == "START n0=node(1) WHERE (n0.name =~ /A.*/) RETURN n0"

    def test_compiled_pattern_forces_regex(self) -> None:
        import re

        def block(q: Cypher) -> Any:
            n = q.node(1)
            n["name"] == re.compile("B.*")
            return n

        assert cypher(block) == "START n0=node(1) WHERE (n0.name =~ /B.*/) RETURN n0"

    def test_relationship_property(self) -> None:
        def block(q: Cypher) -> Any:
            r = q.rel("r")
            q.node(1).outgoing(r).outgoing("x")
            r["since"] < 2000
            return r

        assert cypher(block) == "START n0=node(1) MATCH (n0)-[r]->(x) WHERE (r.since < 2000) RETURN r"

    def test_raw_where(self) -> None:
        def block(q: Cypher) -> str:
            q.node(3)
            q.where("n0.age > 3")
            return "n0"

        assert cypher(block) == "START n0=node(3) WHERE n0.age > 3 RETURN n0"

    def test_filter_has_no_truth_value(self) -> None:
        def block(q: Cypher) -> None:
            n = q.node(1)
            if n["a"] < 1:
                pass

        with pytest.raises(TypeError):
            Cypher(block)


# =============================================================================
# Returns and rendering
# =============================================================================


class TestReturnAndRendering:
    def test_return_list(self) -> None:
        def block(q: Cypher) -> list[str]:
            q.node(3).outgoing_to("x")
            return ["n0", "x"]

        assert cypher(block) == "START n0=node(3) MATCH (n0)-->(x) RETURN n0,x"

    def test_explicit_ret_is_not_duplicated(self) -> None:
        def block(q: Cypher) -> Any:
            q.node(3)
            return q.ret("n0")

        assert cypher(block) == "START n0=node(3) RETURN n0"

    def test_block_returning_dsl_adds_no_return(self) -> None:
        def block(q: Cypher) -> Cypher:
            q.node(3)
            return q

        assert cypher(block) == "START n0=node(3)"

    def test_kinds_group_in_first_seen_order(self) -> None:
        def block(q: Cypher) -> str:
            q.ret("a")
            q.node(1)
            return "b"

        assert cypher(block) == "RETURN a,b START n1=node(1)"

    def test_rendering_is_idempotent(self) -> None:
        def block(q: Cypher) -> Any:
            n = q.node(3)
            n.outgoing("r").outgoing("x")
            (n["a"] < 1) & (n["b"] > 2)
            return "x"

        query = Cypher(block)
        assert query.to_cypher() == query.to_cypher() == str(query)


# =============================================================================
# Misuse
# =============================================================================


class TestErrors:
    def test_node_with_unknown_argument(self) -> None:
        with pytest.raises(UnknownArgumentError) as exc_info:
            Cypher(lambda q: q.node(1.5))
        assert exc_info.value.code == ErrorCode.UNKNOWN_ARGUMENT

    @pytest.mark.parametrize("args", [(), (3.5,), (None,)])
    def test_rel_with_unknown_argument(self, args: tuple[Any, ...]) -> None:
        with pytest.raises(UnknownArgumentError):
            Cypher(lambda q: q.rel(*args))

    def test_lookup_without_index(self, index_resolver: Any) -> None:
        with pytest.raises(MissingIndexError) as exc_info:
            Cypher(lambda q: q.lookup(index_resolver, "age", 3))
        assert exc_info.value.key == "age"
        assert "No index on IndexedPerson property age" in str(exc_info.value)
