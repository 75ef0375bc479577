import dataclasses

import pytest
from behavioral.interpreter.expression_tree import Literal, Sum, Product, evaluate, render, depth


@pytest.mark.unit
def test_sum_times_literal_evaluates_to_sixteen():
    tree = Product(Sum(Literal(3), Literal(5)), Literal(2))
    assert evaluate(tree) == 16


@pytest.mark.unit
@pytest.mark.parametrize("a, b, c", [(0, 0, 0), (1, 2, 3), (-4, 7, 5), (10, -10, 99), (-3, -2, -1)])
def test_product_of_sum_matches_arithmetic(a, b, c):
    tree = Product(Sum(Literal(a), Literal(b)), Literal(c))
    assert evaluate(tree) == (a + b) * c


@pytest.mark.unit
def test_literal_evaluates_to_itself():
    assert evaluate(Literal(42)) == 42


@pytest.mark.unit
def test_wide_integers_do_not_wrap():
    big = 2 ** 64
    tree = Product(Sum(Literal(big), Literal(1)), Literal(big))
    assert evaluate(tree) == (big + 1) * big
    assert evaluate(tree) > 2 ** 127


@pytest.mark.unit
def test_evaluation_is_deterministic_and_leaves_tree_unchanged():
    tree = Sum(Product(Literal(2), Literal(3)), Literal(4))
    snapshot = repr(tree)
    assert [evaluate(tree) for _ in range(5)] == [10] * 5
    assert repr(tree) == snapshot


@pytest.mark.unit
def test_nodes_are_immutable():
    node = Sum(Literal(1), Literal(2))
    with pytest.raises(dataclasses.FrozenInstanceError):
        node.left = Literal(5)
    with pytest.raises(dataclasses.FrozenInstanceError):
        Literal(1).value = 2


@pytest.mark.unit
def test_literal_rejects_non_integers():
    with pytest.raises(TypeError):
        Literal(1.5)
    with pytest.raises(TypeError):
        Literal(True)
    with pytest.raises(TypeError):
        Literal("3")


@pytest.mark.unit
def test_operators_reject_non_expression_children():
    with pytest.raises(TypeError):
        Sum(Literal(1), 2)
    with pytest.raises(TypeError):
        Product(None, Literal(1))


@pytest.mark.unit
def test_evaluate_rejects_foreign_objects():
    with pytest.raises(TypeError):
        evaluate(3)


@pytest.mark.unit
def test_render_is_fully_parenthesized():
    tree = Product(Sum(Literal(3), Literal(5)), Literal(2))
    assert render(tree) == "((3 + 5) * 2)"
    assert str(tree) == "((3 + 5) * 2)"
    assert str(Literal(-7)) == "-7"


@pytest.mark.unit
def test_depth():
    assert depth(Literal(1)) == 1
    assert depth(Sum(Literal(1), Product(Literal(2), Literal(3)))) == 3


@pytest.mark.unit
def test_structurally_equal_trees_compare_equal():
    assert Sum(Literal(1), Literal(2)) == Sum(Literal(1), Literal(2))
    assert Sum(Literal(1), Literal(2)) != Product(Literal(1), Literal(2))


def _left_deep_sum(terms):
    tree = Literal(1)
    for _ in range(terms - 1):
        tree = Sum(tree, Literal(1))
    return tree


@pytest.mark.unit
def test_deep_left_chain_evaluates_without_recursion_limit():
    tree = _left_deep_sum(5000)
    assert evaluate(tree) == 5000
    assert depth(tree) == 5000


@pytest.mark.unit
def test_deep_right_chain_evaluates_without_recursion_limit():
    tree = Literal(1)
    for i in range(5999):
        tree = Product(Literal(1), tree) if i % 2 else Sum(Literal(0), tree)
    assert evaluate(tree) == 1
    assert depth(tree) == 6000


@pytest.mark.unit
def test_deep_chain_renders():
    text = render(_left_deep_sum(3000))
    assert text.startswith("(" * 2999 + "1 + 1)")
    assert text.count("+") == 2999
