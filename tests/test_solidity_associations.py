import logging

from adapters.solidity_adapter import SolidityAdapter
from cir.model import Association, ClassModel

from sol_ast import (
    array_of,
    block,
    contract,
    do_while_loop,
    elementary,
    enum,
    event,
    expression_statement,
    for_loop,
    function,
    if_statement,
    local_vars,
    mapping,
    modifier,
    parameter,
    source_unit,
    state_var,
    struct,
    user_type,
    using_for,
    variable,
    while_loop,
)


def associations_of(adapter, *sub_nodes):
    [c] = adapter.parse_ast(source_unit(contract("C", *sub_nodes)), "C.sol")
    return c.associations


def test_state_variable_of_user_type_is_storage(adapter):
    assert associations_of(adapter, state_var("token", user_type("Token"))) == [
        Association("Token", "storage")
    ]


def test_state_variable_library_type_is_truncated(adapter):
    assert associations_of(adapter, state_var("data", user_type("Set.Data"))) == [
        Association("Set", "storage")
    ]


def test_local_variable_of_user_type_is_memory(adapter):
    fn = function("f", body=[local_vars(variable("t", user_type("Lib.Token")))])

    assert associations_of(adapter, fn) == [Association("Lib", "memory")]


def test_parameters_and_return_parameters_are_memory(adapter):
    fn = function(
        "swap",
        parameters=[parameter("from", user_type("Pool")), parameter("amount", elementary("uint256"))],
        returns=[parameter(None, user_type("Receipt"))],
    )

    assert associations_of(adapter, fn) == [
        Association("Pool", "memory"),
        Association("Receipt", "memory"),
    ]


def test_mapping_value_user_type_is_memory_and_not_truncated(adapter):
    sub_nodes = [
        state_var("balances", mapping(elementary("address"), user_type("Vault.Balance"))),
        state_var("owners", mapping(user_type("Key"), elementary("bool"))),
    ]

    assert associations_of(adapter, *sub_nodes) == [
        Association("Vault.Balance", "memory"),
        Association("Key", "memory"),
    ]


def test_array_and_nested_mapping_values_are_not_followed(adapter):
    sub_nodes = [
        state_var("items", array_of(user_type("Item"))),
        state_var("nested", mapping(elementary("address"), mapping(elementary("uint256"), user_type("Item")))),
    ]

    assert associations_of(adapter, *sub_nodes) == []


def test_using_for_adds_memory_association(adapter):
    assert associations_of(adapter, using_for("SafeMath", elementary("uint256"))) == [
        Association("SafeMath", "memory")
    ]


def test_struct_members_are_memory(adapter):
    s = struct("Order", variable("buyer", elementary("address")), variable("item", user_type("Item")))

    assert associations_of(adapter, s) == [Association("Item", "memory")]


def test_event_and_modifier_parameters(adapter):
    sub_nodes = [
        event("Deposited", [variable("vault", user_type("Vault"))]),
        modifier("onlyRole", [parameter("role", user_type("Roles.Role"))]),
    ]

    assert associations_of(adapter, *sub_nodes) == [
        Association("Vault", "memory"),
        Association("Roles", "memory"),
    ]


def test_enums_never_add_associations(adapter):
    assert associations_of(adapter, enum("Token", "Vault", "Ledger")) == []


def test_bodiless_function_walks_signature_only(adapter):
    fn = function("f", parameters=[parameter("p", user_type("P"))], body=None)

    assert associations_of(adapter, fn) == [Association("P", "memory")]


def test_control_flow_bodies_are_walked(adapter):
    body = [
        expression_statement(),
        block(local_vars(variable("a", user_type("A")))),
        for_loop(block(local_vars(variable("b", user_type("B"))))),
        while_loop(block(local_vars(variable("c", user_type("C2"))))),
        do_while_loop(block(local_vars(variable("d", user_type("D"))))),
        if_statement(
            block(local_vars(variable("e", user_type("E")))),
            block(local_vars(variable("f", user_type("F")))),
        ),
        if_statement(None, block(local_vars(variable("g", user_type("G"))))),
    ]

    assert [a.target_class_name for a in associations_of(adapter, function("f", body=body))] == [
        "A",
        "B",
        "C2",
        "D",
        "E",
        "F",
        "G",
    ]


def test_nested_blocks_are_walked_depth_first(adapter):
    body = [
        if_statement(
            block(
                for_loop(block(local_vars(variable("inner", user_type("Inner"))))),
                local_vars(variable("after", user_type("After"))),
            )
        ),
        local_vars(variable("last", user_type("Last"))),
    ]

    assert [a.target_class_name for a in associations_of(adapter, function("f", body=body))] == [
        "Inner",
        "After",
        "Last",
    ]


def test_if_without_block_branches_is_skipped(adapter):
    body = [if_statement(expression_statement(), expression_statement())]

    assert associations_of(adapter, function("f", body=body)) == []


def test_loop_with_single_statement_body_warns(adapter, caplog):
    body = [for_loop(expression_statement()), local_vars(variable("x", user_type("X")))]

    with caplog.at_level(logging.WARNING, logger="parse_core"):
        associations = associations_of(adapter, function("f", body=body))

    assert associations == [Association("X", "memory")]
    assert "Invalid nodes array" in caplog.text


def test_repeated_references_are_kept(adapter):
    body = [
        local_vars(variable("a", user_type("T"))),
        local_vars(variable("b", user_type("T"))),
    ]

    assert associations_of(adapter, function("f", parameters=[parameter("t", user_type("T"))], body=body)) == [
        Association("T", "memory"),
        Association("T", "memory"),
        Association("T", "memory"),
    ]


def test_var_declaration_without_type_is_skipped(adapter):
    body = [local_vars(variable("x", None), variable("y", user_type("Y")))]

    assert associations_of(adapter, function("f", body=body)) == [Association("Y", "memory")]


def test_elided_tuple_slot_is_skipped_by_default(adapter):
    body = [local_vars(variable("lad", user_type("Lad")), None, None, variable("ink", user_type("Ink")))]

    assert associations_of(adapter, function("f", body=body)) == [
        Association("Lad", "memory"),
        Association("Ink", "memory"),
    ]


def test_elided_tuple_slot_can_stop_the_list():
    adapter = SolidityAdapter(stop_at_elided_slot=True)
    body = [
        local_vars(variable("lad", user_type("Lad")), None, variable("ink", user_type("Ink"))),
        local_vars(variable("next", user_type("Next"))),
    ]

    # Only the rest of the tuple is dropped, the following statement is still walked
    assert associations_of(adapter, function("f", body=body)) == [
        Association("Lad", "memory"),
        Association("Next", "memory"),
    ]


def test_missing_type_name_path_becomes_empty_target(adapter):
    assert associations_of(adapter, state_var("x", {"type": "UserDefinedTypeName", "namePath": None})) == [
        Association("", "storage")
    ]


def test_add_associations_rejects_non_list(adapter, caplog):
    class_model = ClassModel(name="C")

    with caplog.at_level(logging.WARNING, logger="parse_core"):
        adapter.add_associations(None, class_model)
        adapter.add_associations("not a list", class_model)

    assert class_model.associations == []
    assert caplog.text.count("Invalid nodes array") == 2
