"""Pytest fixtures for parse-core tests."""

import pytest

from adapters.solidity_adapter import SolidityAdapter

from sol_ast import (
    contract,
    elementary,
    enum,
    event,
    function,
    import_directive,
    mapping,
    modifier,
    parameter,
    pragma,
    source_unit,
    state_var,
    struct,
    user_type,
    variable,
)


@pytest.fixture
def adapter() -> SolidityAdapter:
    return SolidityAdapter(stop_at_elided_slot=False)


@pytest.fixture
def token_unit() -> dict:
    """
    pragma solidity ^0.4.24;
    import "./SafeMath.sol";

    interface IERC20 { function totalSupply() external view returns (uint256); }

    library SafeMath { function add(uint256 a, uint256 b) internal pure returns (uint256) { } }

    contract Token is IERC20 {
        using SafeMath for uint256;
        struct Holder { address account; Ledger.Entry entry; }
        enum Status { Active, Frozen }
        mapping(address => uint256) public balances;
        Ledger private ledger;
        event Transfer(address from, address to, uint256 value);
        modifier onlyOwner() { _; }
        constructor(Ledger _ledger) public { }
        function () external payable { }
        function totalSupply() external view returns (uint256) { }
    }
    """
    return source_unit(
        pragma(),
        import_directive("./SafeMath.sol"),
        contract(
            "IERC20",
            function(
                "totalSupply",
                returns=[parameter(None, elementary("uint256"))],
                body=None,
                visibility="external",
                state_mutability="view",
            ),
            kind="interface",
        ),
        contract(
            "SafeMath",
            function(
                "add",
                parameters=[parameter("a", elementary("uint256")), parameter("b", elementary("uint256"))],
                returns=[parameter(None, elementary("uint256"))],
                visibility="internal",
                state_mutability="pure",
            ),
            kind="library",
        ),
        contract(
            "Token",
            {"type": "UsingForDeclaration", "typeName": elementary("uint256"), "libraryName": "SafeMath"},
            struct(
                "Holder",
                variable("account", elementary("address")),
                variable("entry", user_type("Ledger.Entry")),
            ),
            enum("Status", "Active", "Frozen"),
            state_var("balances", mapping(elementary("address"), elementary("uint256")), "public"),
            state_var("ledger", user_type("Ledger"), "private"),
            event(
                "Transfer",
                [
                    variable("from", elementary("address")),
                    variable("to", elementary("address")),
                    variable("value", elementary("uint256")),
                ],
            ),
            modifier("onlyOwner"),
            function("", parameters=[parameter("_ledger", user_type("Ledger"))], is_constructor=True),
            function("", visibility="external", state_mutability="payable"),
            function(
                "totalSupply",
                returns=[parameter(None, elementary("uint256"))],
                visibility="external",
                state_mutability="view",
            ),
            bases=["IERC20"],
        ),
    )
