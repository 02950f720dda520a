"""
Tests for action declaration, collection and safe execution.
"""

from fortnight.actions import Action, ActionResult, ActionSet, ActionSpec, action


class Wallet:
    @action(
        "balance",
        "Return a balance",
        parameters={
            "type": "object",
            "properties": {"token": {"type": "string"}},
            "required": ["token"],
        },
    )
    def balance(self, token: str):
        return {"token": token, "amount": 42}

    @action("explode", "Always fails", error_prefix="Error exploding")
    def explode(self):
        raise RuntimeError("boom")

    def helper(self):
        return "not an action"


class OverridingWallet(Wallet):
    def balance(self, token: str):
        return {"token": token, "amount": 0}


def test_from_object_collects_decorated_methods():
    actions = ActionSet.from_object(Wallet())

    assert sorted(actions.names) == ["balance", "explode"]
    assert "helper" not in actions
    assert len(actions) == 2


def test_plain_return_is_wrapped_in_ok():
    actions = ActionSet.from_object(Wallet())

    result = actions.execute("balance", {"token": "EGLD"})

    assert result == ActionResult(success=True, data={"token": "EGLD", "amount": 42})


def test_missing_parameter_is_reported():
    actions = ActionSet.from_object(Wallet())

    result = actions.execute("balance", {})

    assert not result.success
    assert result.message.startswith("Invalid parameters for balance:")


def test_unexpected_parameter_is_reported():
    actions = ActionSet.from_object(Wallet())

    result = actions.execute("balance", {"token": "EGLD", "extra": 1})

    assert not result.success
    assert result.message.startswith("Invalid parameters for balance:")


def test_exception_becomes_prefixed_failure(caplog):
    actions = ActionSet.from_object(Wallet())

    result = actions.execute("explode")

    assert result.to_dict() == {"success": False, "message": "Error exploding: boom"}
    assert "boom" in caplog.text


def test_default_error_prefix():
    spec = ActionSpec(name="x", description="")
    decorated = action("transfer", "Transfer")(lambda: None)

    assert spec.error_prefix == ""
    assert decorated.__action_spec__.error_prefix == "Error executing transfer"


def test_subclass_override_without_decorator_keeps_action():
    actions = ActionSet.from_object(OverridingWallet())

    result = actions.execute("balance", {"token": "MEX"})

    assert result.data == {"token": "MEX", "amount": 0}


def test_schemas():
    actions = ActionSet.from_object(Wallet())
    schema = actions.get("balance").to_schema()

    assert schema["name"] == "balance"
    assert schema["parameters"]["required"] == ["token"]
    assert actions.get("explode").parameters == {"type": "object", "properties": {}}


def test_result_to_dict_shapes():
    assert ActionResult.ok({"a": 1}, "done").to_dict() == {"success": True, "a": 1, "message": "done"}
    assert ActionResult.ok([1, 2]).to_dict() == {"success": True, "data": [1, 2]}
    assert ActionResult.fail("nope").to_dict() == {"success": False, "message": "nope"}
    assert str(ActionResult.fail("nope")) == "Error: nope"


def test_register_manual_action():
    spec = ActionSpec(name="ping", description="Ping")
    actions = ActionSet().register(Action(spec, lambda: ActionResult.ok(message="pong")))

    assert actions.execute("ping").message == "pong"
