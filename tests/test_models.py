import json

import pytest

from arduino_cloud_compiler.models import ArduinoCommand, CommandResponse


def test_to_dict_holds_every_field():
    response = CommandResponse(
        success=True, output="done", error=None, command="board", args=["list"]
    )
    assert response.to_dict() == {
        "success": True,
        "output": "done",
        "error": None,
        "command": "board",
        "args": ["list"],
    }


def test_to_dict_is_json_serialisable_round_trip():
    response = CommandResponse(False, "", "boom", "compile", ["--fqbn", "x:y:z", "s"])
    restored = CommandResponse(**json.loads(json.dumps(response.to_dict())))
    assert restored == response


def test_to_dict_args_is_a_copy():
    response = CommandResponse(True, "", None, "core", ["list"])
    data = response.to_dict()
    data["args"].append("extra")
    assert response.args == ["list"]


def test_failure_builds_unsuccessful_response():
    response = CommandResponse.failure("core", "Missing core name", ["install"])
    assert response.success is False
    assert response.output == ""
    assert response.error == "Missing core name"
    assert response.command == "core"
    assert response.args == ["install"]


def test_failure_with_no_args():
    response = CommandResponse.failure("upload", "Missing port", [])
    assert response.args == []
    assert response.to_dict()["error"] == "Missing port"


def test_from_dict_reads_command_and_args():
    command = ArduinoCommand.from_dict({"command": "board", "args": ["listall"]})
    assert command == ArduinoCommand("board", ["listall"])


def test_from_dict_ignores_unknown_fields():
    command = ArduinoCommand.from_dict({"command": "core", "args": [], "x": 1})
    assert command.command == "core"
    assert command.args == []


@pytest.mark.parametrize(
    "data",
    [
        {"args": []},
        {"command": "board"},
        {"command": 5, "args": []},
        {"command": "board", "args": "list"},
        {"command": "board", "args": [1, 2]},
        ["command", "args"],
    ],
)
def test_from_dict_rejects_bad_input(data):
    with pytest.raises(ValueError):
        ArduinoCommand.from_dict(data)